from typing import Annotated

import httpx
from fastapi import Depends, Request

from carrier_contacts.config import Settings
from carrier_contacts.jobs import JobStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_job_store(request: Request) -> JobStore:
    return request.app.state.job_store


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


SettingsDep = Annotated[Settings, Depends(get_settings)]
JobStoreDep = Annotated[JobStore, Depends(get_job_store)]
HttpClientDep = Annotated[httpx.AsyncClient, Depends(get_http_client)]
