from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from carrier_contacts.config import Settings, configure_logging
from carrier_contacts.exceptions.custom import InputFileError
from carrier_contacts.exceptions.handlers import input_file_error_handler
from carrier_contacts.jobs import JobStore
from carrier_contacts.routers.runs import router as runs_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()
    configure_logging(settings.log_level)

    async with httpx.AsyncClient(timeout=settings.fetch_timeout) as client:
        app.state.settings = settings
        app.state.http_client = client
        app.state.job_store = JobStore()
        yield


app = FastAPI(title="Carrier Contacts", lifespan=lifespan)

app.add_exception_handler(InputFileError, input_file_error_handler)

app.include_router(runs_router)
