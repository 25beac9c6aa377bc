import asyncio
import logging

import httpx
from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from carrier_contacts.config import RunMode, Settings
from carrier_contacts.dependencies import HttpClientDep, JobStoreDep, SettingsDep
from carrier_contacts.jobs import JobStore
from carrier_contacts.schemas.responses import JobStatusResponse, JobSubmittedResponse
from carrier_contacts.services.runner import RunController, load_identifiers

logger = logging.getLogger(__name__)

router = APIRouter()

# Strong references so running jobs are not garbage collected
_background_tasks: set[asyncio.Task] = set()


class RunRequest(BaseModel):
    identifiers: list[str] | None = None
    mode: RunMode | None = None


async def _run_job(
    job_id: str,
    client: httpx.AsyncClient,
    settings: Settings,
    store: JobStore,
    identifiers: list[str],
) -> None:
    store.mark_running(job_id)
    try:
        result = await RunController(client, settings).run(identifiers)
        store.mark_completed(job_id, result)
    except Exception as exc:
        logger.exception("Run job %s failed", job_id)
        store.mark_failed(job_id, str(exc))


@router.post("/runs", response_model=JobSubmittedResponse, status_code=202)
async def start_run(
    settings: SettingsDep,
    store: JobStoreDep,
    client: HttpClientDep,
    request: RunRequest | None = None,
) -> JobSubmittedResponse:
    existing = store.active_job()
    if existing:
        return JSONResponse(content={
            "job_id": existing.job_id,
            "status": "already_running",
            "message": "A run is already in progress",
        })

    if request and request.identifiers is not None:
        identifiers = [i.strip() for i in request.identifiers if i.strip()]
    else:
        identifiers = await asyncio.to_thread(load_identifiers, settings.input_file)

    if request and request.mode is not None:
        settings = settings.model_copy(update={"mode": request.mode})

    job = store.create_job(identifiers=len(identifiers))
    task = asyncio.create_task(_run_job(job.job_id, client, settings, store, identifiers))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return JobSubmittedResponse(
        job_id=job.job_id,
        status=job.status,
        message="Run submitted",
    )


@router.get("/jobs/{job_id}", response_model=JobStatusResponse)
async def get_job_status(job_id: str, store: JobStoreDep) -> JobStatusResponse:
    job = store.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return JobStatusResponse(**job.model_dump())
