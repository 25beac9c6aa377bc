from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class RunSummary(BaseModel):
    total: int
    valid: int
    invalid: int
    errors: int
    records: int
    checkpoints: list[str] = []
    latest_file: str | None = None
    urls_file: str | None = None


class JobSubmittedResponse(BaseModel):
    job_id: str
    status: str
    message: str


class JobStatusResponse(BaseModel):
    job_id: str
    status: str
    created_at: datetime
    finished_at: datetime | None = None
    identifiers: int | None = None
    result: RunSummary | None = None
    error: str | None = None
