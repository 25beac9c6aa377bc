"""Tests for the in-memory run JobStore."""

from datetime import timedelta

from carrier_contacts.jobs import JobStatus, JobStore
from carrier_contacts.schemas.responses import RunSummary


def _summary() -> RunSummary:
    return RunSummary(total=2, valid=1, invalid=1, errors=0, records=1)


def test_create_and_get():
    store = JobStore()
    job = store.create_job(identifiers=5)

    assert store.get_job(job.job_id) is job
    assert job.status == JobStatus.pending
    assert job.identifiers == 5


def test_lifecycle_completed():
    store = JobStore()
    job = store.create_job()
    store.mark_running(job.job_id)
    assert job.status == JobStatus.running

    store.mark_completed(job.job_id, _summary())

    assert job.status == JobStatus.completed
    assert job.result.records == 1
    assert job.finished_at is not None


def test_lifecycle_failed():
    store = JobStore()
    job = store.create_job()
    store.mark_failed(job.job_id, "boom")

    assert job.status == JobStatus.failed
    assert job.error == "boom"


def test_active_job():
    store = JobStore()
    assert store.active_job() is None

    job = store.create_job()
    assert store.active_job() is job

    store.mark_completed(job.job_id, _summary())
    assert store.active_job() is None


def test_unknown_job_marks_are_ignored():
    store = JobStore()
    store.mark_running("missing")
    store.mark_failed("missing", "x")
    assert store.get_job("missing") is None


def test_evicts_earliest_finished_runs():
    store = JobStore(max_jobs=2)
    first = store.create_job()
    store.mark_completed(first.job_id, _summary())
    second = store.create_job()
    store.mark_failed(second.job_id, "boom")
    # first was created earlier but finished later
    first.finished_at = second.finished_at + timedelta(minutes=5)

    third = store.create_job()

    assert store.get_job(second.job_id) is None
    assert store.get_job(first.job_id) is first
    assert store.get_job(third.job_id) is third


def test_unfinished_run_is_never_evicted():
    store = JobStore(max_jobs=1)
    running = store.create_job()
    store.mark_running(running.job_id)

    store.create_job()

    assert store.get_job(running.job_id) is running
