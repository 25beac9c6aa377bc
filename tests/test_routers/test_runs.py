import asyncio
from unittest.mock import AsyncMock, call, patch

import respx
from httpx import Response

from carrier_contacts.services.pipeline import build_lookup_url


def _snapshot(mc: str) -> str:
    return f"<td>MC-{mc}</td><td>Phone: (555) 123-4567</td><td>Power Units: 4</td>"


async def _wait_for_job(client, job_id: str) -> dict:
    for _ in range(200):
        resp = await client.get(f"/jobs/{job_id}")
        body = resp.json()
        if body["status"] in ("completed", "failed"):
            return body
        await asyncio.sleep(0.02)
    raise AssertionError(f"job {job_id} did not finish")


async def test_run_with_identifiers(client):
    with respx.mock:
        respx.get(build_lookup_url("000001")).mock(
            return_value=Response(200, text="<html>Record Inactive</html>")
        )
        respx.get(build_lookup_url("000002")).mock(
            return_value=Response(200, text=_snapshot("000002"))
        )

        resp = await client.post("/runs", json={"identifiers": ["000001", " 000002 ", ""]})
        assert resp.status_code == 202
        job_id = resp.json()["job_id"]

        body = await _wait_for_job(client, job_id)

    assert body["status"] == "completed"
    assert body["identifiers"] == 2
    assert body["result"]["valid"] == 1
    assert body["result"]["invalid"] == 1
    assert body["result"]["records"] == 1
    assert len(body["result"]["checkpoints"]) == 1


async def test_run_urls_mode_override(client):
    with respx.mock:
        respx.get(build_lookup_url("000002")).mock(
            return_value=Response(200, text=_snapshot("000002"))
        )

        resp = await client.post("/runs", json={"identifiers": ["000002"], "mode": "urls"})
        body = await _wait_for_job(client, resp.json()["job_id"])

    assert body["status"] == "completed"
    assert body["result"]["urls_file"] is not None


async def test_run_reads_input_file(client, tmp_path):
    (tmp_path / "mc_list.txt").write_text("000002\n", encoding="utf-8")
    with respx.mock:
        respx.get(build_lookup_url("000002")).mock(
            return_value=Response(200, text=_snapshot("000002"))
        )

        resp = await client.post("/runs")
        assert resp.status_code == 202
        body = await _wait_for_job(client, resp.json()["job_id"])

    assert body["result"]["total"] == 1


async def test_run_missing_input_file(client):
    resp = await client.post("/runs")
    assert resp.status_code == 400
    assert "Input file not found" in resp.json()["detail"]


async def test_run_rejected_while_active(client):
    from carrier_contacts.main import app

    existing = app.state.job_store.create_job(identifiers=1)

    resp = await client.post("/runs", json={"identifiers": ["000002"]})

    assert resp.json() == {
        "job_id": existing.job_id,
        "status": "already_running",
        "message": "A run is already in progress",
    }


async def test_unknown_job(client):
    resp = await client.get("/jobs/nope")
    assert resp.status_code == 404


async def test_input_file_read_off_event_loop(client, tmp_path):
    from carrier_contacts.services.runner import load_identifiers

    input_file = tmp_path / "mc_list.txt"
    input_file.write_text("000002\n", encoding="utf-8")
    real_to_thread = asyncio.to_thread
    with patch(
        "carrier_contacts.routers.runs.asyncio.to_thread",
        new_callable=AsyncMock,
        side_effect=real_to_thread,
    ) as to_thread, respx.mock:
        respx.get(build_lookup_url("000002")).mock(
            return_value=Response(200, text=_snapshot("000002"))
        )

        resp = await client.post("/runs")
        body = await _wait_for_job(client, resp.json()["job_id"])

    assert to_thread.await_args_list[0] == call(load_identifiers, str(input_file))
    assert body["result"]["total"] == 1
