import httpx
import pytest
from httpx import ASGITransport

from carrier_contacts.config import RunMode, Settings


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        input_file=str(tmp_path / "mc_list.txt"),
        output_dir=str(tmp_path / "output"),
        mode=RunMode.both,
        concurrency=6,
        delay=0,
        batch_size=500,
        wait_seconds=0,
        max_retries=3,
        backoff_base=0,
        hop_delay=0,
        fetch_timeout=5,
    )


@pytest.fixture
def mock_env(monkeypatch, tmp_path):
    monkeypatch.setenv("INPUT_FILE", str(tmp_path / "mc_list.txt"))
    monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "output"))
    monkeypatch.setenv("MODE", "both")
    monkeypatch.setenv("DELAY", "0")
    monkeypatch.setenv("BACKOFF_BASE", "0")
    monkeypatch.setenv("HOP_DELAY", "0")
    monkeypatch.setenv("WAIT_SECONDS", "0")


@pytest.fixture
async def client(mock_env):
    from carrier_contacts.main import app, lifespan

    async with lifespan(app):
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c
