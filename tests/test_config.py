import pytest
from pydantic import ValidationError

from carrier_contacts.config import RunMode, Settings


def _clear(monkeypatch):
    for name in ("CONCURRENCY", "DELAY", "BATCH_SIZE", "WAIT_SECONDS", "MODE"):
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch):
    _clear(monkeypatch)
    s = Settings(_env_file=None)
    assert s.concurrency == 6
    assert s.delay == 300
    assert s.batch_size == 500
    assert s.wait_seconds == 0
    assert s.mode == RunMode.both
    assert s.max_retries == 3
    assert s.backoff_base == 2.0


def test_reads_environment(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("CONCURRENCY", "4")
    monkeypatch.setenv("DELAY", "100")
    monkeypatch.setenv("BATCH_SIZE", "50")
    monkeypatch.setenv("WAIT_SECONDS", "30")
    monkeypatch.setenv("MODE", "urls")

    s = Settings(_env_file=None)

    assert (s.concurrency, s.delay, s.batch_size, s.wait_seconds) == (4, 100, 50, 30)
    assert s.mode == RunMode.urls


def test_invalid_mode(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("MODE", "everything")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_concurrency_must_be_positive(monkeypatch):
    _clear(monkeypatch)
    with pytest.raises(ValidationError):
        Settings(_env_file=None, concurrency=0)


def test_settings_are_frozen(monkeypatch):
    _clear(monkeypatch)
    s = Settings(_env_file=None)
    with pytest.raises(ValidationError):
        s.concurrency = 10
