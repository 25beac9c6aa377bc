import csv
import io
import os
import tempfile
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

from carrier_contacts.schemas.contact import ContactRecord


CSV_COLUMNS = ("email", "registryNumber", "phone", "sourceURL")

SNAPSHOT_PREFIX = "contacts_batch_"
LATEST_NAME = "contacts_latest.csv"
URLS_PREFIX = "valid_urls_"


def serialize(records: Iterable[ContactRecord]) -> str:
    """Render records as CSV with every field quoted and ``\\n`` line endings."""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for record in records:
        row = record.model_dump(by_alias=True)
        writer.writerow([row[column] for column in CSV_COLUMNS])
    return buf.getvalue()


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")


def atomic_write_text(path: Path, content: str) -> None:
    """Write to a temp file in the same directory, then ``os.replace`` it in."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class ResultSink:
    """Checkpoint writer. Every checkpoint is a full dump of the records so far."""

    def __init__(self, output_dir: str | Path, keep_snapshots: bool = True):
        self._output_dir = Path(output_dir)
        self._keep_snapshots = keep_snapshots
        self.checkpoints: list[Path] = []

    @property
    def latest_path(self) -> Path:
        return self._output_dir / LATEST_NAME

    def _unique_path(self, prefix: str, suffix: str) -> Path:
        path = self._output_dir / f"{prefix}{_timestamp()}{suffix}"
        n = 1
        while path.exists():
            path = self._output_dir / f"{prefix}{_timestamp()}-{n}{suffix}"
            n += 1
        return path

    def write_checkpoint(self, records: list[ContactRecord]) -> Path:
        content = serialize(records)
        self._output_dir.mkdir(parents=True, exist_ok=True)

        atomic_write_text(self.latest_path, content)
        if not self._keep_snapshots:
            return self.latest_path

        snapshot = self._unique_path(SNAPSHOT_PREFIX, ".csv")
        snapshot.write_text(content, encoding="utf-8", newline="")
        self.checkpoints.append(snapshot)
        return snapshot

    def write_urls(self, urls: list[str]) -> Path:
        self._output_dir.mkdir(parents=True, exist_ok=True)
        path = self._unique_path(URLS_PREFIX, ".txt")
        path.write_text("\n".join(urls), encoding="utf-8")
        return path
