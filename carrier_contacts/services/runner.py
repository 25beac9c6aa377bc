import asyncio
import logging
from pathlib import Path

import httpx

from carrier_contacts.accumulator import RunAccumulator
from carrier_contacts.config import RunMode, Settings
from carrier_contacts.exceptions.custom import InputFileError
from carrier_contacts.schemas.responses import RunSummary
from carrier_contacts.services.fetcher import FetchClient
from carrier_contacts.services.pipeline import TraversalPipeline
from carrier_contacts.services.scheduler import BatchScheduler
from carrier_contacts.services.sink import ResultSink

logger = logging.getLogger(__name__)


def load_identifiers(path: str | Path) -> list[str]:
    """Read one MC number per line, skipping blank lines."""
    p = Path(path)
    if not p.is_file():
        raise InputFileError(str(p))
    raw = p.read_text(encoding="utf-8")
    return [line.strip() for line in raw.splitlines() if line.strip()]


class RunController:
    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Settings,
        sink: ResultSink | None = None,
    ):
        self._settings = settings
        fetcher = FetchClient(client, backoff_base=settings.backoff_base)
        self._scheduler = BatchScheduler(TraversalPipeline(fetcher, settings), settings)
        self._sink = sink or ResultSink(
            settings.output_dir, keep_snapshots=settings.keep_snapshots
        )
        self.accumulator = RunAccumulator()

    async def _checkpoint(self, start: int, end: int) -> None:
        records = list(self.accumulator.records)
        path = await asyncio.to_thread(self._sink.write_checkpoint, records)
        logger.info("CSV written: %s (rows=%d, through #%d)", path, len(records), end)

    async def run(self, identifiers: list[str] | None = None) -> RunSummary:
        if identifiers is None:
            identifiers = load_identifiers(self._settings.input_file)
        logger.info("MCs loaded: %d (mode=%s)", len(identifiers), self._settings.mode)

        await self._scheduler.run(identifiers, self.accumulator, on_batch_end=self._checkpoint)

        urls_file: Path | None = None
        if self._settings.mode == RunMode.urls:
            urls_file = await asyncio.to_thread(
                self._sink.write_urls, list(self.accumulator.valid_urls)
            )
            logger.info("Valid URLs saved: %s (%d)", urls_file, len(self.accumulator.valid_urls))

        acc = self.accumulator
        logger.info(
            "Run finished: valid=%d invalid=%d errors=%d records=%d",
            len(acc.valid_urls), acc.invalid, acc.errors, len(acc.records),
        )
        return RunSummary(
            total=len(identifiers),
            valid=len(acc.valid_urls),
            invalid=acc.invalid,
            errors=acc.errors,
            records=len(acc.records),
            checkpoints=[str(p) for p in self._sink.checkpoints],
            latest_file=str(self._sink.latest_path) if identifiers else None,
            urls_file=str(urls_file) if urls_file else None,
        )


async def run_extraction(
    settings: Settings, identifiers: list[str] | None = None
) -> RunSummary:
    """Run with a dedicated HTTP client. Used by the command line entry point."""
    if identifiers is None:
        identifiers = load_identifiers(settings.input_file)
    async with httpx.AsyncClient(timeout=settings.fetch_timeout) as client:
        return await RunController(client, settings).run(identifiers)
