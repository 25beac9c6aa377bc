import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol

from carrier_contacts.accumulator import RunAccumulator
from carrier_contacts.config import Settings
from carrier_contacts.schemas.contact import LookupOutcome, OutcomeStatus
from carrier_contacts.services.pipeline import build_lookup_url

logger = logging.getLogger(__name__)

# Waves are never dispatched back to back
MIN_WAVE_DELAY_MS = 50

BatchCallback = Callable[[int, int], Awaitable[None]]


class Pipeline(Protocol):
    async def process(self, identifier: str) -> LookupOutcome: ...


class BatchScheduler:
    """Sequential batches, each split into waves of at most ``concurrency``.

    A wave runs fully in parallel and is merged into the accumulator in
    dispatch order once every identifier in it has finished.
    """

    def __init__(self, pipeline: Pipeline, settings: Settings):
        self._pipeline = pipeline
        self._settings = settings

    async def run(
        self,
        identifiers: Sequence[str],
        accumulator: RunAccumulator,
        on_batch_end: BatchCallback | None = None,
    ) -> None:
        total = len(identifiers)
        batch_size = self._settings.batch_size
        concurrency = self._settings.concurrency
        wave_delay = max(self._settings.delay, MIN_WAVE_DELAY_MS) / 1000

        for start in range(0, total, batch_size):
            end = min(total, start + batch_size)
            logger.info("Processing batch %d-%d of %d", start + 1, end, total)

            for wave_start in range(start, end, concurrency):
                wave = identifiers[wave_start:min(end, wave_start + concurrency)]
                accumulator.merge(await self._dispatch(wave))
                if wave_start + len(wave) < total:
                    await asyncio.sleep(wave_delay)

            if on_batch_end is not None:
                await on_batch_end(start, end)

            if end < total and self._settings.wait_seconds > 0:
                logger.info("Waiting %ds before next batch", self._settings.wait_seconds)
                await asyncio.sleep(self._settings.wait_seconds)

    async def _dispatch(self, wave: Sequence[str]) -> list[LookupOutcome]:
        results = await asyncio.gather(
            *(self._pipeline.process(identifier) for identifier in wave),
            return_exceptions=True,
        )

        outcomes: list[LookupOutcome] = []
        for identifier, res in zip(wave, results):
            if isinstance(res, asyncio.CancelledError):
                raise res
            if isinstance(res, BaseException):
                logger.error("Unexpected failure for MC %s: %s", identifier, res)
                outcomes.append(
                    LookupOutcome(
                        identifier=identifier,
                        status=OutcomeStatus.error,
                        url=build_lookup_url(identifier),
                        error=str(res),
                    )
                )
            else:
                outcomes.append(res)
        return outcomes
