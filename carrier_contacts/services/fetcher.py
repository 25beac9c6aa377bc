import asyncio
import logging

import httpx

from carrier_contacts.exceptions.custom import FetchError

logger = logging.getLogger(__name__)

_USER_AGENT = "CarrierContacts/0.1 (+https://safer.fmcsa.dot.gov)"


class FetchClient:
    """GET pages as text, retrying transient failures with exponential backoff."""

    def __init__(self, client: httpx.AsyncClient, backoff_base: float = 2.0):
        self._client = client
        self._backoff_base = backoff_base

    async def fetch_text(self, url: str, timeout: float, label: str = "fetch") -> str:
        """Single attempt bounded by *timeout* overall.

        Timeouts, transport errors, invalid URLs and non-2xx raise FetchError.
        """
        try:
            async with asyncio.timeout(timeout):
                resp = await self._client.get(
                    url,
                    follow_redirects=True,
                    timeout=timeout,
                    headers={"User-Agent": _USER_AGENT},
                )
        except (httpx.TimeoutException, TimeoutError) as exc:
            raise FetchError(f"timed out after {timeout}s", url, label) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(f"{type(exc).__name__}: {exc}", url, label) from exc

        if not resp.is_success:
            raise FetchError(
                f"HTTP {resp.status_code}", url, label, status_code=resp.status_code
            )
        return resp.text

    async def fetch_with_retry(
        self,
        url: str,
        max_attempts: int,
        timeout: float,
        label: str = "fetch",
    ) -> str:
        """Up to *max_attempts* tries; waits ``backoff_base * 2**i`` after failure *i*."""
        last_error: FetchError | None = None
        for attempt in range(max_attempts):
            try:
                return await self.fetch_text(url, timeout, label)
            except FetchError as exc:
                last_error = exc
                if attempt + 1 >= max_attempts:
                    logger.warning(
                        "%s attempt %d/%d failed: %s",
                        label, attempt + 1, max_attempts, exc.message,
                    )
                    break
                backoff = self._backoff_base * 2**attempt
                logger.warning(
                    "%s attempt %d/%d failed: %s. Backoff %.1fs",
                    label, attempt + 1, max_attempts, exc.message, backoff,
                )
                await asyncio.sleep(backoff)

        if last_error is None:
            raise FetchError("no attempts made", url, label)
        raise last_error
