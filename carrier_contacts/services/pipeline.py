import asyncio
import logging
import re
from urllib.parse import quote

from carrier_contacts.config import RunMode, Settings
from carrier_contacts.exceptions.custom import FetchError
from carrier_contacts.mappers.page_parser import (
    REGISTRATION_LINK_PATTERNS,
    SAFETY_LINK_PATTERNS,
    extract_contacts,
    extract_phone,
    extract_registry_number,
    find_link,
)
from carrier_contacts.mappers.validity import classify
from carrier_contacts.schemas.contact import ContactRecord, LookupOutcome, OutcomeStatus
from carrier_contacts.services.fetcher import FetchClient

logger = logging.getLogger(__name__)

LOOKUP_URL = (
    "https://safer.fmcsa.dot.gov/query.asp?searchtype=ANY"
    "&query_type=queryCarrierSnapshot&query_param=MC_MX&query_string="
)

_WS_RE = re.compile(r"\s+")


def build_lookup_url(identifier: str) -> str:
    compact = _WS_RE.sub("", identifier or "")
    return LOOKUP_URL + quote(compact, safe="")


class TraversalPipeline:
    """Resolve one MC number: snapshot -> SMS page -> carrier registration.

    Only the snapshot fetch can fail an identifier. The SMS and registration
    hops are enrichment and degrade to whatever was already extracted.
    """

    def __init__(self, fetcher: FetchClient, settings: Settings):
        self._fetcher = fetcher
        self._settings = settings

    async def _fetch(self, url: str, label: str) -> str:
        return await self._fetcher.fetch_with_retry(
            url,
            max_attempts=self._settings.max_retries,
            timeout=self._settings.fetch_timeout,
            label=label,
        )

    async def process(self, identifier: str) -> LookupOutcome:
        url = build_lookup_url(identifier)
        try:
            page = await self._fetch(url, "snapshot")
        except FetchError as exc:
            logger.warning("Fetch error MC %s: %s", identifier, exc)
            return LookupOutcome(
                identifier=identifier,
                status=OutcomeStatus.error,
                url=url,
                error=str(exc),
            )

        verdict = classify(page)
        if not verdict.valid:
            logger.info("INVALID (%s) MC %s", verdict.reason, identifier)
            return LookupOutcome(
                identifier=identifier,
                status=OutcomeStatus.invalid,
                url=url,
                verdict=verdict,
            )

        if self._settings.mode == RunMode.urls:
            record = ContactRecord(source_url=url)
        else:
            record = await self._extract(url, page)
            logger.info(
                "Saved %s | %s | %s",
                record.registry_number,
                record.email or "(no email)",
                record.phone,
            )

        return LookupOutcome(
            identifier=identifier,
            status=OutcomeStatus.valid,
            url=url,
            verdict=verdict,
            record=record,
        )

    async def _extract(self, url: str, page: str) -> ContactRecord:
        record = ContactRecord(
            registry_number=extract_registry_number(page),
            phone=extract_phone(page),
            source_url=url,
        )

        sms_url = find_link(page, url, SAFETY_LINK_PATTERNS)
        if not sms_url:
            return record

        await asyncio.sleep(self._settings.hop_delay)
        try:
            sms_page = await self._fetch(sms_url, "sms")
        except FetchError as exc:
            logger.warning("Deep fetch error for %s: %s", url, exc)
            return record

        registration_url = find_link(sms_page, sms_url, REGISTRATION_LINK_PATTERNS)
        if not registration_url:
            return record

        await asyncio.sleep(self._settings.hop_delay)
        try:
            registration_page = await self._fetch(registration_url, "registration")
        except FetchError as exc:
            logger.warning("Deep fetch error for %s: %s", url, exc)
            return record

        email, phone = extract_contacts(registration_page)
        return record.model_copy(update={"email": email, "phone": phone or record.phone})
