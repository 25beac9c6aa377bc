"""Pattern-based field extraction over raw SAFER / SMS page markup.

Pages are never parsed into a tree. Each field is located by an ordered table
of regexes (or strategy callables) so that tests can feed fixture text and the
tables can change without touching the traversal code.
"""

import html
import re
from collections.abc import Callable, Sequence
from urllib.parse import urljoin

# Registry number patterns, most specific first
REGISTRY_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"MC/MX/FF Number\(s\):\s*MC[-\s]?(\d{3,7})", re.IGNORECASE),
    re.compile(r"MC/MX Number:\s*MC[-\s]?(\d{3,7})", re.IGNORECASE),
    re.compile(r"MC/MX Number:\s*(\d{3,7})", re.IGNORECASE),
)

# Last resort: anything that looks like an MC number
GENERIC_REGISTRY_PATTERN = re.compile(r"MC[-\s]?(\d{3,7})", re.IGNORECASE)

# Coarse phone on the snapshot page: (555) 555-5555, 555.555.5555, ...
_COARSE_PHONE_RE = re.compile(r"\(?\d{3}\)?[\s\-.]*\d{3}[\s\-.]*\d{4}")

# Phone shape used on the registration page
_CONTACT_PHONE_RE = re.compile(r"\(?\d{3}\)?[\s\-]*\d{3}[\s\-]*\d{4}")

_EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}")

_HREF_RE = re.compile(r"""href=["']([^"']*)["']""", re.IGNORECASE)

# Hop 2: snapshot -> SMS safety measurement page
SAFETY_LINK_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"safer_xfr\.aspx", re.IGNORECASE),
    re.compile(r"/SMS/Carrier/", re.IGNORECASE),
)

# Hop 3: SMS page -> carrier registration page, optionally /Carrier/<id>/
REGISTRATION_LINK_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"/Carrier/\d+/CarrierRegistration\.aspx", re.IGNORECASE),
    re.compile(r"CarrierRegistration\.aspx", re.IGNORECASE),
)

# Styling class carrying the data cells on the registration page
CONTACT_CLASS = "dat"

_TAG_RE = re.compile(r"<[^>]*>")
_WS_RE = re.compile(r"\s+")


def _span_re(css_class: str) -> re.Pattern[str]:
    return re.compile(
        rf"""<span[^>]*class=["']{re.escape(css_class)}["'][^>]*>(.*?)</span>""",
        re.IGNORECASE | re.DOTALL,
    )


_CONTACT_SPAN_RE = _span_re(CONTACT_CLASS)


def html_to_text(fragment: str) -> str:
    """Strip tags, unescape entities and collapse whitespace."""
    if not fragment:
        return ""
    text = _TAG_RE.sub(" ", fragment)
    text = html.unescape(text)
    return _WS_RE.sub(" ", text).strip()


def extract_registry_number(
    page: str,
    patterns: Sequence[re.Pattern[str]] = REGISTRY_PATTERNS,
    fallback: re.Pattern[str] | None = GENERIC_REGISTRY_PATTERN,
) -> str:
    """Return the registry number as ``MC-<digits>``, or "" if none is found."""
    for pattern in patterns:
        m = pattern.search(page)
        if m and m.group(1):
            return f"MC-{m.group(1)}"
    if fallback is not None:
        m = fallback.search(page)
        if m and m.group(1):
            return f"MC-{m.group(1)}"
    return ""


def extract_phone(page: str) -> str:
    m = _COARSE_PHONE_RE.search(page)
    return m.group(0) if m else ""


def find_link(
    page: str,
    base_url: str,
    patterns: Sequence[re.Pattern[str]],
) -> str | None:
    """Return the first href matching any of *patterns*, made absolute."""
    for m in _HREF_RE.finditer(page):
        href = html.unescape(m.group(1)).strip()
        if not href:
            continue
        if not any(p.search(href) for p in patterns):
            continue
        try:
            return urljoin(base_url, href)
        except ValueError:
            # Malformed href, e.g. a broken IPv6 host
            continue
    return None


def _contact_texts(page: str) -> list[str]:
    return [html_to_text(s) for s in _CONTACT_SPAN_RE.findall(page)]


def _email_from_spans(page: str) -> str:
    for text in _contact_texts(page):
        if "@" in text:
            return text
    return ""


def _email_anywhere(page: str) -> str:
    m = _EMAIL_RE.search(page)
    return m.group(0) if m else ""


def _phone_from_spans(page: str) -> str:
    for text in _contact_texts(page):
        m = _CONTACT_PHONE_RE.search(text)
        if m:
            return m.group(0)
    return ""


def _phone_anywhere(page: str) -> str:
    m = _CONTACT_PHONE_RE.search(page)
    return m.group(0) if m else ""


Strategy = Callable[[str], str]

# Tried in order; the first non-empty value wins
EMAIL_STRATEGIES: tuple[Strategy, ...] = (_email_from_spans, _email_anywhere)
PHONE_STRATEGIES: tuple[Strategy, ...] = (_phone_from_spans, _phone_anywhere)


def first_match(page: str, strategies: Sequence[Strategy]) -> str:
    for strategy in strategies:
        value = strategy(page)
        if value:
            return value
    return ""


def extract_contacts(
    page: str,
    email_strategies: Sequence[Strategy] = EMAIL_STRATEGIES,
    phone_strategies: Sequence[Strategy] = PHONE_STRATEGIES,
) -> tuple[str, str]:
    """Return ``(email, phone)`` from a carrier registration page."""
    return first_match(page, email_strategies), first_match(page, phone_strategies)
