import re

from carrier_contacts.schemas.contact import InvalidReason, ValidityVerdict


# Checked in order against the lowercased page
_INVALID_MARKERS: tuple[tuple[str, InvalidReason], ...] = (
    ("record not found", InvalidReason.not_found),
    ("record inactive", InvalidReason.inactive),
)

_POWER_UNITS_RE = re.compile(r"Power\s*Units[^0-9]*([0-9,]+)", re.IGNORECASE)


def parse_power_units(page: str) -> int | None:
    """Return the Power Units figure from a snapshot page, or None."""
    m = _POWER_UNITS_RE.search(page)
    if not m:
        return None
    digits = m.group(1).replace(",", "")
    if not digits:
        return None
    return int(digits)


def classify(page: str) -> ValidityVerdict:
    lower = page.lower()
    for marker, reason in _INVALID_MARKERS:
        if marker in lower:
            return ValidityVerdict(valid=False, reason=reason)

    if parse_power_units(page) == 0:
        return ValidityVerdict(valid=False, reason=InvalidReason.zero_power_units)

    return ValidityVerdict(valid=True)
