"""Phone number checks and normalization for messaging deep links.

Leads come from scrapers and manual entry, so phone strings range from
fully qualified ``+971 50 123 4567`` to placeholders such as
``SEARCH_REQUIRED``. ``normalize_phone`` turns whatever is there into the
digit string a ``wa.me`` link expects, covering the UAE and Indian numbering
plans the lead lists are drawn from.
"""

import re
from typing import Optional

# Scraper placeholders written when no number was found
PLACEHOLDER_MARKERS = ("SEARCH", "REQUIRED", "N/A")

MIN_DIALABLE_DIGITS = 10

UAE_COUNTRY_CODE = "971"
INDIA_COUNTRY_CODE = "91"

_NON_DIGIT = re.compile(r"\D")
_UAE_TRUNK = re.compile(r"^0[45]")
_INDIA_MOBILE = re.compile(r"^[6-9]\d{9}$")
_UAE_MISSING_TRUNK = re.compile(r"^5\d{8}$")


def digits_only(phone: Optional[str]) -> str:
    """Strip everything but digits."""
    if not phone:
        return ""
    return _NON_DIGIT.sub("", phone)


def is_reachable(phone: Optional[str]) -> bool:
    """Check whether a phone string looks dialable.

    Args:
        phone: Free-text phone number, or None.

    Returns:
        False for absent numbers, scraper placeholders, or fewer than
        10 digits; True otherwise.
    """
    if not phone:
        return False
    if any(marker in phone for marker in PLACEHOLDER_MARKERS):
        return False
    return len(digits_only(phone)) >= MIN_DIALABLE_DIGITS


def normalize_phone(phone: Optional[str]) -> str:
    """Convert a free-text phone number to a country-qualified digit string.

    Unrecognized formats come back as their bare digits. The function never
    raises.

    Examples:
        >>> normalize_phone("050 123 4567")
        '971501234567'
        >>> normalize_phone("+971 50 123 4567")
        '971501234567'
        >>> normalize_phone("98765 43210")
        '919876543210'
    """
    if not phone:
        return ""

    stripped = phone.strip()
    digits = digits_only(stripped)

    if stripped.startswith("+"):
        return digits

    if _UAE_TRUNK.match(digits):
        return UAE_COUNTRY_CODE + digits[1:]

    if _INDIA_MOBILE.match(digits):
        return INDIA_COUNTRY_CODE + digits

    if _UAE_MISSING_TRUNK.match(digits):
        return UAE_COUNTRY_CODE + digits

    return digits
