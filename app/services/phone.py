"""
UK mobile number formatting and validation
"""
import re

_NON_PHONE_CHARS = re.compile(r"[^0-9+]")


def _clean(value: str) -> str:
    return _NON_PHONE_CHARS.sub("", value)


def format_uk_mobile_number(value: str | None) -> str | None:
    """
    Normalise a UK mobile number to E.164 (+447xxxxxxxxx).

    Accepts 07xxx xxxxxx, 7xxx xxxxxx, +447xxx xxxxxx and 447xxx xxxxxx,
    with any spacing or punctuation.

    Returns:
        The normalised number, or None if it is not a UK mobile
    """
    if not value:
        return None

    cleaned = _clean(value)

    if cleaned.startswith("+447") and len(cleaned) == 13:
        return cleaned
    if cleaned.startswith("447") and len(cleaned) == 12:
        return "+" + cleaned
    if cleaned.startswith("07") and len(cleaned) == 11:
        return "+44" + cleaned[1:]
    if cleaned.startswith("7") and len(cleaned) == 10:
        return "+44" + cleaned
    return None


def is_valid_uk_mobile_number(value: str | None) -> bool:
    return format_uk_mobile_number(value) is not None


def mask_phone_number(value: str | None) -> str:
    """Hide all but the country code and last four digits"""
    if not value:
        return ""
    cleaned = _clean(value)
    prefix = cleaned[:3] if cleaned.startswith("+") else ""
    masked_length = max(2, len(cleaned) - len(prefix) - 4)
    return f"{prefix}{'*' * masked_length}{cleaned[-4:]}"
