"""
textblast/utils/phone_utils.py

Purpose: Phone number normalization

- Reduces free-form board text to a canonical +1 number
- Derives the digits-only dedup key used for uniqueness and resume
"""

import re
from typing import Iterable, Optional, Set


NON_DIGIT_PATTERN = re.compile(r"\D")

# North American Numbering Plan only
CALLING_CODE = "1"


def digits_only(value: Optional[str]) -> str:
    """Strips every non-digit character."""
    if not value:
        return ""
    return NON_DIGIT_PATTERN.sub("", value)


def normalize_phone(raw: Optional[str]) -> Optional[str]:
    """
    Normalizes a raw phone string to a canonical dialable number.

    Examples:
        "(404) 555-0100"  -> "+14045550100"
        "1-404-555-0100"  -> "+14045550100"
        "555-0100"        -> None

    Args:
        raw: Phone text as typed into the source, may be None

    Returns:
        "+1XXXXXXXXXX" or None if the text is not a 10/11 digit number
    """
    digits = digits_only(raw)

    if len(digits) == 11 and digits.startswith(CALLING_CODE):
        return f"+{digits}"

    if len(digits) == 10:
        return f"+{CALLING_CODE}{digits}"

    return None


def dedup_key(canonical_phone: str) -> str:
    """Digits-only form of a canonical phone."""
    return digits_only(canonical_phone)


def normalize_sent_keys(values: Optional[Iterable[str]]) -> Set[str]:
    """
    Turns caller-supplied phones (resume token) into dedup keys.

    Values that parse as phones map to their dedup key; anything else is
    kept as its bare digits so previously returned keys still match.
    """
    keys = set()
    for value in values or ():
        canonical = normalize_phone(value)
        key = dedup_key(canonical) if canonical else digits_only(value)
        if key:
            keys.add(key)
    return keys
