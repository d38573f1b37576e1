"""
textblast/campaign/recipients.py

Purpose: Eligible recipient set

- Drops records without a usable phone (counted invalid)
- Skips numbers already sent in a previous run (resume token)
- Keeps the first record per phone, preserving board order
"""

from typing import AbstractSet, Iterable, List, Tuple
from textblast.core.logging import get_logger
from textblast.models.campaign import DedupCounts, NormalizedRecipient, RawRecord
from textblast.utils.phone_utils import dedup_key, normalize_phone

logger = get_logger(__name__)


def build_eligible(
    records: Iterable[RawRecord],
    already_sent_keys: AbstractSet[str] = frozenset(),
) -> Tuple[List[NormalizedRecipient], DedupCounts]:
    """
    Builds the ordered list of unique, sendable recipients.

    Args:
        records: Raw records in source order
        already_sent_keys: Dedup keys delivered by an earlier run

    Returns:
        (eligible recipients, counts of duplicates / invalid / unique)
    """
    counts = DedupCounts()
    eligible: List[NormalizedRecipient] = []
    seen = set()

    for record in records:
        canonical = normalize_phone(record.raw_phone_text)
        if canonical is None:
            counts.invalid += 1
            logger.debug(f"Skipping {record.display_name!r}: unusable phone {record.raw_phone_text!r}")
            continue

        key = dedup_key(canonical)

        if key in already_sent_keys:
            counts.duplicates += 1
            logger.debug(f"Skipping {record.display_name!r}: already sent to {canonical}")
            continue

        if key in seen:
            counts.duplicates += 1
            logger.debug(f"Skipping {record.display_name!r}: duplicate of {canonical}")
            continue

        seen.add(key)
        eligible.append(
            NormalizedRecipient(
                display_name=record.display_name,
                canonical_phone=canonical,
                dedup_key=key,
                raw_phone_text=record.raw_phone_text,
            )
        )

    counts.unique = len(eligible)
    return eligible, counts
