"""
textblast/models/campaign.py

Purpose: Campaign run entities

- Raw records as read from the board
- Normalized, deduplicated recipients
- Per-recipient dispatch outcomes
- The terminal campaign report

Everything here lives for a single run; nothing is persisted.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Optional


@dataclass(frozen=True)
class RawRecord:
    """One board item as returned by the record source."""

    display_name: str
    raw_phone_text: Optional[str] = None


@dataclass(frozen=True)
class NormalizedRecipient:
    """A recipient with a dialable phone. `dedup_key` is unique within a run."""

    display_name: str
    canonical_phone: str
    dedup_key: str
    raw_phone_text: Optional[str] = None


@dataclass(frozen=True)
class CampaignRequest:
    """What the caller asked us to send, plus the resume token from a prior run."""

    message_template: Optional[str] = None
    media_url: Optional[str] = None
    already_sent_keys: FrozenSet[str] = frozenset()

    @property
    def has_content(self) -> bool:
        return bool(self.message_template) or bool(self.media_url)


class DispatchStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"


@dataclass(frozen=True)
class DispatchOutcome:
    """Result of one send attempt."""

    display_name: str
    raw_phone_text: Optional[str]
    phone: str
    dedup_key: str
    status: DispatchStatus
    provider_message_id: Optional[str] = None
    provider_status: Optional[str] = None
    error_code: Optional[int] = None
    error_message: Optional[str] = None
    critical: bool = False

    @classmethod
    def sent(
        cls,
        recipient: NormalizedRecipient,
        message_id: Optional[str],
        provider_status: Optional[str],
    ) -> "DispatchOutcome":
        return cls(
            display_name=recipient.display_name,
            raw_phone_text=recipient.raw_phone_text,
            phone=recipient.canonical_phone,
            dedup_key=recipient.dedup_key,
            status=DispatchStatus.SENT,
            provider_message_id=message_id,
            provider_status=provider_status,
        )

    @classmethod
    def failed(
        cls,
        recipient: NormalizedRecipient,
        error_message: str,
        error_code: Optional[int] = None,
        critical: bool = False,
    ) -> "DispatchOutcome":
        return cls(
            display_name=recipient.display_name,
            raw_phone_text=recipient.raw_phone_text,
            phone=recipient.canonical_phone,
            dedup_key=recipient.dedup_key,
            status=DispatchStatus.FAILED,
            error_code=error_code,
            error_message=error_message,
            critical=critical,
        )

    @property
    def is_sent(self) -> bool:
        return self.status == DispatchStatus.SENT


@dataclass
class DedupCounts:
    duplicates: int = 0
    invalid: int = 0
    unique: int = 0


@dataclass(frozen=True)
class CampaignSummary:
    total: int
    duplicates: int
    invalid: int
    unique: int
    succeeded: int
    failed: int
    critical: int
    duration_ms: int


@dataclass(frozen=True)
class CampaignReport:
    campaign_id: str
    outcomes: List[DispatchOutcome]
    sent_dedup_keys: List[str]
    summary: CampaignSummary
