"""
Shared fixtures: fake provider, fake record source, recording sleep.
"""

import asyncio
import pytest
from typing import Dict, List, Optional

from textblast.core.exceptions import ProviderSendError
from textblast.models.campaign import NormalizedRecipient, RawRecord
from textblast.services.twilio_service import ProviderResult
from textblast.utils.phone_utils import dedup_key, normalize_phone


class FakeProvider:
    """
    Stands in for TwilioService.

    `failures` maps a canonical phone to the error raised for it;
    `delays` maps a canonical phone to how long its send takes.
    """

    def __init__(self, failures: Optional[Dict[str, Exception]] = None, delays: Optional[Dict[str, float]] = None):
        self.failures = failures or {}
        self.delays = delays or {}
        self.calls: List[dict] = []
        self.completed: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def send_message(self, to_phone: str, message: str, media_url: Optional[str] = None):
        self.calls.append({"to": to_phone, "body": message, "media_url": media_url})
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(to_phone, 0))
            if to_phone in self.failures:
                raise self.failures[to_phone]
            return ProviderResult(sid=f"SM{dedup_key(to_phone)}", status="queued")
        finally:
            self.in_flight -= 1
            self.completed.append(to_phone)


class FakeRecordSource:
    def __init__(self, records: Optional[List[RawRecord]] = None, error: Optional[Exception] = None, delay: float = 0.0):
        self.records = records or []
        self.error = error
        self.delay = delay
        self.fetches = 0

    async def fetch_records(self) -> List[RawRecord]:
        self.fetches += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return list(self.records)


class RecordingSleep:
    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float):
        self.calls.append(seconds)


def make_recipient(name: str, phone: str) -> NormalizedRecipient:
    canonical = normalize_phone(phone)
    return NormalizedRecipient(
        display_name=name,
        canonical_phone=canonical,
        dedup_key=dedup_key(canonical),
        raw_phone_text=phone,
    )


def make_recipients(count: int) -> List[NormalizedRecipient]:
    return [make_recipient(f"Person {i}", f"404555{i:04d}") for i in range(count)]


def provider_error(code: int, message: str = "rejected", critical: bool = False) -> ProviderSendError:
    return ProviderSendError(message, provider_code=code, critical=critical)


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()
