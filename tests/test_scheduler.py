import math
import pytest

from conftest import FakeProvider, make_recipients
from textblast.campaign.scheduler import BatchScheduler, partition
from textblast.campaign.worker import DispatchWorker
from textblast.models.campaign import DispatchOutcome, DispatchStatus


def test_partition_sizes():
    assert [len(chunk) for chunk in partition(list(range(25)), 10)] == [10, 10, 5]
    assert partition([], 10) == []


def test_partition_rejects_zero():
    with pytest.raises(ValueError):
        partition([1], 0)


def test_scheduler_rejects_bad_config():
    with pytest.raises(ValueError):
        BatchScheduler(batch_size=0)
    with pytest.raises(ValueError):
        BatchScheduler(delay_seconds=-1)


@pytest.mark.asyncio
async def test_twenty_five_recipients_in_three_batches(recording_sleep):
    provider = FakeProvider()
    recipients = make_recipients(25)
    scheduler = BatchScheduler(batch_size=10, delay_seconds=1.0, sleep=recording_sleep)

    outcomes = await scheduler.run(recipients, DispatchWorker(provider, "Hi {name}").send)

    assert len(outcomes) == 25
    assert recording_sleep.calls == [1.0, 1.0]
    assert provider.max_in_flight == 10
    assert [o.dedup_key for o in outcomes] == [r.dedup_key for r in recipients]


@pytest.mark.asyncio
@pytest.mark.parametrize("count,batch_size", [(0, 10), (1, 10), (10, 10), (11, 10), (7, 3), (9, 1)])
async def test_delay_count(count, batch_size, recording_sleep):
    scheduler = BatchScheduler(batch_size=batch_size, delay_seconds=0.5, sleep=recording_sleep)

    await scheduler.run(make_recipients(count), DispatchWorker(FakeProvider(), "x").send)

    assert len(recording_sleep.calls) == max(0, math.ceil(count / batch_size) - 1)


@pytest.mark.asyncio
async def test_order_follows_input_not_completion(recording_sleep):
    recipients = make_recipients(6)
    # Later recipients finish first inside each batch
    delays = {r.canonical_phone: 0.01 * (6 - i) for i, r in enumerate(recipients)}
    provider = FakeProvider(delays=delays)
    scheduler = BatchScheduler(batch_size=3, delay_seconds=0, sleep=recording_sleep)

    outcomes = await scheduler.run(recipients, DispatchWorker(provider, "x").send)

    assert provider.completed[:3] == [r.canonical_phone for r in reversed(recipients[:3])]
    assert [o.phone for o in outcomes] == [r.canonical_phone for r in recipients]


@pytest.mark.asyncio
async def test_batch_is_a_barrier(recording_sleep):
    recipients = make_recipients(4)
    delays = {recipients[0].canonical_phone: 0.05}
    provider = FakeProvider(delays=delays)
    scheduler = BatchScheduler(batch_size=2, delay_seconds=0, sleep=recording_sleep)

    await scheduler.run(recipients, DispatchWorker(provider, "x").send)

    # The slow first send still finishes before the second batch starts
    assert provider.completed.index(recipients[0].canonical_phone) < 2
    assert [c["to"] for c in provider.calls[2:]] == [r.canonical_phone for r in recipients[2:]]


@pytest.mark.asyncio
async def test_unexpected_exception_becomes_failed_outcome(recording_sleep):
    recipients = make_recipients(3)

    async def send(recipient):
        if recipient is recipients[1]:
            raise RuntimeError("boom")
        return DispatchOutcome.sent(recipient, "SM1", "queued")

    scheduler = BatchScheduler(batch_size=2, delay_seconds=0, sleep=recording_sleep)
    outcomes = await scheduler.run(recipients, send)

    assert [o.status for o in outcomes] == [DispatchStatus.SENT, DispatchStatus.FAILED, DispatchStatus.SENT]
    assert outcomes[1].error_message == "boom"
    assert outcomes[1].error_code is None
