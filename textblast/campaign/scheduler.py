"""
textblast/campaign/scheduler.py

Purpose: Rate-limited batch dispatch

- Splits recipients into fixed-size batches
- Sends each batch concurrently and waits for all of it
- Sleeps between batches so throughput stays under the provider ceiling
- Returns outcomes in recipient order, whatever order sends finish in
"""

import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence
from textblast.core.logging import get_logger
from textblast.models.campaign import DispatchOutcome, NormalizedRecipient

logger = get_logger(__name__)


SendFn = Callable[[NormalizedRecipient], Awaitable[DispatchOutcome]]
SleepFn = Callable[[float], Awaitable[None]]


def partition(items: Sequence, size: int) -> List[Sequence]:
    """Consecutive chunks of at most `size` items."""
    if size < 1:
        raise ValueError("batch size must be at least 1")
    return [items[start:start + size] for start in range(0, len(items), size)]


class BatchScheduler:
    """
    Fan-out/fan-in batch runner.

    At most `batch_size` sends are in flight, and consecutive batches are
    separated by `delay_seconds`. No delay follows the final batch.
    """

    def __init__(self, batch_size: int = 10, delay_seconds: float = 1.0, sleep: Optional[SleepFn] = None):
        if batch_size < 1:
            raise ValueError("batch size must be at least 1")
        if delay_seconds < 0:
            raise ValueError("delay cannot be negative")
        self.batch_size = batch_size
        self.delay_seconds = delay_seconds
        self._sleep = sleep or asyncio.sleep

    async def run(self, eligible: Sequence[NormalizedRecipient], send: SendFn) -> List[DispatchOutcome]:
        recipients = list(eligible)
        batches = partition(recipients, self.batch_size)
        outcomes: List[Optional[DispatchOutcome]] = [None] * len(recipients)

        for number, batch in enumerate(batches, 1):
            offset = (number - 1) * self.batch_size
            logger.info(
                f"Dispatching batch {number}/{len(batches)} ({len(batch)} recipients)",
                extra={"batch": number}
            )

            results = await asyncio.gather(
                *(send(recipient) for recipient in batch),
                return_exceptions=True
            )

            for index, (recipient, result) in enumerate(zip(batch, results)):
                outcomes[offset + index] = self._to_outcome(recipient, result)

            if number < len(batches):
                await self._sleep(self.delay_seconds)

        return outcomes

    def _to_outcome(self, recipient: NormalizedRecipient, result) -> DispatchOutcome:
        if isinstance(result, DispatchOutcome):
            return result
        if isinstance(result, BaseException) and not isinstance(result, Exception):
            raise result
        logger.error(
            f"Unexpected error sending to {recipient.canonical_phone}: {result}",
            exc_info=result if isinstance(result, Exception) else None
        )
        return DispatchOutcome.failed(recipient, error_message=str(result))
