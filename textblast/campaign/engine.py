"""
textblast/campaign/engine.py

Purpose: One campaign run, start to finish

- Rejects requests without message or media before touching anything
- Fetches records (fatal on failure, nothing is sent)
- Builds the eligible set, dispatches in paced batches
- Aggregates the report
"""

import time
import uuid
from typing import List, Optional, Protocol
from textblast.campaign.aggregator import aggregate
from textblast.campaign.recipients import build_eligible
from textblast.campaign.scheduler import BatchScheduler
from textblast.campaign.worker import DispatchWorker, MessageProvider
from textblast.core.exceptions import ValidationError
from textblast.core.logging import get_logger, LogContext
from textblast.models.campaign import CampaignReport, CampaignRequest, RawRecord

logger = get_logger(__name__)


class RecordSource(Protocol):
    async def fetch_records(self) -> List[RawRecord]:
        ...


class CampaignEngine:
    """
    Runs campaigns against an injected record source and provider.

    Usage:
        engine = CampaignEngine(MondayService(), TwilioService())
        report = await engine.run(CampaignRequest(message_template="Hi {name}!"))
    """

    def __init__(
        self,
        record_source: RecordSource,
        provider: MessageProvider,
        scheduler: Optional[BatchScheduler] = None,
    ):
        self.record_source = record_source
        self.provider = provider
        self.scheduler = scheduler or BatchScheduler()

    async def run(self, request: CampaignRequest) -> CampaignReport:
        if not request.has_content:
            raise ValidationError("Message or image is required.")

        campaign_id = str(uuid.uuid4())
        started_at = time.monotonic()

        with LogContext(campaign_id=campaign_id):
            logger.info(f"🚀 Starting campaign {campaign_id}")

            # UpstreamFetchError propagates: no partial report
            records = await self.record_source.fetch_records()

            eligible, counts = build_eligible(records, request.already_sent_keys)
            logger.info(
                f"{len(records)} records: {counts.unique} eligible, "
                f"{counts.duplicates} duplicates, {counts.invalid} invalid"
            )

            worker = DispatchWorker(self.provider, request.message_template, request.media_url)
            outcomes = await self.scheduler.run(eligible, worker.send)

            report = aggregate(
                outcomes,
                counts,
                total_records=len(records),
                started_at=started_at,
                campaign_id=campaign_id,
            )

            summary = report.summary
            logger.info(
                f"🎉 Campaign finished: {summary.succeeded} sent, {summary.failed} failed "
                f"in {summary.duration_ms} ms"
            )
            if summary.critical:
                logger.error(
                    f"{summary.critical} critical provider failures - check the account before resuming"
                )

        return report
