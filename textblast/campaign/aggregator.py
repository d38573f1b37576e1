"""
textblast/campaign/aggregator.py

Purpose: Campaign report

- Counts successes, failures and critical failures
- Collects the dedup keys that were delivered (resume token)
- Measures run duration
"""

import time
import uuid
from typing import List, Optional, Sequence
from textblast.models.campaign import CampaignReport, CampaignSummary, DedupCounts, DispatchOutcome


def aggregate(
    outcomes: Sequence[DispatchOutcome],
    counts: DedupCounts,
    total_records: int,
    started_at: float,
    finished_at: Optional[float] = None,
    campaign_id: Optional[str] = None,
) -> CampaignReport:
    """
    Builds the terminal report for a run. Pure: no I/O.

    Args:
        outcomes: One outcome per eligible recipient, in recipient order
        counts: Deduplication counters
        total_records: Number of records the source returned
        started_at: time.monotonic() at the start of the run
        finished_at: time.monotonic() at the end (defaults to now)
        campaign_id: Run identifier; generated if omitted
    """
    if finished_at is None:
        finished_at = time.monotonic()

    succeeded = 0
    failed = 0
    critical = 0
    sent_keys: List[str] = []

    for outcome in outcomes:
        if outcome.is_sent:
            succeeded += 1
            sent_keys.append(outcome.dedup_key)
        else:
            failed += 1
            if outcome.critical:
                critical += 1

    summary = CampaignSummary(
        total=total_records,
        duplicates=counts.duplicates,
        invalid=counts.invalid,
        unique=counts.unique,
        succeeded=succeeded,
        failed=failed,
        critical=critical,
        duration_ms=max(0, int(round((finished_at - started_at) * 1000))),
    )

    return CampaignReport(
        campaign_id=campaign_id or str(uuid.uuid4()),
        outcomes=list(outcomes),
        sent_dedup_keys=list(dict.fromkeys(sent_keys)),
        summary=summary,
    )
