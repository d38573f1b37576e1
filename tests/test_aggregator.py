from conftest import make_recipients
from textblast.campaign.aggregator import aggregate
from textblast.models.campaign import DedupCounts, DispatchOutcome


def test_counts_and_resume_token():
    a, b, c, d = make_recipients(4)
    outcomes = [
        DispatchOutcome.sent(a, "SM1", "queued"),
        DispatchOutcome.failed(b, "Invalid number", error_code=21211),
        DispatchOutcome.sent(c, "SM3", "queued"),
        DispatchOutcome.failed(d, "Account suspended", error_code=30002, critical=True),
    ]

    report = aggregate(
        outcomes,
        DedupCounts(duplicates=2, invalid=1, unique=4),
        total_records=7,
        started_at=10.0,
        finished_at=12.5,
        campaign_id="run-1",
    )

    summary = report.summary
    assert report.campaign_id == "run-1"
    assert (summary.total, summary.duplicates, summary.invalid, summary.unique) == (7, 2, 1, 4)
    assert (summary.succeeded, summary.failed, summary.critical) == (2, 2, 1)
    assert summary.duration_ms == 2500
    assert report.sent_dedup_keys == [a.dedup_key, c.dedup_key]
    assert report.outcomes == outcomes


def test_empty_run():
    report = aggregate([], DedupCounts(), total_records=0, started_at=5.0, finished_at=5.0)

    assert report.outcomes == []
    assert report.sent_dedup_keys == []
    assert report.summary.succeeded == 0
    assert report.summary.duration_ms == 0
    assert report.campaign_id


def test_duration_defaults_to_now():
    import time

    report = aggregate([], DedupCounts(), total_records=0, started_at=time.monotonic())

    assert report.summary.duration_ms >= 0
