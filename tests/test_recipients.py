from textblast.campaign.recipients import build_eligible
from textblast.models.campaign import RawRecord


def test_duplicates_and_missing_phones():
    records = [
        RawRecord("Alice", "(404) 555-0100"),
        RawRecord("Bob", "4045550100"),
        RawRecord("Carol", None),
    ]

    eligible, counts = build_eligible(records, set())

    assert [(r.display_name, r.canonical_phone) for r in eligible] == [("Alice", "+14045550100")]
    assert counts.duplicates == 1
    assert counts.invalid == 1
    assert counts.unique == 1


def test_first_seen_name_wins_across_formats():
    records = [
        RawRecord("First", "1 (212) 555-0199"),
        RawRecord("Second", "212.555.0199"),
        RawRecord("Third", "+12125550199"),
    ]

    eligible, counts = build_eligible(records)

    assert len(eligible) == 1
    assert eligible[0].display_name == "First"
    assert eligible[0].dedup_key == "12125550199"
    assert eligible[0].raw_phone_text == "1 (212) 555-0199"
    assert counts.duplicates == 2


def test_already_sent_keys_are_skipped_anywhere():
    records = [
        RawRecord("A", "4045550100"),
        RawRecord("B", "4045550101"),
        RawRecord("C", "4045550102"),
        RawRecord("B again", "(404) 555-0101"),
    ]

    eligible, counts = build_eligible(records, {"14045550101"})

    assert [r.display_name for r in eligible] == ["A", "C"]
    assert all(r.dedup_key != "14045550101" for r in eligible)
    assert counts.duplicates == 2
    assert counts.unique == 2


def test_source_order_preserved():
    records = [RawRecord(f"P{i}", f"770555{i:04d}") for i in range(30, 0, -1)]

    eligible, _ = build_eligible(records)

    assert [r.display_name for r in eligible] == [f"P{i}" for i in range(30, 0, -1)]


def test_invalid_does_not_stop_processing():
    records = [
        RawRecord("Bad", "555"),
        RawRecord("Empty", ""),
        RawRecord("Good", "4045550100"),
    ]

    eligible, counts = build_eligible(records)

    assert [r.display_name for r in eligible] == ["Good"]
    assert counts.invalid == 2


def test_empty_input():
    eligible, counts = build_eligible([])

    assert eligible == []
    assert (counts.duplicates, counts.invalid, counts.unique) == (0, 0, 0)
