from datetime import datetime, timedelta, timezone

import pytest

from finsight.models.enums import RecurringFrequency, TransactionType
from finsight.services.policy import AnalyticsPolicy
from finsight.services.records import TransactionRecord
from finsight.services.recurring import classify_frequency, detect_recurring_patterns, normalize_description


def _tx(tx_id: int, when: datetime, description: str, amount: float = 50.0) -> TransactionRecord:
    return TransactionRecord(
        id=tx_id,
        amount=amount,
        date=when,
        type=TransactionType.expense,
        category_id=7,
        category_name="Subscriptions",
        description=description,
    )


def _utc(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, 9, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("NETFLIX 0423", "netflix"),
        ("Netflix 0524", "netflix"),
        ("  Spotify 12 Premium 34 ", "spotify  premium"),
        ("Rent", "rent"),
    ],
)
def test_normalize_description(raw: str, expected: str) -> None:
    assert normalize_description(raw) == expected


@pytest.mark.parametrize(
    ("interval", "expected"),
    [
        (7.0, RecurringFrequency.weekly),
        (14.0, RecurringFrequency.biweekly),
        (30.0, RecurringFrequency.monthly),
        (365.0, RecurringFrequency.yearly),
        (20.0, None),
        (60.0, None),
    ],
)
def test_classify_frequency(interval: float, expected: RecurringFrequency | None) -> None:
    assert classify_frequency(interval, AnalyticsPolicy()) == expected


def test_monthly_subscription_is_detected() -> None:
    transactions = [
        _tx(index, _utc(2026, month, 1), f"NETFLIX {month:02d}26")
        for index, month in enumerate((1, 2, 3, 4), start=1)
    ]
    patterns = detect_recurring_patterns(transactions)

    assert len(patterns) == 1
    pattern = patterns[0]
    assert pattern.description_key == "netflix"
    assert pattern.frequency == RecurringFrequency.monthly
    assert pattern.occurrence_count == 4
    assert pattern.amount == pytest.approx(50.0)
    assert pattern.confidence >= 90
    assert pattern.last_date == _utc(2026, 4, 1)
    assert abs(pattern.next_expected_date - (_utc(2026, 4, 1) + timedelta(days=30))) <= timedelta(days=1)
    assert pattern.category_name == "Subscriptions"


def test_irregular_intervals_are_rejected() -> None:
    start = _utc(2026, 1, 1)
    dates = [start, start + timedelta(days=10), start + timedelta(days=50), start + timedelta(days=60)]
    transactions = [_tx(index, when, "Gym") for index, when in enumerate(dates, start=1)]
    assert detect_recurring_patterns(transactions) == []


def test_regular_but_non_standard_interval_is_rejected() -> None:
    start = _utc(2026, 1, 1)
    transactions = [_tx(index, start + timedelta(days=20 * index), "Window cleaner") for index in range(4)]
    assert detect_recurring_patterns(transactions) == []


def test_too_few_occurrences_are_ignored() -> None:
    transactions = [_tx(1, _utc(2026, 1, 1), "Spotify"), _tx(2, _utc(2026, 2, 1), "Spotify")]
    assert detect_recurring_patterns(transactions) == []


def test_weekly_pattern_scores_full_confidence_and_ranks_first() -> None:
    start = _utc(2026, 1, 5)
    weekly = [_tx(index, start + timedelta(days=7 * index), "Veg box", 22.0) for index in range(5)]
    monthly = [_tx(10 + index, _utc(2026, month, 1), "Netflix") for index, month in enumerate((1, 2, 3, 4))]
    patterns = detect_recurring_patterns([*monthly, *weekly])

    assert [row.description_key for row in patterns] == ["veg box", "netflix"]
    assert patterns[0].frequency == RecurringFrequency.weekly
    assert patterns[0].confidence == 100
    assert patterns[0].next_expected_date == start + timedelta(days=35)


def test_result_is_capped() -> None:
    transactions: list[TransactionRecord] = []
    for group in range(7):
        start = _utc(2026, 1, 1 + group)
        transactions.extend(
            _tx(group * 10 + index, start + timedelta(days=7 * index), f"Payee {chr(65 + group)}")
            for index in range(4)
        )
    assert len(detect_recurring_patterns(transactions)) == 5
    assert len(detect_recurring_patterns(transactions, policy=AnalyticsPolicy(recurring_limit=2))) == 2


def test_detection_is_repeatable() -> None:
    start = _utc(2026, 1, 5)
    transactions = [_tx(index, start + timedelta(days=7 * index), "Veg box", 22.0) for index in range(5)]
    transactions += [_tx(10 + index, _utc(2026, month, 1), "Netflix") for index, month in enumerate((1, 2, 3, 4))]
    first = detect_recurring_patterns(transactions)
    assert first == detect_recurring_patterns(transactions)
    assert len(first) == 2
