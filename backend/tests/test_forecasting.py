from datetime import datetime, timezone

import pytest

from finsight.services.aggregation import aggregate_monthly
from finsight.services.forecasting import forecast_buckets, growth_rate, overall_confidence, seasonal_factor
from finsight.services.policy import AnalyticsPolicy
from finsight.services.records import MonthlyBucket
from finsight.utils.date_utils import add_months


NOW = datetime(2026, 10, 16, 12, 0, tzinfo=timezone.utc)


def _flat_history(income: float, expense: float, months: int = 6) -> list[MonthlyBucket]:
    return [
        MonthlyBucket(year=year, month=month, income=income, expense=expense, net=income - expense)
        for year, month in (add_months(2026, 10, offset) for offset in range(1 - months, 1))
    ]


def test_growth_rate_skips_steps_from_zero() -> None:
    assert growth_rate([100.0, 110.0, 121.0]) == pytest.approx(0.1)
    assert growth_rate([0.0, 100.0, 110.0]) == pytest.approx(0.1)
    assert growth_rate([0.0, 0.0]) == 0.0
    assert growth_rate([]) == 0.0


def test_seasonal_factor_uses_calendar_month() -> None:
    policy = AnalyticsPolicy()
    assert seasonal_factor(1, policy) == (0.95, 1.15)
    assert seasonal_factor(12, policy) == (1.15, 1.2)


def test_forecast_with_no_history_is_all_zero_with_decaying_confidence() -> None:
    history = aggregate_monthly([], now=NOW, window_months=12)
    buckets = forecast_buckets(history, now=NOW)
    predictions = buckets[len(history) :]

    assert buckets[: len(history)] == history
    assert len(predictions) == 6
    assert [row.key for row in predictions] == ["2026-11", "2026-12", "2027-01", "2027-02", "2027-03", "2027-04"]
    assert all(row.predicted for row in predictions)
    assert all(row.income == 0 and row.expense == 0 and row.net == 0 for row in predictions)
    assert [row.confidence for row in predictions] == pytest.approx([0.8, 0.7, 0.6, 0.5, 0.4, 0.3])


def test_forecast_confidence_never_drops_below_floor() -> None:
    buckets = forecast_buckets(_flat_history(3000.0, 2000.0), now=NOW, horizon=9)
    confidences = [row.confidence for row in buckets if row.predicted]
    assert confidences[-1] == pytest.approx(0.3)
    assert min(confidences) >= 0.3 - 1e-9
    assert confidences == sorted(confidences, reverse=True)


def test_forecast_applies_seasonality_to_flat_history() -> None:
    buckets = forecast_buckets(_flat_history(3000.0, 2000.0), now=NOW, horizon=2)
    november, december = buckets[-2:]

    assert november.income == pytest.approx(3150.0)
    assert november.expense == pytest.approx(2200.0)
    assert november.net == pytest.approx(950.0)
    assert december.income == pytest.approx(3450.0)
    assert december.expense == pytest.approx(2400.0)


def test_forecast_is_idempotent() -> None:
    history = _flat_history(3000.0, 2000.0)
    assert forecast_buckets(history, now=NOW) == forecast_buckets(history, now=NOW)


def test_forecast_rejects_negative_horizon() -> None:
    with pytest.raises(ValueError):
        forecast_buckets([], now=NOW, horizon=-1)


def test_overall_confidence() -> None:
    assert overall_confidence(aggregate_monthly([], now=NOW, window_months=12)) == 0.5
    assert overall_confidence(_flat_history(3000.0, 2000.0, months=12)) == pytest.approx(1.0)
    assert overall_confidence(_flat_history(3000.0, 2000.0, months=6)) == pytest.approx(0.5)

    noisy = [
        MonthlyBucket(year=2026, month=month, income=0.0, expense=expense, net=-expense)
        for month, expense in zip(range(1, 13), [100.0, 1000.0] * 6)
    ]
    # cv of alternating 100/1000 is above 0.7, so stability sits on the floor.
    assert overall_confidence(noisy) == pytest.approx(0.3)
