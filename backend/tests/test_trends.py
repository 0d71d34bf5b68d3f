import pytest

from finsight.models.enums import TrendDirection
from finsight.services.policy import AnalyticsPolicy
from finsight.services.records import MonthlyBucket
from finsight.services.trends import INSUFFICIENT_DATA, classify_trend, classify_trends


def test_rising_values_trend_up() -> None:
    result = classify_trend([100.0, 100.0, 100.0, 110.0, 110.0, 110.0], "Income")
    assert result.direction == TrendDirection.increasing
    assert result.percentage == pytest.approx(10.0)
    assert result.description == "Income trending up by 10.0% over recent months"


def test_falling_values_trend_down() -> None:
    result = classify_trend([100.0, 100.0, 80.0, 80.0], "Expenses")
    assert result.direction == TrendDirection.decreasing
    assert result.percentage == pytest.approx(-20.0)
    assert result.description == "Expenses trending down by 20.0% over recent months"


@pytest.mark.parametrize(
    ("values", "direction"),
    [
        ([100.0, 104.0], TrendDirection.stable),
        ([100.0, 96.0], TrendDirection.stable),
        ([100.0, 106.0], TrendDirection.increasing),
        ([100.0, 94.0], TrendDirection.decreasing),
    ],
)
def test_stability_band(values: list[float], direction: TrendDirection) -> None:
    assert classify_trend(values, "Savings").direction == direction


def test_stable_description() -> None:
    assert classify_trend([100.0, 102.0], "Savings").description == "Savings remaining relatively stable"


def test_odd_length_middle_value_counts_towards_first_half() -> None:
    result = classify_trend([100.0, 200.0, 300.0], "Income")
    assert result.percentage == pytest.approx(100.0)


def test_zero_baseline_reads_as_stable() -> None:
    result = classify_trend([0.0, 0.0, 500.0, 500.0], "Savings")
    assert result.direction == TrendDirection.stable
    assert result.percentage == 0.0


def test_single_value_is_insufficient() -> None:
    result = classify_trend([100.0], "Income")
    assert result.direction == TrendDirection.stable
    assert result.description == INSUFFICIENT_DATA


def test_classify_trends_uses_recent_window_only() -> None:
    history = [
        MonthlyBucket(year=2026, month=month, income=income, expense=1000.0, net=income - 1000.0)
        for month, income in zip(range(1, 11), [9000.0] * 4 + [2000.0] * 3 + [2400.0] * 3)
    ]
    summary = classify_trends(history, policy=AnalyticsPolicy(recent_window=6))
    assert summary.income.direction == TrendDirection.increasing
    assert summary.income.percentage == pytest.approx(20.0)
    assert summary.expense.direction == TrendDirection.stable
    assert summary.savings.direction == TrendDirection.increasing


def test_classify_trends_with_one_month_is_insufficient() -> None:
    summary = classify_trends([MonthlyBucket(year=2026, month=10, income=10.0)])
    assert summary.income.description == INSUFFICIENT_DATA
    assert summary.expense.description == INSUFFICIENT_DATA
    assert summary.savings.description == INSUFFICIENT_DATA
