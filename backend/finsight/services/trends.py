from __future__ import annotations

import math
from collections.abc import Sequence

from finsight.models.enums import TrendDirection
from finsight.services.policy import AnalyticsPolicy
from finsight.services.records import MonthlyBucket, TrendResult, TrendSummary
from finsight.utils.stats import mean, percent_change


INSUFFICIENT_DATA = "Insufficient data"


def _insufficient() -> TrendResult:
    return TrendResult(direction=TrendDirection.stable, percentage=0.0, description=INSUFFICIENT_DATA)


def classify_trend(values: Sequence[float], label: str, *, stable_pct: float = 5.0) -> TrendResult:
    """Compare the average of the first half of ``values`` with the second half.

    The first half takes ``ceil(n/2)`` values, the second the trailing
    ``floor(n/2)``, so an odd middle value only counts towards the first half.
    """
    n = len(values)
    if n < 2:
        return _insufficient()

    first_avg = mean(values[: math.ceil(n / 2)])
    second_avg = mean(values[n - n // 2 :])
    change = percent_change(first_avg, second_avg)

    if abs(change) <= stable_pct:
        return TrendResult(
            direction=TrendDirection.stable,
            percentage=change,
            description=f"{label} remaining relatively stable",
        )
    if change > 0:
        return TrendResult(
            direction=TrendDirection.increasing,
            percentage=change,
            description=f"{label} trending up by {abs(change):.1f}% over recent months",
        )
    return TrendResult(
        direction=TrendDirection.decreasing,
        percentage=change,
        description=f"{label} trending down by {abs(change):.1f}% over recent months",
    )


def classify_trends(
    history: Sequence[MonthlyBucket],
    *,
    policy: AnalyticsPolicy | None = None,
) -> TrendSummary:
    policy = policy or AnalyticsPolicy()
    recent = list(history[-policy.recent_window :])
    if len(recent) < 2:
        return TrendSummary(income=_insufficient(), expense=_insufficient(), savings=_insufficient())

    stable_pct = policy.trend_stable_pct
    return TrendSummary(
        income=classify_trend([row.income for row in recent], "Income", stable_pct=stable_pct),
        expense=classify_trend([row.expense for row in recent], "Expenses", stable_pct=stable_pct),
        savings=classify_trend([row.net for row in recent], "Savings", stable_pct=stable_pct),
    )
