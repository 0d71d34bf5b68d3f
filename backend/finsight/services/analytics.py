from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from finsight.services.aggregation import aggregate_monthly
from finsight.services.forecasting import forecast_buckets, overall_confidence
from finsight.services.insights import generate_insights
from finsight.services.policy import AnalyticsPolicy
from finsight.services.records import ForecastReport, TransactionRecord
from finsight.services.trends import classify_trends


def build_forecast_report(
    transactions: Sequence[TransactionRecord],
    *,
    now: datetime,
    horizon: int | None = None,
    window_months: int | None = None,
    policy: AnalyticsPolicy | None = None,
) -> ForecastReport:
    """Dashboard forecast view: history, predictions, trends, insights and confidence."""
    policy = policy or AnalyticsPolicy()
    window_months = policy.history_months if window_months is None else window_months
    horizon = policy.forecast_horizon if horizon is None else horizon

    history = aggregate_monthly(transactions, now=now, window_months=window_months)
    buckets = forecast_buckets(history, now=now, horizon=horizon, policy=policy)
    predictions = buckets[len(history) :]
    return ForecastReport(
        buckets=buckets,
        trends=classify_trends(history, policy=policy),
        insights=generate_insights(history, predictions, transactions, policy=policy),
        confidence=overall_confidence(history, policy=policy),
    )
