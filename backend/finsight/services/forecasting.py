from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from finsight.services.policy import AnalyticsPolicy
from finsight.services.records import MonthlyBucket
from finsight.utils.date_utils import add_months
from finsight.utils.stats import clamp, coefficient_of_variation, mean


def growth_rate(values: Sequence[float]) -> float:
    """Mean month-over-month relative change, ignoring steps from a zero base."""
    changes = [
        (values[index] - values[index - 1]) / values[index - 1]
        for index in range(1, len(values))
        if values[index - 1] != 0
    ]
    return mean(changes)


def seasonal_factor(month: int, policy: AnalyticsPolicy) -> tuple[float, float]:
    """(income, expense) multipliers for a calendar month, 1 = January."""
    return policy.income_seasonality[month - 1], policy.expense_seasonality[month - 1]


def forecast_buckets(
    history: Sequence[MonthlyBucket],
    *,
    now: datetime,
    horizon: int | None = None,
    policy: AnalyticsPolicy | None = None,
) -> list[MonthlyBucket]:
    """Return ``history`` followed by ``horizon`` predicted months after ``now``."""
    policy = policy or AnalyticsPolicy()
    horizon = policy.forecast_horizon if horizon is None else horizon
    if horizon < 0:
        raise ValueError("horizon must be >= 0.")

    recent = list(history[-policy.recent_window :])
    incomes = [row.income for row in recent]
    expenses = [row.expense for row in recent]
    avg_income = mean(incomes)
    avg_expense = mean(expenses)
    income_growth = growth_rate(incomes)
    expense_growth = growth_rate(expenses)

    predictions: list[MonthlyBucket] = []
    for step in range(1, horizon + 1):
        year, month = add_months(now.year, now.month, step)
        income_factor, expense_factor = seasonal_factor(month, policy)
        income = avg_income * (1 + income_growth * step) * income_factor
        expense = avg_expense * (1 + expense_growth * step) * expense_factor
        predictions.append(
            MonthlyBucket(
                year=year,
                month=month,
                income=income,
                expense=expense,
                net=income - expense,
                predicted=True,
                confidence=policy.forecast_confidence(step),
            )
        )
    return [*history, *predictions]


def overall_confidence(history: Sequence[MonthlyBucket], *, policy: AnalyticsPolicy | None = None) -> float:
    """Data-quantity times expense-stability score for a forecast, in 0..1."""
    policy = policy or AnalyticsPolicy()
    data_quality = min(1.0, len(history) / 12)
    expenses = [row.expense for row in history if row.expense > 0]
    if len(expenses) < 2:
        return 0.5
    stability = max(policy.confidence_floor, 1 - coefficient_of_variation(expenses))
    return clamp(data_quality * stability, 0.0, 1.0)
