from __future__ import annotations

from collections.abc import Iterable, Sequence

from finsight.models.enums import InsightKind, TransactionType
from finsight.services.policy import AnalyticsPolicy
from finsight.services.records import Insight, MonthlyBucket, TransactionRecord
from finsight.utils.stats import mean, percent_change


UNCATEGORIZED = "Uncategorized"


def _savings_insight(recent: Sequence[MonthlyBucket], policy: AnalyticsPolicy) -> Insight | None:
    avg_income = mean([row.income for row in recent])
    avg_expense = mean([row.expense for row in recent])
    avg_savings = avg_income - avg_expense
    savings_rate = avg_savings / avg_income * 100 if avg_income > 0 else 0.0
    target = avg_income * policy.target_savings_rate_pct / 100

    if savings_rate < policy.low_savings_rate_pct:
        return Insight(
            kind=InsightKind.warning,
            title="Low Savings Rate",
            description=(
                f"Your savings rate is {savings_rate:.1f}%. "
                f"Experts recommend saving at least {policy.target_savings_rate_pct:g}% of income."
            ),
            financial_impact=target - avg_savings,
        )
    if savings_rate > policy.high_savings_rate_pct:
        return Insight(
            kind=InsightKind.positive,
            title="Excellent Savings Rate",
            description=(
                f"Your savings rate of {savings_rate:.1f}% is exceptional! "
                "You're on track for strong financial health."
            ),
            financial_impact=avg_savings - target,
        )
    return None


def _expense_drift_insight(
    recent: Sequence[MonthlyBucket],
    upcoming: Sequence[MonthlyBucket],
    policy: AnalyticsPolicy,
) -> Insight | None:
    if not upcoming:
        return None
    avg_expense = mean([row.expense for row in recent])
    future_avg_expense = mean([row.expense for row in upcoming])
    increase = percent_change(avg_expense, future_avg_expense)
    if increase <= policy.expense_drift_pct:
        return None
    return Insight(
        kind=InsightKind.warning,
        title="Rising Expenses Predicted",
        description=(
            f"Our model predicts expenses may increase by {increase:.1f}% in coming months. "
            "Consider reviewing your budget."
        ),
        financial_impact=future_avg_expense - avg_expense,
    )


def category_totals(transactions: Iterable[TransactionRecord]) -> dict[str, float]:
    """All-time expense magnitude per category name, in first-seen order."""
    totals: dict[str, float] = {}
    for tx in transactions:
        if tx.type != TransactionType.expense:
            continue
        name = tx.category_name or UNCATEGORIZED
        totals[name] = totals.get(name, 0.0) + abs(tx.amount)
    return totals


def _category_insights(transactions: Iterable[TransactionRecord], policy: AnalyticsPolicy) -> list[Insight]:
    totals = category_totals(transactions)
    total_expenses = sum(totals.values())
    if total_expenses <= 0:
        return []

    rows: list[Insight] = []
    for name, amount in totals.items():
        share = amount / total_expenses * 100
        if share <= policy.category_share_pct or name in policy.category_share_exclusions:
            continue
        rows.append(
            Insight(
                kind=InsightKind.warning,
                title=f"High {name} Spending",
                description=(
                    f"{name} accounts for {share:.1f}% of your expenses. "
                    "Consider if this aligns with your priorities."
                ),
                financial_impact=amount,
                category=name,
            )
        )
    return rows


def generate_insights(
    history: Sequence[MonthlyBucket],
    predictions: Sequence[MonthlyBucket],
    transactions: Iterable[TransactionRecord],
    *,
    policy: AnalyticsPolicy | None = None,
) -> list[Insight]:
    """Savings-rate, expense-drift and category-concentration insights.

    ``history`` holds historical buckets only and ``predictions`` the forecast
    buckets; the last ``insight_window`` of the former are compared with the
    first ``insight_window`` of the latter.
    """
    policy = policy or AnalyticsPolicy()
    recent = list(history[-policy.insight_window :])
    upcoming = list(predictions[: policy.insight_window])

    insights: list[Insight] = []
    savings = _savings_insight(recent, policy)
    if savings is not None:
        insights.append(savings)
    drift = _expense_drift_insight(recent, upcoming, policy)
    if drift is not None:
        insights.append(drift)
    insights.extend(_category_insights(transactions, policy))
    return insights
