from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import datetime, timedelta

from finsight.models.enums import ConfidenceBand, TransactionType
from finsight.services.policy import AnalyticsPolicy
from finsight.services.records import BudgetSuggestion, CategoryRef, ExistingBudget, TransactionRecord
from finsight.utils.decimal_math import apply_buffer
from finsight.utils.stats import coefficient_of_variation


def _fmt(amount: float, symbol: str) -> str:
    return f"{symbol}{amount:,.2f}"


def _slice_totals(
    members: list[TransactionRecord],
    *,
    window_start: datetime,
    slice_days: float,
    slices: int,
) -> list[float]:
    totals = [0.0] * slices
    for tx in members:
        offset = (tx.date - window_start).total_seconds() / 86400
        index = min(int(offset // slice_days), slices - 1)
        totals[index] += abs(tx.amount)
    return totals


def _band(coefficient: float, policy: AnalyticsPolicy) -> ConfidenceBand:
    if coefficient < policy.budget_high_band_coefficient:
        return ConfidenceBand.high
    if coefficient < policy.budget_medium_band_coefficient:
        return ConfidenceBand.medium
    return ConfidenceBand.low


def _with_buffer(average: float, buffer_pct: float) -> int:
    # Unrounded Decimal product: 100 * 1.1 ceils to 110, 100.0033 * 1.1 to 111.
    return math.ceil(apply_buffer(average, buffer_pct))


def _reasoning(band: ConfidenceBand, average: float, slices: list[float], symbol: str) -> str:
    if band == ConfidenceBand.high:
        return (
            f"Consistent spending pattern. You typically spend {_fmt(average, symbol)} "
            "per month in this category."
        )
    if band == ConfidenceBand.medium:
        return (
            f"Moderate spending variation. Average of {_fmt(average, symbol)} "
            "per month with occasional peaks."
        )
    return (
        f"Variable spending detected. Ranges from {_fmt(min(slices), symbol)} "
        f"to {_fmt(max(slices), symbol)} per month."
    )


def recommend_budgets(
    transactions: Iterable[TransactionRecord],
    *,
    now: datetime,
    existing_budgets: Iterable[ExistingBudget] = (),
    categories: Iterable[CategoryRef] | None = None,
    policy: AnalyticsPolicy | None = None,
) -> list[BudgetSuggestion]:
    """Suggest monthly ceilings for unbudgeted categories with material spend.

    Looks back ``budget_lookback_days`` from ``now`` and splits that window
    into ``budget_slices`` equal slices; the spread of the slice totals sets
    the confidence band. When ``categories`` is given, spend in categories
    missing from it is ignored.
    """
    policy = policy or AnalyticsPolicy()
    window_start = now - timedelta(days=policy.budget_lookback_days)
    budgeted = {row.category_id for row in existing_budgets}
    catalogue = {row.id: row.name for row in categories} if categories is not None else None

    by_category: dict[int | str, list[TransactionRecord]] = {}
    for tx in transactions:
        if tx.type != TransactionType.expense or tx.category_id is None:
            continue
        if not window_start <= tx.date <= now:
            continue
        by_category.setdefault(tx.category_id, []).append(tx)

    slice_days = policy.budget_lookback_days / policy.budget_slices
    months_covered = policy.budget_lookback_days / 30
    rows: list[BudgetSuggestion] = []
    for category_id, members in by_category.items():
        if category_id in budgeted:
            continue
        if catalogue is not None:
            if category_id not in catalogue:
                continue
            name = catalogue[category_id]
        else:
            name = next((tx.category_name for tx in members if tx.category_name), None) or "Uncategorized"

        average = sum(abs(tx.amount) for tx in members) / months_covered
        if average < policy.budget_materiality_floor:
            continue

        slices = _slice_totals(
            members,
            window_start=window_start,
            slice_days=slice_days,
            slices=policy.budget_slices,
        )
        coefficient = coefficient_of_variation(slices)
        band = _band(coefficient, policy)
        rows.append(
            BudgetSuggestion(
                category_id=category_id,
                category_name=name,
                suggested_amount=_with_buffer(average, policy.budget_buffer_pct),
                current_average_spending=average,
                confidence_band=band,
                reasoning=_reasoning(band, average, slices, policy.currency_symbol),
                coefficient=coefficient,
            )
        )

    rows.sort(key=lambda row: row.current_average_spending, reverse=True)
    return rows[: policy.budget_limit]
