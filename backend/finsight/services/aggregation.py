from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from finsight.models.enums import TransactionType
from finsight.services.records import MonthlyBucket, TransactionRecord
from finsight.utils.date_utils import add_months


def month_range(now: datetime, window_months: int) -> list[tuple[int, int]]:
    """Calendar months from ``now - window_months`` to ``now``, both inclusive."""
    start_year, start_month = add_months(now.year, now.month, -window_months)
    return [add_months(start_year, start_month, offset) for offset in range(window_months + 1)]


def aggregate_monthly(
    transactions: Iterable[TransactionRecord],
    *,
    now: datetime,
    window_months: int = 12,
) -> list[MonthlyBucket]:
    if window_months < 0:
        raise ValueError("window_months must be >= 0.")

    totals: dict[tuple[int, int], dict[str, float]] = {
        key: {"income": 0.0, "expense": 0.0} for key in month_range(now, window_months)
    }
    for tx in transactions:
        bucket = totals.get((tx.date.year, tx.date.month))
        if bucket is None:
            continue
        if tx.type == TransactionType.income:
            bucket["income"] += abs(tx.amount)
        elif tx.type == TransactionType.expense:
            bucket["expense"] += abs(tx.amount)

    return [
        MonthlyBucket(
            year=year,
            month=month,
            income=row["income"],
            expense=row["expense"],
            net=row["income"] - row["expense"],
        )
        for (year, month), row in totals.items()
    ]
