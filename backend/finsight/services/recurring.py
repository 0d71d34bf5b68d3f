from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import timedelta

from finsight.models.enums import RecurringFrequency
from finsight.services.policy import AnalyticsPolicy
from finsight.services.records import RecurringPattern, TransactionRecord
from finsight.utils.stats import clamp, coefficient_of_variation, mean, round_half_up


logger = logging.getLogger("finsight.recurring")

SECONDS_PER_DAY = 86400
_DIGIT_RUNS = re.compile(r"\d+")


def normalize_description(description: str) -> str:
    """Grouping key for fuzzy description matching.

    Lowercases, trims, removes every run of digits and trims again, so
    "NETFLIX 0423" and "Netflix 0524" share the key "netflix".
    """
    return _DIGIT_RUNS.sub("", description.lower().strip()).strip()


def classify_frequency(avg_interval: float, policy: AnalyticsPolicy) -> RecurringFrequency | None:
    for frequency, low, high in policy.recurring_frequency_bands:
        if low <= avg_interval <= high:
            return frequency
    return None


def _interval_days(members: list[TransactionRecord]) -> list[float]:
    return [
        float(round_half_up((members[index].date - members[index - 1].date).total_seconds() / SECONDS_PER_DAY))
        for index in range(1, len(members))
    ]


def detect_recurring_patterns(
    transactions: Iterable[TransactionRecord],
    *,
    policy: AnalyticsPolicy | None = None,
) -> list[RecurringPattern]:
    policy = policy or AnalyticsPolicy()

    groups: dict[str, list[TransactionRecord]] = {}
    for tx in transactions:
        groups.setdefault(normalize_description(tx.description), []).append(tx)

    patterns: list[RecurringPattern] = []
    for key, members in groups.items():
        if len(members) < policy.recurring_min_occurrences:
            continue
        members = sorted(members, key=lambda tx: tx.date)
        intervals = _interval_days(members)
        avg_interval = mean(intervals)
        coefficient = coefficient_of_variation(intervals)
        if coefficient > policy.recurring_max_coefficient:
            logger.debug("Skipping %r: irregular intervals (cv=%.3f).", key, coefficient)
            continue
        frequency = classify_frequency(avg_interval, policy)
        if frequency is None:
            logger.debug("Skipping %r: non-standard interval %.1f days.", key, avg_interval)
            continue

        first, last = members[0], members[-1]
        patterns.append(
            RecurringPattern(
                description_key=key,
                description=first.description,
                category_id=first.category_id,
                category_name=first.category_name or "Uncategorized",
                amount=mean([abs(tx.amount) for tx in members]),
                frequency=frequency,
                occurrence_count=len(members),
                last_date=last.date,
                next_expected_date=last.date + timedelta(days=avg_interval),
                confidence=int(clamp(round_half_up((1 - coefficient) * 100), 0, 100)),
            )
        )

    patterns.sort(key=lambda row: row.confidence, reverse=True)
    return patterns[: policy.recurring_limit]
