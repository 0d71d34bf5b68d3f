from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime

from finsight.models.enums import (
    ConfidenceBand,
    InsightKind,
    RecurringFrequency,
    TransactionType,
    TrendDirection,
)


@dataclass(frozen=True)
class TransactionRecord:
    id: int | str
    amount: float
    date: datetime
    type: TransactionType
    category_id: int | str | None
    category_name: str | None = None
    description: str = ""


@dataclass(frozen=True)
class CategoryRef:
    id: int | str
    name: str


@dataclass(frozen=True)
class ExistingBudget:
    category_id: int | str


@dataclass(frozen=True)
class MonthlyBucket:
    year: int
    month: int
    income: float = 0.0
    expense: float = 0.0
    net: float = 0.0
    predicted: bool = False
    confidence: float = 1.0

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def label(self) -> str:
        return f"{calendar.month_abbr[self.month]} {self.year:04d}"


@dataclass(frozen=True)
class TrendResult:
    direction: TrendDirection
    percentage: float
    description: str


@dataclass(frozen=True)
class TrendSummary:
    income: TrendResult
    expense: TrendResult
    savings: TrendResult


@dataclass(frozen=True)
class Insight:
    kind: InsightKind
    title: str
    description: str
    financial_impact: float
    category: str | None = None


@dataclass(frozen=True)
class RecurringPattern:
    description_key: str
    description: str
    category_id: int | str | None
    category_name: str
    amount: float
    frequency: RecurringFrequency
    occurrence_count: int
    last_date: datetime
    next_expected_date: datetime
    confidence: int


@dataclass(frozen=True)
class BudgetSuggestion:
    category_id: int | str
    category_name: str
    suggested_amount: int
    current_average_spending: float
    confidence_band: ConfidenceBand
    reasoning: str
    coefficient: float


@dataclass(frozen=True)
class ForecastReport:
    buckets: list[MonthlyBucket]
    trends: TrendSummary
    insights: list[Insight]
    confidence: float

    @property
    def predictions(self) -> list[MonthlyBucket]:
        return [bucket for bucket in self.buckets if bucket.predicted]
