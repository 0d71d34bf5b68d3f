import enum


class TransactionType(str, enum.Enum):
    income = "income"
    expense = "expense"
    transfer = "transfer"


class CategoryType(str, enum.Enum):
    income = "income"
    expense = "expense"


class BudgetPeriod(str, enum.Enum):
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"


class TrendDirection(str, enum.Enum):
    increasing = "increasing"
    decreasing = "decreasing"
    stable = "stable"


class RecurringFrequency(str, enum.Enum):
    weekly = "weekly"
    biweekly = "biweekly"
    monthly = "monthly"
    yearly = "yearly"


class ConfidenceBand(str, enum.Enum):
    high = "high"
    medium = "medium"
    low = "low"


class InsightKind(str, enum.Enum):
    warning = "warning"
    positive = "positive"
    neutral = "neutral"
