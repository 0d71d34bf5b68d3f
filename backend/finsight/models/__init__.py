from finsight.models.budget import Budget
from finsight.models.category import Category
from finsight.models.enums import (
    BudgetPeriod,
    CategoryType,
    ConfidenceBand,
    InsightKind,
    RecurringFrequency,
    TransactionType,
    TrendDirection,
)
from finsight.models.tenant import Tenant
from finsight.models.transaction import Transaction

__all__ = [
    "Budget",
    "BudgetPeriod",
    "Category",
    "CategoryType",
    "ConfidenceBand",
    "InsightKind",
    "RecurringFrequency",
    "Tenant",
    "Transaction",
    "TransactionType",
    "TrendDirection",
]
