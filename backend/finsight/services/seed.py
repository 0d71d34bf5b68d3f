from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from finsight.models.budget import Budget
from finsight.models.category import Category
from finsight.models.enums import BudgetPeriod, CategoryType, TransactionType
from finsight.models.tenant import Tenant
from finsight.models.transaction import Transaction
from finsight.utils.date_utils import add_months
from finsight.utils.decimal_math import money

DEMO_MONTHS = 12

DEMO_CATEGORIES: list[tuple[str, CategoryType, str]] = [
    ("Salary", CategoryType.income, "#16a34a"),
    ("Housing", CategoryType.expense, "#0ea5e9"),
    ("Groceries", CategoryType.expense, "#f59e0b"),
    ("Utilities", CategoryType.expense, "#6366f1"),
    ("Subscriptions", CategoryType.expense, "#ec4899"),
    ("Dining", CategoryType.expense, "#ef4444"),
    ("Transport", CategoryType.expense, "#14b8a6"),
]


def _get_or_create_tenant(db: Session, *, code: str, name: str) -> Tenant:
    tenant = db.scalar(select(Tenant).where(Tenant.code == code))
    if tenant is not None:
        return tenant

    tenant = Tenant(code=code, name=name, is_active=True)
    db.add(tenant)
    db.flush()
    return tenant


def _get_or_create_category(
    db: Session,
    *,
    tenant_id: int,
    name: str,
    category_type: CategoryType,
    color: str,
) -> Category:
    category = db.scalar(
        select(Category).where(
            Category.tenant_id == tenant_id,
            Category.name == name,
            Category.category_type == category_type,
        )
    )
    if category is not None:
        return category

    category = Category(tenant_id=tenant_id, name=name, category_type=category_type, color=color)
    db.add(category)
    db.flush()
    return category


def _month_start(year: int, month: int) -> datetime:
    return datetime(year, month, 1, 9, 0, tzinfo=timezone.utc)


def _demo_rows(categories: dict[str, Category], *, now: datetime) -> list[dict]:
    rows: list[dict] = []

    def add(name: str, entry_type: TransactionType, amount: str | Decimal, when: datetime, description: str) -> None:
        if when > now:
            return
        rows.append(
            {
                "category_id": categories[name].id,
                "entry_type": entry_type,
                "amount": money(amount),
                "tx_date": when,
                "description": description,
            }
        )

    for offset in range(-DEMO_MONTHS, 1):
        year, month = add_months(now.year, now.month, offset)
        start = _month_start(year, month)
        step = offset + DEMO_MONTHS
        salary = Decimal("3200") + Decimal(step * 15)
        energy = Decimal("95") + Decimal(step % 4 * 6)
        dining = Decimal("60") + Decimal(step % 5 * 22)
        add("Salary", TransactionType.income, salary, start + timedelta(days=24), "ACME LTD SALARY")
        add("Housing", TransactionType.expense, "1150.00", start, "Rent payment")
        add("Utilities", TransactionType.expense, energy, start + timedelta(days=6), "Energy bill")
        reference = f"{year}{month:02d}"
        add("Subscriptions", TransactionType.expense, "10.99", start + timedelta(days=14), f"NETFLIX.COM {reference}")
        add("Dining", TransactionType.expense, dining, start + timedelta(days=19), "Dinner out")
        add("Transport", TransactionType.expense, "142.50", start + timedelta(days=2), "Monthly travel pass")

    week_start = _month_start(*add_months(now.year, now.month, -DEMO_MONTHS))
    week = 0
    while week_start + timedelta(days=7 * week) <= now:
        add(
            "Groceries",
            TransactionType.expense,
            Decimal("68") + Decimal(week % 3 * 7),
            week_start + timedelta(days=7 * week + 5),
            "Supermarket shop",
        )
        week += 1
    return rows


def seed_demo_data(db: Session, *, now: datetime | None = None) -> None:
    now = now or datetime.now(timezone.utc)
    tenant = _get_or_create_tenant(db, code="DEMO", name="Demo Household")
    categories = {
        name: _get_or_create_category(db, tenant_id=tenant.id, name=name, category_type=category_type, color=color)
        for name, category_type, color in DEMO_CATEGORIES
    }

    existing = db.scalar(select(func.count(Transaction.id)).where(Transaction.tenant_id == tenant.id))
    if existing:
        db.commit()
        return

    db.add_all(Transaction(tenant_id=tenant.id, **row) for row in _demo_rows(categories, now=now))
    db.add(
        Budget(
            tenant_id=tenant.id,
            category_id=categories["Housing"].id,
            amount=money("1200.00"),
            period=BudgetPeriod.monthly,
            start_date=_month_start(*add_months(now.year, now.month, -DEMO_MONTHS)),
        )
    )
    db.commit()
