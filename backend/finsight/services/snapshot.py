from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from fastapi import HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from finsight.models.budget import Budget
from finsight.models.category import Category
from finsight.models.tenant import Tenant
from finsight.models.transaction import Transaction
from finsight.services.records import CategoryRef, ExistingBudget, TransactionRecord
from finsight.utils.date_utils import as_utc


logger = logging.getLogger("finsight.snapshot")


@dataclass(frozen=True)
class TenantSnapshot:
    tenant_id: int
    transactions: list[TransactionRecord]
    categories: list[CategoryRef]
    budgets: list[ExistingBudget]
    truncated: bool


def tenant_or_404(db: Session, tenant_id: int) -> Tenant:
    tenant = db.get(Tenant, tenant_id)
    if tenant is None or not tenant.is_active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found.")
    return tenant


def load_transactions(db: Session, tenant_id: int, *, limit: int) -> tuple[list[TransactionRecord], bool]:
    """Newest ``limit`` transactions of a tenant, returned oldest first."""
    rows = list(
        db.execute(
            select(Transaction, Category.name)
            .outerjoin(Category, Category.id == Transaction.category_id)
            .where(Transaction.tenant_id == tenant_id)
            .order_by(Transaction.tx_date.desc(), Transaction.id.desc())
            .limit(limit + 1)
        ).all()
    )
    truncated = len(rows) > limit
    if truncated:
        rows = rows[:limit]
        logger.warning("Snapshot for tenant %s truncated to %s transactions.", tenant_id, limit)

    records = [
        TransactionRecord(
            id=tx.id,
            amount=float(abs(tx.amount)),
            date=as_utc(tx.tx_date),
            type=tx.entry_type,
            category_id=tx.category_id,
            category_name=category_name,
            description=tx.description or "",
        )
        for tx, category_name in reversed(rows)
    ]
    return records, truncated


def load_categories(db: Session, tenant_id: int) -> list[CategoryRef]:
    rows = db.scalars(select(Category).where(Category.tenant_id == tenant_id).order_by(Category.id.asc())).all()
    return [CategoryRef(id=row.id, name=row.name) for row in rows]


def load_active_budgets(db: Session, tenant_id: int, *, now: datetime) -> list[ExistingBudget]:
    rows = db.scalars(
        select(Budget).where(
            Budget.tenant_id == tenant_id,
            Budget.start_date <= now,
            or_(Budget.end_date.is_(None), Budget.end_date >= now),
        )
    ).all()
    return [ExistingBudget(category_id=row.category_id) for row in rows]


def load_snapshot(db: Session, tenant_id: int, *, now: datetime, limit: int) -> TenantSnapshot:
    tenant_or_404(db, tenant_id)
    transactions, truncated = load_transactions(db, tenant_id, limit=limit)
    snapshot = TenantSnapshot(
        tenant_id=tenant_id,
        transactions=transactions,
        categories=load_categories(db, tenant_id),
        budgets=load_active_budgets(db, tenant_id, now=now),
        truncated=truncated,
    )
    logger.info(
        "Loaded snapshot for tenant %s: %s transactions, %s categories, %s active budgets.",
        tenant_id,
        len(snapshot.transactions),
        len(snapshot.categories),
        len(snapshot.budgets),
    )
    return snapshot
