from collections.abc import Generator
from datetime import datetime, timezone

from fastapi import Header, Query
from sqlalchemy.orm import Session

from finsight.db.session import SessionLocal
from finsight.services.policy import AnalyticsPolicy, get_analytics_policy
from finsight.utils.date_utils import as_utc


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_tenant_id(x_tenant_id: int = Header(default=1)) -> int:
    return x_tenant_id


def get_policy() -> AnalyticsPolicy:
    return get_analytics_policy()


def get_as_of(
    as_of: datetime | None = Query(default=None, description="Reference instant; defaults to now (UTC)."),
) -> datetime:
    if as_of is None:
        return datetime.now(timezone.utc)
    return as_utc(as_of)
