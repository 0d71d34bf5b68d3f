from __future__ import annotations

from sqlalchemy import func, select

from finsight.db.base import Base
from finsight.db.session import SessionLocal, engine
from finsight.models.tenant import Tenant
from finsight.models.transaction import Transaction
from finsight.services.seed import seed_demo_data


def main() -> None:
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        seed_demo_data(db)
        tenant = db.scalar(select(Tenant).where(Tenant.code == "DEMO"))
        if tenant is None:
            raise RuntimeError("Demo tenant was not created.")
        count = db.scalar(select(func.count(Transaction.id)).where(Transaction.tenant_id == tenant.id))
        print(f"Demo tenant {tenant.code} (id={tenant.id}) has {count} transactions.")


if __name__ == "__main__":
    main()
