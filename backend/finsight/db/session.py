from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from finsight.core.config import get_settings


settings = get_settings()

# Keep the pool small and recycle often; SQLite (local/dev) manages its own pool.
_pool_options = (
    {}
    if settings.database_url.startswith("sqlite")
    else {"pool_size": 5, "max_overflow": 5, "pool_recycle": 300}
)

engine = create_engine(
    settings.database_url,
    future=True,
    pool_pre_ping=True,
    **_pool_options,
)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)
