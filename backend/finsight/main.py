from collections import defaultdict, deque
from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from finsight.api.routes import api_router
from finsight.core.config import get_settings
from finsight.db.base import Base
from finsight.db.session import SessionLocal, engine
from finsight.services.seed import seed_demo_data


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

settings = get_settings()
logger = logging.getLogger("finsight.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_schema:
        Base.metadata.create_all(bind=engine)
    if settings.seed_demo_data:
        with SessionLocal() as db:
            try:
                seed_demo_data(db)
            except Exception:
                db.rollback()
                logger.exception("Skipping demo seed due to startup error.")
    logger.info("FinSight API ready.")
    yield
    engine.dispose()
    logger.info("FinSight API shutdown complete.")


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Sliding window of request timestamps per (tenant, path).
_request_windows: dict[str, deque[float]] = defaultdict(deque)
MAX_TRACKED_WINDOWS = 4096


def _tenant_key(raw: str | None) -> str:
    if raw is None:
        return "1"
    try:
        return str(int(raw))
    except ValueError:
        return "invalid"


def _prune_windows(now: float) -> None:
    expired = [
        key
        for key, window in _request_windows.items()
        if not window or now - window[-1] > settings.rate_limit_window_seconds
    ]
    for key in expired:
        del _request_windows[key]


def _rate_limited(key: str, now: float) -> bool:
    if key not in _request_windows and len(_request_windows) >= MAX_TRACKED_WINDOWS:
        _prune_windows(now)
    window = _request_windows[key]
    while window and now - window[0] > settings.rate_limit_window_seconds:
        window.popleft()
    if len(window) >= settings.rate_limit_requests:
        return True
    window.append(now)
    return False


@app.middleware("http")
async def request_log_and_rate_limit(request: Request, call_next):
    started = time.monotonic()
    tenant = _tenant_key(request.headers.get("x-tenant-id"))
    if _rate_limited(f"{tenant}:{request.url.path}", time.time()):
        logger.warning("Rate limit hit for tenant %s on %s", tenant, request.url.path)
        return JSONResponse(
            status_code=429,
            content={"detail": "Rate limit exceeded. Please retry later."},
        )

    try:
        response = await call_next(request)
    except Exception as exc:  # pragma: no cover
        logger.exception("Unhandled error for %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    elapsed_ms = (time.monotonic() - started) * 1000
    response.headers["X-Process-Time-Ms"] = f"{elapsed_ms:.2f}"
    logger.info(
        "%s %s tenant=%s -> %s %.2fms",
        request.method,
        request.url.path,
        tenant,
        response.status_code,
        elapsed_ms,
    )
    return response


@app.get("/", include_in_schema=False)
def root() -> dict[str, str]:
    return {
        "service": settings.app_name,
        "status": "ok",
        "health": f"{settings.api_prefix}/health",
        "docs": "/docs",
    }


app.include_router(api_router, prefix=settings.api_prefix)
