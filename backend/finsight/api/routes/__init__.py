from fastapi import APIRouter

from finsight.api.routes import analytics, health


api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(analytics.router)
