"""Health Check Route"""
from fastapi import APIRouter

from core.config import settings
from core.errors import api_handler, utc_timestamp

router = APIRouter()


@router.get("/health")
@api_handler
async def health_check():
    return {
        "status": "ok",
        "timestamp": utc_timestamp(),
        "version": settings.APP_VERSION,
    }
