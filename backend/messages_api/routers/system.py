from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from messages_api.core.database import get_db
from messages_api.core.errors import ApiError, describe_error
from messages_api.schemas.message import HealthResponse, InfoResponse, isoformat_utc

router = APIRouter(prefix="/api", tags=["system"])


def utc_timestamp() -> str:
    return isoformat_utc(datetime.now(timezone.utc))

@router.get("", response_model=InfoResponse)
async def info(request: Request):
    return {
        "message": "Hello from Backend with PostgreSQL!",
        "timestamp": utc_timestamp(),
        "client": request.headers.get("origin") or "unknown",
        "success": True,
    }

@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)):
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            describe_error(e),
            database="disconnected",
        )
    return {
        "success": True,
        "database": "connected",
        "timestamp": utc_timestamp(),
    }
