from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from messages_api.core.database import get_db
from messages_api.core.errors import ApiError, describe_error
from messages_api.core.logging import get_logger
from messages_api.models.message import Message
from messages_api.schemas.message import MessageCreate, MessageCreatedResponse, MessageListResponse

logger = get_logger(__name__)


async def require_ready(request: Request):
    initializer = request.app.state.initializer
    if not initializer.ready:
        raise ApiError(status.HTTP_503_SERVICE_UNAVAILABLE, "Database is not ready")


router = APIRouter(
    prefix="/api/messages",
    tags=["messages"],
    dependencies=[Depends(require_ready)],
)

@router.get("", response_model=MessageListResponse)
async def list_messages(db: AsyncSession = Depends(get_db)):
    try:
        result = await db.execute(
            select(Message).order_by(Message.created_at.desc(), Message.id.desc())
        )
        messages = result.scalars().all()
    except Exception as e:
        logger.warning(f"Listing messages failed: {e}")
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, describe_error(e))
    return {"success": True, "data": messages}

@router.post("", response_model=MessageCreatedResponse)
async def create_message(payload: Optional[MessageCreate] = None, db: AsyncSession = Depends(get_db)):
    if payload is None or not payload.content:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Content is required")

    try:
        message = Message(content=payload.content)
        db.add(message)
        await db.commit()
        await db.refresh(message)
    except Exception as e:
        logger.warning(f"Adding message failed: {e}")
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, describe_error(e))

    return {
        "success": True,
        "data": message,
        "message": "Message added successfully",
    }
