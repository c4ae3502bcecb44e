from pydantic import BaseModel, field_serializer
from typing import List, Optional
from datetime import datetime, timezone

def isoformat_utc(value: datetime) -> str:
    # e.g. 2024-05-01T12:30:00.123Z; naive values are stored as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")

class MessageCreate(BaseModel):
    content: Optional[str] = None

class MessageResponse(BaseModel):
    id: int
    content: str
    created_at: Optional[datetime]

    class Config:
        from_attributes = True

    @field_serializer("created_at")
    def serialize_created_at(self, value: Optional[datetime]):
        return isoformat_utc(value) if value is not None else None

class MessageListResponse(BaseModel):
    success: bool = True
    data: List[MessageResponse]

class MessageCreatedResponse(BaseModel):
    success: bool = True
    data: MessageResponse
    message: str = "Message added successfully"

class InfoResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: str
    client: str

class HealthResponse(BaseModel):
    success: bool = True
    database: str = "connected"
    timestamp: str
