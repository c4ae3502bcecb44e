from sqlalchemy import Column, Integer, DateTime, Text
from sqlalchemy.sql import func
from messages_api.core.database import Base

class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
