"""
Creates the `messages` table if it does not already exist and seeds the
sample rows, retrying the whole sequence while the database is unreachable.
"""

import asyncio
from enum import Enum
from typing import Awaitable, Callable

from sqlalchemy import insert, literal, select, Text
from sqlalchemy.ext.asyncio import AsyncEngine

from messages_api.core.database import Base
from messages_api.core.errors import DatabaseInitError, describe_error
from messages_api.core.logging import get_logger
from messages_api.models.message import Message

logger = get_logger(__name__)

SEED_MESSAGES = (
    "Welcome to our Docker PostgreSQL app!",
    "This is a sample message from the database",
    "You can add your own messages too!",
)


class InitState(str, Enum):
    PENDING = "pending"
    RETRYING = "retrying"
    READY = "ready"
    FAILED = "failed"


def seed_statement(content: str):
    """INSERT ... SELECT that is a no-op when a row with this content exists."""
    already_there = (
        select(Message.id).where(Message.content == content).correlate(None).exists()
    )
    return insert(Message).from_select(
        ["content"],
        select(literal(content, Text)).where(~already_there),
    )


class SchemaInitializer:
    """
    Runs schema creation and seeding with a bounded number of attempts.

    Every failed attempt is logged with the remaining budget and followed by
    a fixed, non-blocking delay. Once the budget is spent the state becomes
    FAILED and `initialize()` raises DatabaseInitError.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        retries: int = 5,
        delay: float = 5.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.engine = engine
        self.retries = retries
        self.delay = delay
        self._sleep = sleep
        self.state = InitState.PENDING
        self.attempts = 0
        self._settled = asyncio.Event()

    @property
    def ready(self) -> bool:
        return self.state is InitState.READY

    async def _run_once(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            for content in SEED_MESSAGES:
                await conn.execute(seed_statement(content))

    async def initialize(self) -> None:
        retries = self.retries
        while retries > 0:
            self.state = InitState.PENDING
            self.attempts += 1
            try:
                await self._run_once()
            except Exception as e:
                logger.error(
                    f"Database initialization error ({retries} retries left): {describe_error(e)}"
                )
                retries -= 1
                self.state = InitState.RETRYING
                await self._sleep(self.delay)
                continue

            self.state = InitState.READY
            self._settled.set()
            logger.info("Database initialized successfully")
            return

        self.state = InitState.FAILED
        self._settled.set()
        raise DatabaseInitError("Failed to initialize database after multiple retries")

    async def wait_settled(self) -> InitState:
        """Block until the initializer reaches READY or FAILED."""
        await self._settled.wait()
        return self.state
