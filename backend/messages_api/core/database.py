import ssl

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from .config import Settings

APPLICATION_NAME = "messages-api"

Base = declarative_base()


def relaxed_ssl_context() -> ssl.SSLContext:
    # Managed Postgres hosts (Render etc.) present self-signed certificates
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def build_connect_args(settings: Settings) -> dict:
    connect_args = {
        "server_settings": {
            "application_name": APPLICATION_NAME
        }
    }
    if settings.DATABASE_URL:
        connect_args["ssl"] = relaxed_ssl_context()
    return connect_args


def create_db_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(
        settings.ASYNC_DATABASE_URL,
        echo=settings.SQL_ECHO,
        connect_args=build_connect_args(settings),
    )


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )


async def get_db(request: Request):
    async with request.app.state.sessionmaker() as session:
        yield session
