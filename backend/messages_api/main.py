import asyncio
import os
from contextlib import asynccontextmanager
from typing import Callable, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from messages_api.core.config import Settings, settings as default_settings
from messages_api.core.database import create_db_engine, create_sessionmaker
from messages_api.core.errors import DatabaseInitError, register_error_handlers
from messages_api.core.init_db import SchemaInitializer
from messages_api.core.logging import configure_logging, get_logger
from messages_api.routers import messages, system

logger = get_logger(__name__)


def exit_process(exc: BaseException) -> None:
    os._exit(1)


async def bootstrap(initializer: SchemaInitializer, on_fatal: Callable[[BaseException], None]):
    try:
        await initializer.initialize()
    except DatabaseInitError as e:
        logger.error(f"Failed to start backend: {e}")
        on_fatal(e)
        return
    logger.info("Backend running successfully!")
    logger.info("PostgreSQL database connected and initialized")


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[AsyncEngine] = None,
    on_fatal: Optional[Callable[[BaseException], None]] = None,
) -> FastAPI:
    settings = settings or default_settings
    on_fatal = on_fatal or exit_process

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Backend starting on port {settings.PORT}...")
        db_engine = engine or create_db_engine(settings)
        app.state.engine = db_engine
        app.state.sessionmaker = create_sessionmaker(db_engine)
        app.state.initializer = SchemaInitializer(
            db_engine,
            retries=settings.DB_INIT_RETRIES,
            delay=settings.DB_INIT_RETRY_DELAY,
        )
        # Not awaited: the server starts accepting connections right away
        init_task = asyncio.create_task(bootstrap(app.state.initializer, on_fatal))
        try:
            yield
        finally:
            if not init_task.done():
                init_task.cancel()
                try:
                    await init_task
                except asyncio.CancelledError:
                    logger.info("Database initialization cancelled by shutdown")
            await db_engine.dispose()

    app = FastAPI(title="Messages API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    register_error_handlers(app)

    app.include_router(system.router)
    app.include_router(messages.router)

    return app


configure_logging(default_settings.LOG_LEVEL)
app = create_app()


def run():
    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)


if __name__ == "__main__":
    run()
