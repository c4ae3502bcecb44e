import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from messages_api.core.config import Settings
from messages_api.main import create_app

# sqlite cannot create a file in a directory that does not exist
UNREACHABLE_DB_URL = "sqlite+aiosqlite:////nonexistent-dir/messages.db"


@pytest.fixture
def settings():
    return Settings(_env_file=None, DB_INIT_RETRY_DELAY=0)


@pytest.fixture
def engine(tmp_path):
    """A file-backed SQLite database, fresh for each test."""
    db_path = tmp_path / "messages.db"
    return create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)


@pytest.fixture
def broken_engine():
    return create_async_engine(UNREACHABLE_DB_URL, poolclass=NullPool)


@pytest.fixture
def fatal_errors():
    return []


@pytest.fixture
def make_client(settings, fatal_errors):
    def _make(engine, settings=settings, wait=True):
        app = create_app(settings=settings, engine=engine, on_fatal=fatal_errors.append)
        client = TestClient(app)
        client.__enter__()
        if wait:
            client.portal.call(app.state.initializer.wait_settled)
        opened.append(client)
        return client

    opened = []
    yield _make
    for client in opened:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client, engine):
    return make_client(engine)
