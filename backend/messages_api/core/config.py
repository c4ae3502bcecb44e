from typing import List, Optional

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL, make_url

DEFAULT_CORS_ORIGINS = [
    "http://localhost:8080",
    "http://127.0.0.1:8080",
    "https://anisbaa.github.io",  # GitHub Pages frontend
]


class Settings(BaseSettings):
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Full connection string (managed hosting); takes precedence over DB_*
    DATABASE_URL: Optional[str] = None
    DB_USER: str = "postgres"
    DB_HOST: str = "db"
    DB_NAME: str = "mydb"
    DB_PASSWORD: str = "password"
    DB_PORT: int = 5432

    CORS_ORIGINS: List[str] = DEFAULT_CORS_ORIGINS
    DB_INIT_RETRIES: int = 5
    DB_INIT_RETRY_DELAY: float = 5.0
    SQL_ECHO: bool = False
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_ignore_empty = True
        extra = "ignore"

    @property
    def ASYNC_DATABASE_URL(self) -> str:
        if self.DATABASE_URL:
            url = make_url(self.DATABASE_URL)
            if url.drivername in ("postgres", "postgresql"):
                url = url.set(drivername="postgresql+asyncpg")
            if url.drivername == "postgresql+asyncpg":
                # asyncpg rejects sslmode; TLS comes from connect_args instead
                url = url.difference_update_query(["sslmode"])
            return url.render_as_string(hide_password=False)
        url = URL.create(
            "postgresql+asyncpg",
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )
        return url.render_as_string(hide_password=False)


settings = Settings()
