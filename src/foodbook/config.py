from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./foodbook.db"
    SQL_ECHO: bool = False
    # для локального запуска без alembic
    AUTO_CREATE_SCHEMA: bool = True
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    class Config:
        env_file = ".env"


settings = Settings()
