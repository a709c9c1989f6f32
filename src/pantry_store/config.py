"""Configuration settings for the pantry store."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Storage settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    # Any SQLAlchemy async URL works; postgresql+asyncpg://... for a shared server.
    database_url: str = "sqlite+aiosqlite:///pantry.sqlite3"
    database_echo: bool = False

    # Only applied to client/server engines; SQLite keeps SQLAlchemy's default pool.
    database_pool_size: int = Field(default=1, ge=1)


settings = Settings()
