from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    # Application
    ENVIRONMENT: Literal["local", "development", "test", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    SERVICE_NAME: str = "accounts"

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # Auth
    # Placeholder secret keeps local/test runs working; real deployments
    # override it via env.
    SUPABASE_JWT_SECRET: str = "test-jwt-secret"
    JWT_ALGORITHM: str = "HS256"

    # Tenancy
    DEFAULT_ORGANIZATION_NAME: str = "Service Dog Standards"
    DEFAULT_ORGANIZATION_SUBDOMAIN: str = "sds"

    # Access gate fallbacks (where the frontend sends denied / anonymous users)
    ACCESS_DENIED_REDIRECT: str = "/dashboard"
    LOGIN_REDIRECT: str = "/auth/login"

    # Agreement acceptance retries on write conflicts
    AGREEMENT_ACCEPT_MAX_ATTEMPTS: int = 3
    AGREEMENT_ACCEPT_BACKOFF_SECONDS: float = 0.05

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str]) -> str:
        if isinstance(v, str):
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+psycopg://", 1)
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
