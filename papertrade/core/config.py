"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here, no scattered magic strings.
"""

from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        database_url: Full SQLAlchemy URL. When unset, a Postgres URL is
            built from the postgres_* values.
        sql_echo: Log every SQL statement.
        redis_url: Redis URL for the product-list cache. Caching is
            disabled when unset.
        product_cache_ttl_seconds: Lifetime of the cached product list.
        jwt_secret: HMAC key used to sign access tokens.
        jwt_algorithm: JWT signing algorithm.
        access_token_expire_minutes: Lifetime of a regular access token.
        remember_me_expire_days: Lifetime of a "remember me" token.
        bcrypt_rounds: bcrypt cost factor for password hashes.
        initial_wallet_balance: Virtual funds granted on registration.
        rate_limit_enabled: Toggle the slowapi limiter.
        rate_limit_default: Default rate limit for all endpoints.
        cors_origins: Origins allowed by the CORS middleware.
        auto_create_schema: Create missing tables on startup.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "PaperTrade"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    database_url: Optional[str] = None
    sql_echo: bool = False
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "papertrade"

    redis_url: Optional[str] = None
    product_cache_ttl_seconds: int = 60

    jwt_secret: str = "change-me-in-production-please-32b"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    remember_me_expire_days: int = 30
    bcrypt_rounds: int = 12

    initial_wallet_balance: Decimal = Decimal("100000.00")

    rate_limit_enabled: bool = True
    rate_limit_default: str = "100/minute"
    cors_origins: list[str] = ["http://localhost:3000"]
    auto_create_schema: bool = True

    def get_database_url(self) -> str:
        """Return the effective SQLAlchemy database URL.

        Priority:
        1. Explicit `DATABASE_URL`
        2. Build a Postgres URL from postgres_* values (Docker Compose or local setups)
        """
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
