"""Application configuration"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional, Union
import json

# Placeholder secret; only accepted when debug is on
DEFAULT_SESSION_SECRET = "change-me"


class Settings(BaseSettings):
    """Application settings from environment variables"""

    # Application
    app_name: str = "AlertNAV"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database - same variables the admin scripts read
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_database: str = "alertnav"
    postgres_ssl: bool = False
    # Full SQLAlchemy URL, overrides the postgres_* fields when set
    database_url: Optional[str] = None
    create_tables_on_startup: bool = False

    # Pool
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_pool_recycle: int = 1800  # Recycle connections after 30 minutes
    db_pool_timeout: int = 30

    # CORS - can be JSON string from env or list
    cors_origins: Union[str, list[str]] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Session cookie
    session_secret: str = DEFAULT_SESSION_SECRET
    session_cookie_name: str = "user_email"
    session_max_age_seconds: int = 60 * 60 * 24 * 7  # 7 days
    session_cookie_secure: bool = False

    # GET /api/data only returns readings owned by the session user
    scope_locations_to_owner: bool = True

    # Map view
    map_center_lat: float = 39.9612
    map_center_lon: float = -82.9988
    map_zoom: int = 13
    map_poll_interval_seconds: int = 5

    # Logging
    log_level: str = "INFO"
    log_file: str = "logs/alertnav.log"
    log_json: bool = False
    log_max_bytes: int = 10 * 1024 * 1024
    log_backup_count: int = 5

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from JSON string if needed"""
        if isinstance(self.cors_origins, str):
            try:
                return json.loads(self.cors_origins)
            except json.JSONDecodeError:
                # If not valid JSON, split by comma
                return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
        return self.cors_origins

    @property
    def sqlalchemy_url(self) -> str:
        """Async SQLAlchemy URL for the service"""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_database}"
        )

    @property
    def psycopg2_params(self) -> dict:
        """Keyword arguments for psycopg2.connect() used by the admin scripts"""
        params = {
            "host": self.postgres_host,
            "port": self.postgres_port,
            "user": self.postgres_user,
            "password": self.postgres_password,
            "dbname": self.postgres_database,
        }
        if self.postgres_ssl:
            params["sslmode"] = "require"
        return params


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
