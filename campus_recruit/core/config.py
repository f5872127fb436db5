"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_JWT_SECRET = "change-this-secret"


class Settings(BaseSettings):
    # App
    app_name: str = "Campus Recruitment Portal"
    app_env: str = "development"
    log_level: str = "INFO"
    cors_origins: str = "*"

    # PostgreSQL
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "campus_user"
    postgres_password: str = "password"
    postgres_db: str = "campus_recruit_db"

    # Full URL override (e.g. sqlite:///./campus.db for local runs and tests)
    database_url: str = ""
    sql_echo: bool = False

    # MongoDB (shared rate-limit counters)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "campus_recruit"

    # JWT Auth
    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Password hashing
    bcrypt_rounds: int = 12

    # Rate limiting
    rate_limit_enabled: bool = True
    rate_limit_backend: str = "memory"
    rate_limit_max_requests: int = 100
    rate_limit_window_seconds: int = 15 * 60

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100

    # Default admin account created on startup
    seed_default_admin: bool = True
    default_admin_email: str = "admin@campusrecruit.com"
    default_admin_password: str = "admin123"

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, value: str) -> str:
        allowed = {"development", "staging", "production", "test"}
        if value not in allowed:
            raise ValueError(f"app_env must be one of {sorted(allowed)}")
        return value

    @field_validator("rate_limit_backend")
    @classmethod
    def validate_rate_limit_backend(cls, value: str) -> str:
        allowed = {"memory", "mongo"}
        if value not in allowed:
            raise ValueError(f"rate_limit_backend must be one of {sorted(allowed)}")
        return value

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def sqlalchemy_url(self) -> str:
        return self.database_url or self.postgres_url

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret_key == DEFAULT_JWT_SECRET

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
