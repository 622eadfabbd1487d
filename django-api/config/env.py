"""Environment-driven configuration.

Values come from TUTORING_* environment variables or a local .env file and
are mapped onto Django settings in config/settings.py.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


class TutoringSettings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="TUTORING_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False
    secret_key: str = Field(default="insecure-development-key-change-me", min_length=16)
    allowed_hosts: list[str] = Field(default_factory=lambda: ["localhost", "127.0.0.1"])

    db_engine: str = "django.db.backends.sqlite3"
    db_name: str = "tutoring.sqlite3"
    db_user: str = ""
    db_password: str = ""
    db_host: str = ""
    db_port: str = ""

    time_zone: str = "UTC"
    log_level: str = "INFO"
    tutor_group: str = "tutors"


@lru_cache
def get_settings() -> TutoringSettings:
    return TutoringSettings()
