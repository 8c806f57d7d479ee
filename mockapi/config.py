"""Application Configuration: launch-time settings via pydantic-settings.

Invariants:
    - Settings are fixed for the lifetime of a server (not re-negotiable at runtime)
    - Every field has a default except data_file
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - MOCKAPI_ env prefix and .env support; the CLI builds Settings explicitly
      from its flags instead of going through the environment
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Mock server settings."""

    model_config = SettingsConfigDict(
        env_prefix="MOCKAPI_", env_file=".env", case_sensitive=False,
        extra="ignore",
    )

    # Data
    data_file: Path = Path("db.json")

    # Transport
    host: str = "127.0.0.1"
    port: int = Field(3001, ge=0, le=65535)

    # Behaviour
    delay: int = Field(0, ge=0)  # milliseconds, every route
    cors: bool = True
    watch: bool = False
    watch_interval: float = Field(1.0, gt=0)  # seconds
    readonly: bool = False

    # Observability
    log_level: str = "INFO"
    log_format: Literal["text", "json"] = "text"

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
