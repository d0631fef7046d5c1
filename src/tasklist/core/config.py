"""Runtime settings read from ``TASKLIST_*`` environment variables and ``.env``."""

from __future__ import annotations

from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BeforeValidator, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .. import __version__

ENV_FILE = Path(__file__).resolve().parents[3] / ".env"

Environment = Literal["development", "test", "ci"]

# Values a profile fills in unless the field was given explicitly.
PROFILE_DEFAULTS: dict[Environment, dict[str, Any]] = {
    "development": {"log_level": "DEBUG", "reload": True, "create_tables_on_startup": True},
    "test": {"log_level": "WARNING", "reload": False, "create_tables_on_startup": False},
    "ci": {"log_level": "INFO", "reload": False, "create_tables_on_startup": True},
}

_ENVIRONMENT_NAMES: dict[str, Environment] = {
    "dev": "development",
    "development": "development",
    "testing": "test",
    "test": "test",
    "ci": "ci",
}


def _split_csv(value: object) -> list[str]:
    if isinstance(value, str):
        items: Iterable[object] = value.split(",")
    elif isinstance(value, Iterable):
        items = value
    else:
        return []
    return [text for text in (str(item).strip() for item in items) if text]


CsvList = Annotated[list[str], NoDecode, BeforeValidator(_split_csv)]


class Settings(BaseSettings):
    """Configuration for the task list service.

    Selecting an ``environment`` applies its entry in ``PROFILE_DEFAULTS``
    to ``log_level``, ``reload`` and ``create_tables_on_startup``; values set
    through the environment or constructor win over the profile.
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKLIST_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_name: str = "Task List API"
    version: str = __version__
    environment: Environment = "development"
    api_prefix: str = "/api"

    app_host: str = "0.0.0.0"
    app_port: int = 8000
    reload: bool = True
    log_level: str = "INFO"
    expose_error_details: bool = False

    database_url: str = "sqlite+aiosqlite:///./tasklist.db"
    db_echo: bool = False
    create_tables_on_startup: bool = True

    cors_allow_origins: CsvList = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
    )
    cors_allow_credentials: bool = True
    cors_allow_methods: CsvList = Field(default_factory=lambda: ["*"])
    cors_allow_headers: CsvList = Field(default_factory=lambda: ["*"])

    jwt_secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = Field(default=60, ge=1)

    @field_validator("environment", mode="before")
    @classmethod
    def _resolve_environment(cls, value: object) -> Environment:
        key = value.strip().lower() if isinstance(value, str) else ""
        return _ENVIRONMENT_NAMES.get(key, "development")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> str:
        return value.upper() if isinstance(value, str) else "INFO"

    @field_validator("access_token_expire_minutes", mode="before")
    @classmethod
    def _floor_token_lifetime(cls, value: object) -> int:
        try:
            return max(int(str(value)), 1)
        except (TypeError, ValueError):
            return 60

    @model_validator(mode="after")
    def _fill_profile_defaults(self) -> Settings:
        for name, value in PROFILE_DEFAULTS[self.environment].items():
            if name not in self.model_fields_set:
                setattr(self, name, value)
        return self

    @property
    def router_prefix(self) -> str:
        """``api_prefix`` as ``/segment`` without a trailing slash; empty when unset."""

        prefix = self.api_prefix.strip().strip("/")
        return f"/{prefix}" if prefix else ""


@lru_cache
def get_settings() -> Settings:
    return Settings()
