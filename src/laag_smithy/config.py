"""Configuration management for the Smithy model toolkit."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

_config_logger = logging.getLogger(__name__)

_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"})


class LoggingSettings(BaseModel):
    level: str = Field(default="INFO", description="Python logging level name")
    file: str | None = Field(default=None, description="Optional log file path")

    @field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value!r}")
        return normalized


class ValidationSettings(BaseModel):
    check_references: bool = Field(
        default=True,
        description="Resolve every shape reference against the model's shape IDs.",
    )
    validate_traits: bool = Field(default=True)
    validate_member_traits: bool = Field(
        default=True,
        description="Also validate traits applied to members, not only to shapes.",
    )


class ModelSettings(BaseModel):
    path: str = Field(default="./models", description="Default file or directory of JSON models")


class Settings(BaseModel):
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)
    models: ModelSettings = Field(default_factory=ModelSettings)


ENV_KEYS = {
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
    "check_references": "SMITHY_CHECK_REFERENCES",
    "validate_traits": "SMITHY_VALIDATE_TRAITS",
    "validate_member_traits": "SMITHY_VALIDATE_MEMBER_TRAITS",
    "model_path": "SMITHY_MODEL_PATH",
}

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _resolve_path(path: str) -> str:
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = Path.cwd() / candidate
    return str(candidate.resolve())


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    _config_logger.warning(
        "Invalid boolean value for %s: %r, using default %s", key, value, default
    )
    return default


def load_settings() -> Settings:
    """Load configuration and cache the result."""

    return _load_settings_cached()


@lru_cache(maxsize=1)
def _load_settings_cached() -> Settings:
    load_dotenv(dotenv_path=Path.cwd() / ".env")
    log_file_env = os.getenv(ENV_KEYS["log_file"])

    settings_data: dict[str, object] = {
        "logging": {
            "level": os.getenv(ENV_KEYS["log_level"], LoggingSettings().level),
            "file": _resolve_path(log_file_env) if log_file_env else None,
        },
        "validation": {
            "check_references": _env_bool(
                ENV_KEYS["check_references"], ValidationSettings().check_references
            ),
            "validate_traits": _env_bool(
                ENV_KEYS["validate_traits"], ValidationSettings().validate_traits
            ),
            "validate_member_traits": _env_bool(
                ENV_KEYS["validate_member_traits"],
                ValidationSettings().validate_member_traits,
            ),
        },
        "models": {
            "path": _resolve_path(os.getenv(ENV_KEYS["model_path"], ModelSettings().path)),
        },
    }

    try:
        return Settings.model_validate(settings_data)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
