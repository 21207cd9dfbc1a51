from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from bookmark_sync.domain.exceptions import ConfigurationError

from ._validators import _ensure_api_key, _ensure_base_url
from .integrations import LinkdingConfig

logger = logging.getLogger(__name__)


class RuntimeConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    db_path: str = Field(default="bookmarks.db", validation_alias="DB_PATH")
    import_path: str = Field(default="bookmarks.json", validation_alias="IMPORT_PATH")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_json: bool = Field(default=False, validation_alias="LOG_JSON")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, value: Any) -> str:
        log_level = str(value or "INFO").upper()
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if log_level not in valid_levels:
            msg = f"Invalid log level: {value}. Must be one of {valid_levels}"
            raise ValueError(msg)
        return log_level

    @field_validator("db_path", "import_path", mode="before")
    @classmethod
    def _validate_path(cls, value: Any) -> str:
        trimmed = str(value or "").strip()
        if not trimmed:
            msg = "Path cannot be empty"
            raise ValueError(msg)
        if "\x00" in trimmed:
            msg = "Path contains invalid characters"
            raise ValueError(msg)
        return trimmed

    @field_validator("log_file", mode="before")
    @classmethod
    def _validate_log_file(cls, value: Any) -> str | None:
        if value is None:
            return None
        trimmed = str(value).strip()
        return trimmed or None


@dataclass(frozen=True)
class AppConfig:
    runtime: RuntimeConfig
    linkding: LinkdingConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables and ``.env``.

    Nested models are populated by matching ``validation_alias`` on each field.
    """

    model_config = SettingsConfigDict(
        extra="ignore",
        populate_by_name=True,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    linkding: LinkdingConfig = Field(default_factory=LinkdingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Flat variables are merged by _build_nested_from_env in precedence order
        return (init_settings,)

    @model_validator(mode="before")
    @classmethod
    def _build_nested_from_env(cls, data: Any) -> Any:
        """Build nested config objects from flat variables.

        Sources, lowest precedence first: the `.env` file, `os.environ`, then
        constructor arguments given by flat variable name.
        """
        if not isinstance(data, dict):
            return data

        result = dict(data)
        dotenv_data: dict[str, Any] = {}
        env_file = cls.model_config.get("env_file")
        if env_file and Path(str(env_file)).is_file():
            dotenv_data = {
                key: value
                for key, value in dotenv_values(str(env_file)).items()
                if value is not None
            }
        merged_source = {**dotenv_data, **os.environ, **data}

        for field_name, field_info in cls.model_fields.items():
            annotation = field_info.annotation
            if not isinstance(annotation, type) or not issubclass(annotation, BaseModel):
                continue

            nested_data: dict[str, Any] = {}
            for nested_field_name, nested_field in annotation.model_fields.items():
                env_value = cls._resolve_env_value(merged_source, nested_field)
                if env_value is not None:
                    nested_data[nested_field_name] = env_value

            if nested_data:
                if isinstance(result.get(field_name), dict):
                    result[field_name] = {**nested_data, **result[field_name]}
                else:
                    result[field_name] = nested_data

        return result

    @staticmethod
    def _resolve_env_value(data: dict[str, Any], field: Any) -> Any | None:
        """Resolve a field's value from flat variables using its aliases."""
        aliases: list[str] = []
        alias = field.validation_alias
        if isinstance(alias, AliasChoices):
            aliases.extend(choice for choice in alias.choices if isinstance(choice, str))
        elif isinstance(alias, str):
            aliases.append(alias)
        if field.alias:
            aliases.append(field.alias)

        for name in aliases:
            if name in data:
                return data[name]
        return None

    def as_app_config(self) -> AppConfig:
        return AppConfig(runtime=self.runtime, linkding=self.linkding)


def load_config(
    *,
    require_remote: bool = True,
    overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """Load application configuration.

    Sources, lowest precedence first: ``.env`` file, environment variables,
    ``overrides`` (flat variable names, e.g. ``{"DB_PATH": ...}``).

    Args:
        require_remote: Fail unless ``LINKDING_API_KEY`` and ``LINKDING_URL``
            are set. Ingest-only runs pass False.
        overrides: Values taking precedence over the environment.

    Returns:
        Immutable AppConfig instance.

    Raises:
        ConfigurationError: If validation fails or required remote settings
            are missing.
    """
    try:
        settings = Settings(**(overrides or {}))
    except ValidationError as exc:
        msg = f"Configuration validation failed: {exc}"
        raise ConfigurationError(msg) from exc

    if require_remote:
        _require(_ensure_api_key, settings.linkding.api_key, "LINKDING_API_KEY")
        _require(_ensure_base_url, settings.linkding.base_url, "LINKDING_URL")

    logger.debug(
        "config_loaded",
        extra={
            "db_path": settings.runtime.db_path,
            "linkding_configured": settings.linkding.configured,
        },
    )
    return settings.as_app_config()


def _require(check: Any, value: str, variable: str) -> None:
    try:
        check(value, name="linkding")
    except ValueError as exc:
        msg = f"{exc} (set {variable})"
        raise ConfigurationError(msg, {"variable": variable}) from exc
