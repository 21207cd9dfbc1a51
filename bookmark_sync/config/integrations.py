from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LinkdingConfig(BaseModel):
    """linkding connection settings for tag mirroring."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    api_key: str = Field(default="", validation_alias="LINKDING_API_KEY")
    base_url: str = Field(default="", validation_alias="LINKDING_URL")
    timeout_sec: float = Field(default=30.0, validation_alias="LINKDING_TIMEOUT_SEC")
    propagate_shared: bool = Field(default=False, validation_alias="LINKDING_PROPAGATE_SHARED")

    @field_validator("api_key", mode="before")
    @classmethod
    def _validate_api_key(cls, value: Any) -> str:
        if value in (None, ""):
            return ""
        key = str(value).strip()
        if len(key) > 500:
            msg = "linkding API key appears to be too long"
            raise ValueError(msg)
        return key

    @field_validator("base_url", mode="before")
    @classmethod
    def _validate_base_url(cls, value: Any) -> str:
        if value in (None, ""):
            return ""
        return str(value).strip().rstrip("/")

    @field_validator("timeout_sec", mode="before")
    @classmethod
    def _validate_timeout(cls, value: Any) -> float:
        if value in (None, ""):
            return 30.0
        try:
            parsed = float(str(value))
        except ValueError as exc:
            msg = "linkding timeout must be a valid number"
            raise ValueError(msg) from exc
        if parsed <= 0 or parsed > 600:
            msg = "linkding timeout must be between 0 and 600 seconds"
            raise ValueError(msg)
        return parsed

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.base_url)
