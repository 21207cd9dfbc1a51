"""Pydantic model for one record of a Pinboard JSON export."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class RawRecord(BaseModel):
    """Import-time record, field names exactly as in the export.

    Values are kept as strings; ``time`` is parsed later by the converter so a
    bad timestamp drops one record instead of failing the whole file.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    href: str = ""
    description: str = ""
    extended: str = ""
    meta: str = ""
    hash: str = ""
    time: str = ""
    shared: str = ""
    toread: str = Field(default="", validation_alias=AliasChoices("toread", "toRead"))
    tags: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value
