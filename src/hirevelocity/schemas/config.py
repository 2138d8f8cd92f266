"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..core.timeutils import to_datetime
from .filters import FilterSpec


class AppConfig(BaseModel):
    filters: FilterSpec = Field(default_factory=FilterSpec)
    as_of: str | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("as_of")
    @classmethod
    def _check_as_of(cls, value: str | None) -> str | None:
        if value is not None and to_datetime(value) is None:
            raise ValueError(f"unparseable reference timestamp: {value!r}")
        return value

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        if self.filters.restrictions():
            settings["filters"] = self.filters.model_dump(exclude_none=True)
        if self.as_of:
            settings["as_of"] = self.as_of
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
