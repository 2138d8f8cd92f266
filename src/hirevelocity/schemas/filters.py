"""Filter specification narrowing the analysis population."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FilterState(str, Enum):
    UNRESTRICTED = "unrestricted"
    EMPTY = "empty"
    LISTED = "listed"


class AllowList(BaseModel):
    """Explicit restriction over one requisition attribute.

    A plain list coming from a caller is never interpreted as "match nothing":
    an empty list means no restriction. Restricting a field to the empty set
    has to be asked for with ``strict=True`` (or ``AllowList.nothing()``).
    """

    values: list[str] = Field(default_factory=list)
    strict: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def of(cls, *values: str) -> "AllowList":
        return cls(values=list(values))

    @classmethod
    def nothing(cls) -> "AllowList":
        return cls(values=[], strict=True)

    @property
    def state(self) -> FilterState:
        if self.values:
            return FilterState.LISTED
        if self.strict:
            return FilterState.EMPTY
        return FilterState.UNRESTRICTED

    def admits(self, value: str | None) -> bool:
        state = self.state
        if state is FilterState.UNRESTRICTED:
            return True
        if state is FilterState.EMPTY:
            return False
        return (value or "") in self.values


class FilterSpec(BaseModel):
    """Allow-lists over requisition attributes, ANDed across fields."""

    recruiter_ids: AllowList | None = None
    functions: AllowList | None = None
    job_families: AllowList | None = None
    levels: AllowList | None = None
    regions: AllowList | None = None
    hiring_manager_ids: AllowList | None = None
    location_types: AllowList | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_allow_list(cls, value: Any) -> Any:
        if value is None or isinstance(value, (AllowList, dict)):
            return value
        if isinstance(value, str):
            value = [value]
        if isinstance(value, (list, tuple, set, frozenset)):
            if not value:
                return None
            return AllowList(values=sorted(str(item) for item in value))
        return value

    def restrictions(self) -> dict[str, AllowList]:
        """Return populated fields that actually restrict the population."""
        active: dict[str, AllowList] = {}
        for name in type(self).model_fields:
            allow_list = getattr(self, name)
            if allow_list is not None and allow_list.state is not FilterState.UNRESTRICTED:
                active[name] = allow_list
        return active
