"""Pydantic schema definitions for canonical ATS records and run configuration."""

from __future__ import annotations

from .entities import (
    Candidate,
    CandidateDisposition,
    Event,
    EventType,
    Requisition,
    RequisitionStatus,
    User,
)
from .filters import AllowList, FilterSpec, FilterState

__all__ = [
    "AllowList",
    "Candidate",
    "CandidateDisposition",
    "Event",
    "EventType",
    "FilterSpec",
    "FilterState",
    "Requisition",
    "RequisitionStatus",
    "User",
]
