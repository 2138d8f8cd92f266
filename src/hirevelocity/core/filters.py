"""Record filter narrowing entity collections to the analysis population."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..schemas import Candidate, Event, FilterSpec, Requisition

# FilterSpec field -> Requisition attribute
_REQUISITION_FIELDS: dict[str, str] = {
    "recruiter_ids": "recruiter_id",
    "functions": "function",
    "job_families": "job_family",
    "levels": "level",
    "regions": "location_region",
    "hiring_manager_ids": "hiring_manager_id",
    "location_types": "location_type",
}


@dataclass(slots=True)
class FilteredPopulation:
    requisitions: list[Requisition]
    candidates: list[Candidate]
    events: list[Event]

    @property
    def req_ids(self) -> set[str]:
        return {req.req_id for req in self.requisitions}


def matches(requisition: Requisition, filters: FilterSpec | None) -> bool:
    if filters is None:
        return True
    for name, allow_list in filters.restrictions().items():
        if not allow_list.admits(getattr(requisition, _REQUISITION_FIELDS[name])):
            return False
    return True


def filter_requisitions(
    requisitions: Iterable[Requisition],
    filters: FilterSpec | None,
) -> list[Requisition]:
    return [req for req in requisitions if matches(req, filters)]


def scope_candidates(candidates: Iterable[Candidate], req_ids: set[str]) -> list[Candidate]:
    return [candidate for candidate in candidates if candidate.req_id in req_ids]


def scope_events(events: Iterable[Event], req_ids: set[str]) -> list[Event]:
    return [event for event in events if event.req_id in req_ids]


def filter_population(
    candidates: Iterable[Candidate],
    requisitions: Iterable[Requisition],
    events: Iterable[Event],
    filters: FilterSpec | None,
) -> FilteredPopulation:
    """Apply ``filters`` to requisitions and scope candidates and events to them."""
    kept = filter_requisitions(requisitions, filters)
    req_ids = {req.req_id for req in kept}
    return FilteredPopulation(
        requisitions=kept,
        candidates=scope_candidates(candidates, req_ids),
        events=scope_events(events, req_ids),
    )
