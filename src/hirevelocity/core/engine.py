"""Velocity engine orchestration."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import pendulum
import structlog

from ..schemas import Candidate, Event, FilterSpec, Requisition, User
from .analyzers import (
    CandidateDecayAnalyzer,
    CohortComparator,
    InsightGenerator,
    ReqDecayAnalyzer,
)
from .filters import filter_population
from .results import VelocityMetrics
from .thresholds import DEFAULT_THRESHOLDS, VelocityThresholds
from .timeutils import NowProvider, to_datetime


class VelocityEngine:
    """Coordinates the record filter, analyzers and insight generator.

    ``calculate`` is a pure function of its arguments once ``as_of`` is
    given; the now-provider is only consulted when it is omitted.
    """

    def __init__(
        self,
        *,
        thresholds: VelocityThresholds | None = None,
        now_provider: NowProvider | None = None,
    ) -> None:
        self._thresholds = thresholds or DEFAULT_THRESHOLDS
        self._now_provider = now_provider or pendulum.now
        self._candidate_decay = CandidateDecayAnalyzer(thresholds=self._thresholds)
        self._req_decay = ReqDecayAnalyzer(thresholds=self._thresholds)
        self._cohorts = CohortComparator(thresholds=self._thresholds)
        self._insights = InsightGenerator(thresholds=self._thresholds)
        self._logger = structlog.get_logger(__name__)

    @property
    def thresholds(self) -> VelocityThresholds:
        return self._thresholds

    def calculate(
        self,
        *,
        candidates: Iterable[Candidate],
        requisitions: Iterable[Requisition],
        events: Iterable[Event],
        users: Sequence[User] | None = None,
        filters: FilterSpec | None = None,
        as_of: Any = None,
    ) -> VelocityMetrics:
        # users are accepted for parity with the other dashboard analyzers.
        reference = self._resolve_as_of(as_of)
        population = filter_population(candidates, requisitions, events, filters)

        candidate_decay = self._candidate_decay.analyze(
            population.candidates, population.requisitions
        )
        req_decay = self._req_decay.analyze(population.requisitions, as_of=reference)
        cohort_comparison = self._cohorts.compare(
            population.candidates, population.requisitions, population.events
        )
        insights = self._insights.generate(candidate_decay, req_decay, cohort_comparison)

        self._logger.debug(
            "velocity.calculated",
            as_of=reference.to_iso8601_string(),
            requisitions=len(population.requisitions),
            candidates=len(population.candidates),
            events=len(population.events),
            users=len(users or ()),
            offers=candidate_decay.total_offers,
            cohorts=cohort_comparison is not None,
            insights=len(insights),
        )

        return VelocityMetrics(
            candidate_decay=candidate_decay,
            req_decay=req_decay,
            cohort_comparison=cohort_comparison,
            insights=insights,
        )

    def _resolve_as_of(self, as_of: Any) -> pendulum.DateTime:
        if as_of is None:
            return to_datetime(self._now_provider())
        resolved = to_datetime(as_of)
        if resolved is None:
            raise ValueError(f"Unparseable reference timestamp: {as_of!r}")
        return resolved


def calculate_velocity_metrics(
    candidates: Iterable[Candidate],
    requisitions: Iterable[Requisition],
    events: Iterable[Event],
    users: Sequence[User] | None = None,
    filters: FilterSpec | None = None,
    *,
    as_of: Any = None,
    thresholds: VelocityThresholds | None = None,
) -> VelocityMetrics:
    """Run the full velocity analysis with a throwaway engine."""
    engine = VelocityEngine(thresholds=thresholds)
    return engine.calculate(
        candidates=candidates,
        requisitions=requisitions,
        events=events,
        users=users,
        filters=filters,
        as_of=as_of,
    )
