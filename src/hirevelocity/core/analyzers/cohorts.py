"""Fast versus slow hire cohort comparison."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import pendulum
import structlog

from ...schemas import (
    Candidate,
    CandidateDisposition,
    Event,
    EventType,
    Requisition,
    RequisitionStatus,
)
from ..results import CohortComparison, HireCohortStats, SuccessFactorComparison
from ..thresholds import DEFAULT_THRESHOLDS, IMPACT_ORDER, VelocityThresholds, safe_rate
from ..timeutils import days_between, hours_between, to_datetime, upper_median


def _per(numerator: float, denominator: int) -> float:
    return numerator / denominator if denominator else 0.0


@dataclass(slots=True)
class FilledRequisition:
    req: Requisition
    time_to_fill: int


class CohortComparator:
    """Split filled requisitions into time-to-fill quartiles and contrast them.

    The fastest and slowest quartiles are compared factor by factor; with very
    small populations the two cohorts may overlap or coincide.
    """

    def __init__(self, *, thresholds: VelocityThresholds | None = None) -> None:
        self._thresholds = thresholds or DEFAULT_THRESHOLDS
        self._logger = structlog.get_logger(__name__)

    def compare(
        self,
        candidates: Sequence[Candidate],
        requisitions: Iterable[Requisition],
        events: Sequence[Event],
    ) -> CohortComparison | None:
        filled = self._filled_requisitions(requisitions)
        if len(filled) < self._thresholds.min_filled_reqs_for_cohorts:
            self._logger.debug(
                "cohorts.insufficient",
                filled=len(filled),
                required=self._thresholds.min_filled_reqs_for_cohorts,
            )
            return None

        quartile = max(len(filled) // self._thresholds.cohort_fraction, 1)
        fast = self.cohort_stats(filled[:quartile], candidates, events)
        slow = self.cohort_stats(filled[-quartile:], candidates, events)
        overall = self.cohort_stats(filled, candidates, events)

        return CohortComparison(
            fast_hires=fast,
            slow_hires=slow,
            all_hires=overall,
            factors=self.compare_factors(fast, slow),
        )

    @staticmethod
    def _filled_requisitions(requisitions: Iterable[Requisition]) -> list[FilledRequisition]:
        filled: list[FilledRequisition] = []
        for req in requisitions:
            if req.status is not RequisitionStatus.CLOSED:
                continue
            ttf = days_between(req.opened_at, req.closed_at)
            if ttf is None:
                continue
            filled.append(FilledRequisition(req=req, time_to_fill=ttf))
        filled.sort(key=lambda item: item.time_to_fill)
        return filled

    def cohort_stats(
        self,
        cohort: Sequence[FilledRequisition],
        candidates: Sequence[Candidate],
        events: Sequence[Event],
    ) -> HireCohortStats:
        req_ids = {item.req.req_id for item in cohort}
        cohort_candidates = [c for c in candidates if c.req_id in req_ids]
        hired = [c for c in cohort_candidates if c.disposition is CandidateDisposition.HIRED]
        cohort_events = [e for e in events if e.req_id in req_ids]

        referrals = sum(1 for c in hired if self._is_referral(c.source))
        interviews = [
            e for e in cohort_events if e.event_type is EventType.INTERVIEW_COMPLETED
        ]
        feedback = [e for e in cohort_events if e.event_type is EventType.FEEDBACK_SUBMITTED]
        submittals = {
            e.candidate_id
            for e in cohort_events
            if e.event_type is EventType.STAGE_CHANGE and self._reaches_hm(e.to_stage)
        }

        ttf_values = [item.time_to_fill for item in cohort]
        hired_count = len(hired)
        return HireCohortStats(
            count=len(cohort),
            avg_time_to_fill=_per(sum(ttf_values), len(ttf_values)),
            median_time_to_fill=upper_median(ttf_values) or 0,
            avg_hm_latency=self._average_feedback_latency(interviews, feedback),
            referral_percent=(safe_rate(referrals, hired_count) or 0.0) * 100,
            avg_pipeline_depth=_per(len(cohort_candidates), len(cohort)),
            avg_interviews_per_hire=_per(len(interviews), hired_count),
            avg_submittals_per_hire=_per(len(submittals), hired_count),
        )

    def compare_factors(
        self,
        fast: HireCohortStats,
        slow: HireCohortStats,
    ) -> list[SuccessFactorComparison]:
        factors: list[SuccessFactorComparison] = []
        for rule in self._thresholds.factors:
            fast_value = float(getattr(fast, rule.stat))
            slow_value = float(getattr(slow, rule.stat))
            if fast_value == 0 and slow_value == 0:
                continue
            delta = rule.delta(fast_value, slow_value)
            factors.append(
                SuccessFactorComparison(
                    factor=rule.name,
                    fast_hires_value=fast_value,
                    slow_hires_value=slow_value,
                    delta=delta,
                    unit=rule.unit,
                    impact_level=rule.impact(delta),
                    decimals=rule.decimals,
                )
            )
        factors.sort(key=lambda item: IMPACT_ORDER[item.impact_level])
        return factors

    def _average_feedback_latency(
        self,
        interviews: Iterable[Event],
        feedback: Iterable[Event],
    ) -> float:
        latest_interview: dict[str, pendulum.DateTime] = {}
        for event in interviews:
            at = to_datetime(event.event_at)
            current = latest_interview.get(event.candidate_id)
            if at is not None and (current is None or at > current):
                latest_interview[event.candidate_id] = at

        latencies: list[float] = []
        for event in feedback:
            interviewed_at = latest_interview.get(event.candidate_id)
            if interviewed_at is None:
                continue
            hours = hours_between(interviewed_at, event.event_at)
            if hours is not None and 0 < hours < self._thresholds.max_feedback_latency_hours:
                latencies.append(hours)

        return _per(sum(latencies), len(latencies))

    def _is_referral(self, source: str | None) -> bool:
        return (source or "").strip().lower() in self._thresholds.referral_sources

    def _reaches_hm(self, stage: str | None) -> bool:
        if not stage:
            return False
        lowered = stage.lower()
        return any(marker in lowered for marker in self._thresholds.hm_stage_markers)
