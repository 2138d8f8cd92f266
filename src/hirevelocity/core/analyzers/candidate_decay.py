"""Offer-acceptance decay by time in process."""

from __future__ import annotations

from typing import Iterable

from ...schemas import Candidate, Requisition
from ..results import CandidateDecayAnalysis
from ..thresholds import DEFAULT_THRESHOLDS, VelocityThresholds, safe_rate
from ..timeutils import days_between, upper_median
from .decay import build_data_points, estimate_decay


class CandidateDecayAnalyzer:
    """Estimate how acceptance probability falls as time-to-offer grows."""

    def __init__(self, *, thresholds: VelocityThresholds | None = None) -> None:
        self._thresholds = thresholds or DEFAULT_THRESHOLDS

    def analyze(
        self,
        candidates: Iterable[Candidate],
        requisitions: Iterable[Requisition],
    ) -> CandidateDecayAnalysis:
        req_ids = {req.req_id for req in requisitions}
        samples = self._offer_samples(candidates, req_ids)

        data_points = build_data_points(samples, self._thresholds.candidate_buckets)

        total_offers = len(samples)
        total_accepted = sum(1 for _, accepted in samples if accepted)
        decay_rate, decay_start = estimate_decay(
            data_points,
            min_samples=self._thresholds.min_bucket_samples,
            min_buckets=self._thresholds.min_buckets_for_decay,
            peak_ratio=self._thresholds.candidate_decay_peak_ratio,
        )

        return CandidateDecayAnalysis(
            data_points=data_points,
            median_days_to_decision=upper_median(
                [days for days, accepted in samples if accepted]
            ),
            overall_acceptance_rate=safe_rate(total_accepted, total_offers) or 0.0,
            total_offers=total_offers,
            total_accepted=total_accepted,
            decay_rate_per_day=decay_rate,
            decay_start_day=decay_start,
        )

    @staticmethod
    def _offer_samples(
        candidates: Iterable[Candidate],
        req_ids: set[str],
    ) -> list[tuple[int, bool]]:
        samples: list[tuple[int, bool]] = []
        for candidate in candidates:
            if candidate.req_id not in req_ids or candidate.offer_extended_at is None:
                continue
            start = candidate.applied_at or candidate.first_contacted_at
            days = days_between(start, candidate.offer_extended_at)
            if days is None or days < 0:
                continue
            samples.append((days, candidate.offer_accepted_at is not None))
        return samples
