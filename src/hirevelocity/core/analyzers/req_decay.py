"""Requisition fill-probability decay by days open."""

from __future__ import annotations

from typing import Iterable

import pendulum

from ...schemas import Requisition, RequisitionStatus
from ..results import ReqDecayAnalysis
from ..thresholds import DEFAULT_THRESHOLDS, VelocityThresholds, safe_rate
from ..timeutils import days_between, upper_median
from .decay import build_data_points, estimate_decay


class ReqDecayAnalyzer:
    """Estimate how fill probability falls the longer a requisition stays open.

    Still-open requisitions are aged against ``as_of`` and only count once
    they are old enough to judge. Canceled requisitions never count.
    """

    def __init__(self, *, thresholds: VelocityThresholds | None = None) -> None:
        self._thresholds = thresholds or DEFAULT_THRESHOLDS

    def analyze(
        self,
        requisitions: Iterable[Requisition],
        *,
        as_of: pendulum.DateTime,
    ) -> ReqDecayAnalysis:
        samples = [
            sample
            for sample in (self._sample(req, as_of) for req in requisitions)
            if sample is not None
        ]
        data_points = build_data_points(samples, self._thresholds.req_buckets)

        total_reqs = len(samples)
        total_filled = sum(1 for _, filled in samples if filled)
        decay_rate, decay_start = estimate_decay(
            data_points,
            min_samples=self._thresholds.min_bucket_samples,
            min_buckets=self._thresholds.min_buckets_for_decay,
            peak_ratio=self._thresholds.req_decay_peak_ratio,
        )

        return ReqDecayAnalysis(
            data_points=data_points,
            median_days_to_fill=upper_median([days for days, filled in samples if filled]),
            overall_fill_rate=safe_rate(total_filled, total_reqs) or 0.0,
            total_reqs=total_reqs,
            total_filled=total_filled,
            decay_rate_per_day=decay_rate,
            decay_start_day=decay_start,
        )

    def _sample(
        self,
        req: Requisition,
        as_of: pendulum.DateTime,
    ) -> tuple[int, bool] | None:
        if req.opened_at is None or req.status is RequisitionStatus.CANCELED:
            return None
        if req.status is not RequisitionStatus.CLOSED:
            age = days_between(req.opened_at, as_of)
            if age is None or age < self._thresholds.min_open_req_age_days:
                return None

        days_open = days_between(req.opened_at, req.closed_at or as_of)
        if days_open is None or days_open < 0:
            return None
        filled = req.status is RequisitionStatus.CLOSED and req.closed_at is not None
        return days_open, filled
