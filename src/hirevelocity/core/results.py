"""Velocity engine output records."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Literal

from .thresholds import ConfidenceLevel, ImpactLevel

InsightType = Literal["warning", "success", "info"]


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass(slots=True)
class DecayDataPoint:
    """Aggregated outcome rate for one elapsed-day bucket."""

    bucket: str
    min_days: int
    max_days: int | None
    count: int
    rate: float
    cumulative_rate: float = 0.0


@dataclass(slots=True)
class CandidateDecayAnalysis:
    data_points: list[DecayDataPoint]
    median_days_to_decision: int | None
    overall_acceptance_rate: float
    total_offers: int
    total_accepted: int
    decay_rate_per_day: float | None
    decay_start_day: int | None


@dataclass(slots=True)
class ReqDecayAnalysis:
    data_points: list[DecayDataPoint]
    median_days_to_fill: int | None
    overall_fill_rate: float
    total_reqs: int
    total_filled: int
    decay_rate_per_day: float | None
    decay_start_day: int | None


@dataclass(slots=True)
class HireCohortStats:
    """Operational aggregates over one time-to-fill cohort."""

    count: int
    avg_time_to_fill: float
    median_time_to_fill: float
    avg_hm_latency: float
    referral_percent: float
    avg_pipeline_depth: float
    avg_interviews_per_hire: float
    avg_submittals_per_hire: float


@dataclass(slots=True)
class SuccessFactorComparison:
    factor: str
    fast_hires_value: float
    slow_hires_value: float
    delta: float
    unit: str
    impact_level: ImpactLevel
    decimals: int = 0

    def _format(self, value: float) -> str:
        if self.decimals:
            return f"{value:.{self.decimals}f}"
        return str(round_half_up(value))

    @property
    def fast_display(self) -> str:
        return self._format(self.fast_hires_value)

    @property
    def slow_display(self) -> str:
        return self._format(self.slow_hires_value)

    @property
    def delta_display(self) -> str:
        rendered = self._format(self.delta)
        return f"+{rendered}" if self.delta > 0 else rendered


@dataclass(slots=True)
class CohortComparison:
    fast_hires: HireCohortStats
    slow_hires: HireCohortStats
    all_hires: HireCohortStats
    factors: list[SuccessFactorComparison]


@dataclass(slots=True)
class VelocityInsight:
    """Human-readable finding derived from the numeric analyses."""

    type: InsightType
    title: str
    description: str
    metric: str | None = None
    action: str | None = None
    evidence: str | None = None
    sample_size: int = 0
    so_what: str | None = None
    next_step: str | None = None
    confidence: ConfidenceLevel = "INSUFFICIENT"


@dataclass(slots=True)
class VelocityMetrics:
    """Composite result of a velocity analysis run."""

    candidate_decay: CandidateDecayAnalysis
    req_decay: ReqDecayAnalysis
    cohort_comparison: CohortComparison | None
    insights: list[VelocityInsight] = field(default_factory=list)
