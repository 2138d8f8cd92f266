"""Fixed tunables for the velocity engine.

Every bucket boundary, minimum sample size and impact cutoff used by the
analyzers lives in :data:`DEFAULT_THRESHOLDS`. The table is frozen; the engine
and each analyzer take an optional ``thresholds=`` replacement table, but
the CLI and YAML config never change it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import structlog

ImpactLevel = Literal["high", "medium", "low"]
ConfidenceLevel = Literal["HIGH", "MED", "LOW", "INSUFFICIENT"]

IMPACT_ORDER: dict[str, int] = {"high": 0, "medium": 1, "low": 2}

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DayBucket:
    label: str
    min_days: int
    max_days: int | None = None

    def contains(self, days: int) -> bool:
        if days < self.min_days:
            return False
        return self.max_days is None or days <= self.max_days


@dataclass(frozen=True)
class FactorRule:
    """How one cohort factor is framed and graded."""

    name: str
    stat: str
    unit: str
    high: float
    medium: float
    # "slow_minus_fast" when lower is better, "fast_minus_slow" when higher is.
    direction: Literal["slow_minus_fast", "fast_minus_slow"] = "slow_minus_fast"
    decimals: int = 0
    outcome: bool = False

    def delta(self, fast: float, slow: float) -> float:
        if self.direction == "fast_minus_slow":
            return fast - slow
        return slow - fast

    def impact(self, delta: float) -> ImpactLevel:
        if self.outcome:
            return "high"
        magnitude = abs(delta)
        if magnitude > self.high:
            return "high"
        if magnitude > self.medium:
            return "medium"
        return "low"


CANDIDATE_DECAY_BUCKETS: tuple[DayBucket, ...] = (
    DayBucket("0-14 days", 0, 14),
    DayBucket("15-21 days", 15, 21),
    DayBucket("22-30 days", 22, 30),
    DayBucket("31-45 days", 31, 45),
    DayBucket("46-60 days", 46, 60),
    DayBucket("60+ days", 61, None),
)

REQ_DECAY_BUCKETS: tuple[DayBucket, ...] = (
    DayBucket("0-30 days", 0, 30),
    DayBucket("31-45 days", 31, 45),
    DayBucket("46-60 days", 46, 60),
    DayBucket("61-90 days", 61, 90),
    DayBucket("91-120 days", 91, 120),
    DayBucket("120+ days", 121, None),
)

TIME_TO_FILL_FACTOR = "Avg Time to Fill"

COHORT_FACTORS: tuple[FactorRule, ...] = (
    FactorRule("HM Feedback Latency", "avg_hm_latency", "hrs", high=24, medium=8),
    FactorRule(
        "Referral Source %",
        "referral_percent",
        "%",
        high=20,
        medium=10,
        direction="fast_minus_slow",
    ),
    FactorRule(
        "Pipeline Depth",
        "avg_pipeline_depth",
        "candidates/req",
        high=5,
        medium=2,
        direction="fast_minus_slow",
        decimals=1,
    ),
    FactorRule(
        "Interviews per Hire",
        "avg_interviews_per_hire",
        "interviews",
        high=3,
        medium=1.5,
        decimals=1,
    ),
    FactorRule(
        "Submittals per Hire",
        "avg_submittals_per_hire",
        "submittals",
        high=3,
        medium=1.5,
        decimals=1,
    ),
    FactorRule(
        TIME_TO_FILL_FACTOR,
        "avg_time_to_fill",
        "days",
        high=0,
        medium=0,
        outcome=True,
    ),
)


@dataclass(frozen=True)
class VelocityThresholds:
    """Single table of velocity-engine policy constants."""

    candidate_buckets: tuple[DayBucket, ...] = CANDIDATE_DECAY_BUCKETS
    req_buckets: tuple[DayBucket, ...] = REQ_DECAY_BUCKETS
    min_bucket_samples: int = 3
    min_buckets_for_decay: int = 2
    candidate_decay_peak_ratio: float = 0.95
    req_decay_peak_ratio: float = 0.90
    min_open_req_age_days: int = 30

    min_filled_reqs_for_cohorts: int = 6
    cohort_fraction: int = 4
    max_feedback_latency_hours: float = 720.0
    referral_sources: frozenset[str] = frozenset({"referral"})
    hm_stage_markers: tuple[str, ...] = ("hm", "hiring manager")
    factors: tuple[FactorRule, ...] = COHORT_FACTORS

    fast_offer_lift: float = 1.2
    fast_req_fill_ratio: float = 1.5
    slow_req_bucket_index: int = 4
    referral_gap_points: float = 15.0
    limited_offer_sample: int = 20

    # Sample sizes behind the confidence labels attached to insights.
    confidence_offers: int = 10
    confidence_reqs: int = 10
    confidence_bucket: int = 3
    confidence_cohort: int = 6


DEFAULT_THRESHOLDS = VelocityThresholds()


def safe_rate(numerator: float, denominator: float) -> float | None:
    """Return ``numerator / denominator`` or ``None`` when undefined."""
    if denominator == 0:
        if numerator > 0:
            logger.warning(
                "rate.invalid_denominator",
                numerator=numerator,
                denominator=denominator,
            )
        return None
    return numerator / denominator


def calculate_confidence(sample_size: int, threshold: int) -> ConfidenceLevel:
    if sample_size <= 0 or sample_size < threshold:
        return "INSUFFICIENT"
    if sample_size >= threshold * 2:
        return "HIGH"
    if sample_size >= threshold * 1.5:
        return "MED"
    return "LOW"
