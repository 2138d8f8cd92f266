"""Velocity/decay analysis engine components."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .analyzers import (
    CandidateDecayAnalyzer,
    CohortComparator,
    InsightGenerator,
    ReqDecayAnalyzer,
)
from .engine import VelocityEngine, calculate_velocity_metrics
from .filters import FilteredPopulation, filter_population, filter_requisitions
from .results import (
    CandidateDecayAnalysis,
    CohortComparison,
    DecayDataPoint,
    HireCohortStats,
    ReqDecayAnalysis,
    SuccessFactorComparison,
    VelocityInsight,
    VelocityMetrics,
)
from .thresholds import DEFAULT_THRESHOLDS, VelocityThresholds

__all__ = [
    "CandidateDecayAnalysis",
    "CandidateDecayAnalyzer",
    "CohortComparator",
    "CohortComparison",
    "DEFAULT_THRESHOLDS",
    "DecayDataPoint",
    "FilteredPopulation",
    "HireCohortStats",
    "InsightGenerator",
    "ReqDecayAnalysis",
    "ReqDecayAnalyzer",
    "SuccessFactorComparison",
    "VelocityEngine",
    "VelocityInsight",
    "VelocityMetrics",
    "VelocityThresholds",
    "calculate_velocity_metrics",
    "filter_population",
    "filter_requisitions",
]
