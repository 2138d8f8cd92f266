"""Analyzer implementations for the velocity engine."""

from .candidate_decay import CandidateDecayAnalyzer
from .req_decay import ReqDecayAnalyzer
from .cohorts import CohortComparator
from .insights import InsightGenerator

__all__ = [
    "CandidateDecayAnalyzer",
    "ReqDecayAnalyzer",
    "CohortComparator",
    "InsightGenerator",
]
