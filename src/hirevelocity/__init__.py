"""Hire velocity and decay analytics for applicant-tracking exports."""

from __future__ import annotations

__version__ = "0.1.0"

from .core import VelocityEngine, VelocityMetrics, calculate_velocity_metrics
from .schemas import FilterSpec

__all__ = [
    "FilterSpec",
    "VelocityEngine",
    "VelocityMetrics",
    "__version__",
    "calculate_velocity_metrics",
]
