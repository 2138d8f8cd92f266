"""Shared bucketing and slope estimation for decay curves."""

from __future__ import annotations

from typing import Iterable, Sequence

from ..results import DecayDataPoint
from ..thresholds import DayBucket, safe_rate


def build_data_points(
    samples: Iterable[tuple[int, bool]],
    buckets: Sequence[DayBucket],
) -> list[DecayDataPoint]:
    """Aggregate ``(elapsed_days, succeeded)`` samples into ordered buckets.

    Each sample lands in exactly one bucket. ``cumulative_rate`` is the
    sample-weighted mean rate from the first bucket through the current one.
    """
    counts = [0] * len(buckets)
    successes = [0] * len(buckets)
    for days, succeeded in samples:
        for index, bucket in enumerate(buckets):
            if bucket.contains(days):
                counts[index] += 1
                successes[index] += int(succeeded)
                break

    points: list[DecayDataPoint] = []
    cumulative_successes = 0
    cumulative_total = 0
    for bucket, count, hits in zip(buckets, counts, successes):
        rate = safe_rate(hits, count) or 0.0
        # count * rate == hits; summing hits keeps the final value exact.
        cumulative_successes += hits
        cumulative_total += count
        points.append(
            DecayDataPoint(
                bucket=bucket.label,
                min_days=bucket.min_days,
                max_days=bucket.max_days,
                count=count,
                rate=rate,
                cumulative_rate=(
                    cumulative_successes / cumulative_total if cumulative_total else 0.0
                ),
            )
        )
    return points


def estimate_decay(
    points: Sequence[DecayDataPoint],
    *,
    min_samples: int,
    min_buckets: int,
    peak_ratio: float,
) -> tuple[float | None, int | None]:
    """Return ``(decay_rate_per_day, decay_start_day)`` from well-sampled buckets.

    Both values stay ``None`` unless enough buckets qualify and the rate
    actually declines between the first and last of them.
    """
    qualifying = [point for point in points if point.count >= min_samples]
    if len(qualifying) < min_buckets:
        return None, None

    first, last = qualifying[0], qualifying[-1]
    day_span = last.min_days - first.min_days
    rate_drop = first.rate - last.rate
    if day_span <= 0 or rate_drop <= 0:
        return None, None

    peak = max(point.rate for point in qualifying)
    start_day = next(
        (point.min_days for point in qualifying if point.rate < peak * peak_ratio),
        None,
    )
    return rate_drop / day_span, start_day
