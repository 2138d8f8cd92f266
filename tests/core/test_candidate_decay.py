from __future__ import annotations

import pendulum
import pytest

from hirevelocity.core.analyzers import CandidateDecayAnalyzer
from hirevelocity.schemas import Candidate, Requisition

BASE = pendulum.datetime(2024, 1, 1)


def build_offer(
    candidate_id: str,
    days_to_offer: int,
    *,
    accepted: bool,
    req_id: str = "R-1",
    start_field: str = "applied_at",
) -> Candidate:
    offer_at = BASE.add(days=days_to_offer)
    payload = {
        "candidate_id": candidate_id,
        "req_id": req_id,
        start_field: BASE,
        "offer_extended_at": offer_at,
        "offer_accepted_at": offer_at.add(days=2) if accepted else None,
    }
    return Candidate(**payload)


def build_cohort(days: int, accepted: int, total: int, prefix: str) -> list[Candidate]:
    return [
        build_offer(f"{prefix}-{idx}", days, accepted=idx < accepted)
        for idx in range(total)
    ]


REQS = [Requisition(req_id="R-1")]


def test_decaying_acceptance_reports_rate_and_start_day():
    candidates = (
        build_cohort(5, 4, 5, "a")
        + build_cohort(18, 4, 5, "b")
        + build_cohort(25, 3, 5, "c")
        + build_cohort(40, 2, 5, "d")
        + build_cohort(50, 2, 5, "e")
        + build_cohort(70, 1, 5, "f")
    )

    analysis = CandidateDecayAnalyzer().analyze(candidates, REQS)

    assert [point.count for point in analysis.data_points] == [5, 5, 5, 5, 5, 5]
    assert [point.rate for point in analysis.data_points] == pytest.approx(
        [0.8, 0.8, 0.6, 0.4, 0.4, 0.2]
    )
    assert analysis.total_offers == 30
    assert analysis.total_accepted == 16
    assert analysis.overall_acceptance_rate == pytest.approx(16 / 30)
    assert analysis.decay_rate_per_day == pytest.approx(0.6 / 61)
    assert analysis.decay_rate_per_day > 0
    # first bucket under 95% of the 80% peak
    assert analysis.decay_start_day == 22
    assert analysis.median_days_to_decision == 25


def test_cumulative_rate_ends_at_overall_rate():
    candidates = (
        build_cohort(3, 2, 3, "a") + build_cohort(33, 1, 4, "b") + build_cohort(90, 0, 2, "c")
    )

    analysis = CandidateDecayAnalyzer().analyze(candidates, REQS)

    assert sum(point.count for point in analysis.data_points) == analysis.total_offers == 9
    assert analysis.data_points[0].cumulative_rate == pytest.approx(2 / 3)
    assert analysis.data_points[3].cumulative_rate == pytest.approx(3 / 7)
    assert analysis.data_points[-1].cumulative_rate == pytest.approx(
        analysis.overall_acceptance_rate
    )


@pytest.mark.parametrize(
    ("days", "bucket_index"),
    [(0, 0), (14, 0), (15, 1), (21, 1), (22, 2), (30, 2), (31, 3), (45, 3), (46, 4), (60, 4), (61, 5), (400, 5)],
)
def test_bucket_boundaries(days: int, bucket_index: int):
    analysis = CandidateDecayAnalyzer().analyze(
        [build_offer("c", days, accepted=True)], REQS
    )

    counts = [point.count for point in analysis.data_points]
    assert counts[bucket_index] == 1
    assert sum(counts) == 1


def test_negative_elapsed_days_are_excluded():
    candidate = Candidate(
        candidate_id="C-neg",
        req_id="R-1",
        applied_at=BASE.add(days=10),
        offer_extended_at=BASE,
        offer_accepted_at=BASE.add(days=1),
    )

    analysis = CandidateDecayAnalyzer().analyze([candidate], REQS)

    assert analysis.total_offers == 0
    assert all(point.count == 0 for point in analysis.data_points)
    assert analysis.median_days_to_decision is None


def test_first_contact_is_used_when_applied_date_is_missing():
    candidates = [
        build_offer("c1", 20, accepted=True, start_field="first_contacted_at"),
        Candidate(candidate_id="c2", req_id="R-1", offer_extended_at=BASE),
    ]

    analysis = CandidateDecayAnalyzer().analyze(candidates, REQS)

    assert analysis.total_offers == 1
    assert analysis.data_points[1].count == 1


def test_candidates_outside_requisition_scope_or_without_offer_are_ignored():
    candidates = [
        build_offer("in", 5, accepted=True),
        build_offer("out", 5, accepted=True, req_id="R-other"),
        Candidate(candidate_id="no-offer", req_id="R-1", applied_at=BASE),
    ]

    analysis = CandidateDecayAnalyzer().analyze(candidates, REQS)

    assert analysis.total_offers == 1


def test_decay_unknown_with_fewer_than_two_well_sampled_buckets():
    candidates = build_cohort(5, 3, 3, "a") + build_cohort(40, 0, 2, "b")

    analysis = CandidateDecayAnalyzer().analyze(candidates, REQS)

    assert analysis.decay_rate_per_day is None
    assert analysis.decay_start_day is None


def test_rising_acceptance_never_reports_negative_decay():
    candidates = build_cohort(5, 1, 4, "a") + build_cohort(50, 4, 4, "b")

    analysis = CandidateDecayAnalyzer().analyze(candidates, REQS)

    assert analysis.decay_rate_per_day is None
    assert analysis.decay_start_day is None


def test_empty_input_yields_zero_buckets_and_unknown_scalars():
    analysis = CandidateDecayAnalyzer().analyze([], [])

    assert len(analysis.data_points) == 6
    assert all(point.count == 0 and point.rate == 0 for point in analysis.data_points)
    assert analysis.overall_acceptance_rate == 0
    assert analysis.median_days_to_decision is None
    assert analysis.decay_rate_per_day is None
    assert analysis.data_points[-1].max_days is None
