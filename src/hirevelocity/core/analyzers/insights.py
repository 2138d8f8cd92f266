"""Rule-based insight synthesis over the velocity analyses."""

from __future__ import annotations

from ..results import (
    CandidateDecayAnalysis,
    CohortComparison,
    ReqDecayAnalysis,
    SuccessFactorComparison,
    VelocityInsight,
    round_half_up,
)
from ..thresholds import (
    DEFAULT_THRESHOLDS,
    TIME_TO_FILL_FACTOR,
    ConfidenceLevel,
    VelocityThresholds,
    calculate_confidence,
)

_TENTATIVE: frozenset[str] = frozenset({"LOW", "INSUFFICIENT"})

# (factor-name fragment, action, next step); first match wins.
_FACTOR_PLAYBOOK: tuple[tuple[str, str, str], ...] = (
    (
        "Referral",
        "Increase referral pipeline",
        "Launch a referral campaign for hard-to-fill roles.",
    ),
    (
        "HM",
        "Coach HMs on faster feedback",
        "Set SLA expectations with HMs for feedback turnaround.",
    ),
    (
        "Interview",
        "Streamline interview process",
        "Audit interview loops for unnecessary stages.",
    ),
)
_FALLBACK_PLAY = (
    "Monitor this metric",
    "Track this metric over time to validate correlation.",
)


def _pct(rate: float) -> int:
    return round_half_up(rate * 100)


def _tentative(confidence: ConfidenceLevel) -> bool:
    return confidence in _TENTATIVE


class InsightGenerator:
    """Turn decay and cohort results into ordered insight cards.

    Rules are evaluated independently in a fixed order; any subset may fire.
    Confidence labels only soften the wording, they never suppress a card.
    """

    def __init__(self, *, thresholds: VelocityThresholds | None = None) -> None:
        self._thresholds = thresholds or DEFAULT_THRESHOLDS

    def generate(
        self,
        candidate_decay: CandidateDecayAnalysis,
        req_decay: ReqDecayAnalysis,
        cohort_comparison: CohortComparison | None,
    ) -> list[VelocityInsight]:
        insights: list[VelocityInsight] = []
        insights.extend(self._candidate_decay_insights(candidate_decay))
        insights.extend(self._req_decay_insights(req_decay))
        if cohort_comparison is not None:
            insights.extend(self._cohort_insights(cohort_comparison))
        limited = self._limited_data_insight(candidate_decay)
        if limited is not None:
            insights.append(limited)
        return insights

    def _candidate_decay_insights(
        self,
        decay: CandidateDecayAnalysis,
    ) -> list[VelocityInsight]:
        insights: list[VelocityInsight] = []
        confidence = calculate_confidence(decay.total_offers, self._thresholds.confidence_offers)

        if decay.decay_rate_per_day is not None and decay.decay_start_day is not None:
            daily_drop = f"{decay.decay_rate_per_day * 100:.1f}"
            verb = "may drop" if _tentative(confidence) else "drops"
            insights.append(
                VelocityInsight(
                    type="warning",
                    title="Candidate Interest May Decay Over Time",
                    description=(
                        f"Based on {decay.total_offers} offers, acceptance rate {verb} "
                        f"~{daily_drop}% per day after day {decay.decay_start_day}."
                    ),
                    metric=f"{daily_drop}%/day decay",
                    action="Prioritize candidates who have been in process longest",
                    evidence=(
                        f"n={decay.total_offers} offers, decay starts day "
                        f"{decay.decay_start_day}"
                    ),
                    sample_size=decay.total_offers,
                    so_what="Candidates lose interest over time, reducing your offer acceptance rate.",
                    next_step="Move candidates to offer within the decay window to maximize acceptance.",
                    confidence=confidence,
                )
            )

        fast_bucket = decay.data_points[0] if decay.data_points else None
        if (
            fast_bucket is not None
            and fast_bucket.rate > decay.overall_acceptance_rate * self._thresholds.fast_offer_lift
        ):
            bucket_confidence = calculate_confidence(
                fast_bucket.count, self._thresholds.confidence_bucket
            )
            title = (
                "Fast Processes Tend to Win"
                if _tentative(bucket_confidence)
                else "Fast Processes Win"
            )
            lift = _pct(fast_bucket.rate - decay.overall_acceptance_rate)
            insights.append(
                VelocityInsight(
                    type="success",
                    title=title,
                    description=(
                        f"Candidates receiving offers within {fast_bucket.max_days} days accept at "
                        f"{_pct(fast_bucket.rate)}% (n={fast_bucket.count}) vs "
                        f"{_pct(decay.overall_acceptance_rate)}% overall."
                    ),
                    metric=f"+{lift}% acceptance",
                    action=f"Target {fast_bucket.max_days}-day offer timeline",
                    evidence=(
                        f"Fast bucket: {fast_bucket.count} offers at {_pct(fast_bucket.rate)}%"
                    ),
                    sample_size=fast_bucket.count,
                    so_what="Speed is a competitive advantage in hiring top talent.",
                    next_step=(
                        f"Set a goal to extend offers within {fast_bucket.max_days} days "
                        "of first contact."
                    ),
                    confidence=bucket_confidence,
                )
            )
        return insights

    def _req_decay_insights(self, decay: ReqDecayAnalysis) -> list[VelocityInsight]:
        insights: list[VelocityInsight] = []
        confidence = calculate_confidence(decay.total_reqs, self._thresholds.confidence_reqs)

        if decay.decay_rate_per_day is not None and decay.decay_start_day is not None:
            daily_drop = f"{decay.decay_rate_per_day * 100:.1f}"
            verb = "may decline" if _tentative(confidence) else "declines"
            insights.append(
                VelocityInsight(
                    type="warning",
                    title="Req Fill Probability May Decline",
                    description=(
                        f"Based on {decay.total_reqs} reqs, fill probability {verb} "
                        f"~{daily_drop}% per day after day {decay.decay_start_day}."
                    ),
                    metric=f"{daily_drop}%/day decay",
                    action="Reassess strategy on reqs open >60 days",
                    evidence=f"n={decay.total_reqs} reqs, decay starts day {decay.decay_start_day}",
                    sample_size=decay.total_reqs,
                    so_what="Stale reqs are harder to fill and may indicate misaligned requirements.",
                    next_step="Review reqs older than 60 days for scope, comp, or HM engagement issues.",
                    confidence=confidence,
                )
            )

        slow_index = self._thresholds.slow_req_bucket_index
        if len(decay.data_points) <= slow_index:
            return insights
        fast_bucket = decay.data_points[0]
        slow_bucket = decay.data_points[slow_index]
        min_samples = self._thresholds.min_bucket_samples
        if (
            fast_bucket.count >= min_samples
            and slow_bucket.count >= min_samples
            and fast_bucket.rate > slow_bucket.rate * self._thresholds.fast_req_fill_ratio
        ):
            combined = fast_bucket.count + slow_bucket.count
            combined_confidence = calculate_confidence(
                combined, self._thresholds.confidence_bucket * 2
            )
            verb = "May Correlate" if _tentative(combined_confidence) else "Correlates"
            insights.append(
                VelocityInsight(
                    type="info",
                    title=f"Early Closure {verb} with Success",
                    description=(
                        f"Reqs closed within {fast_bucket.max_days} days show "
                        f"{_pct(fast_bucket.rate)}% fill rate (n={fast_bucket.count}) vs "
                        f"{_pct(slow_bucket.rate)}% for {slow_bucket.min_days - 1}+ day reqs "
                        f"(n={slow_bucket.count})."
                    ),
                    metric=f"{_pct(fast_bucket.rate)}% vs {_pct(slow_bucket.rate)}%",
                    evidence=f"Fast: n={fast_bucket.count}, Slow: n={slow_bucket.count}",
                    sample_size=combined,
                    so_what=(
                        "Quick closures indicate strong alignment between job specs "
                        "and candidate market."
                    ),
                    next_step="Identify patterns in fast-closing reqs to replicate success.",
                    confidence=combined_confidence,
                )
            )
        return insights

    def _cohort_insights(self, comparison: CohortComparison) -> list[VelocityInsight]:
        fast = comparison.fast_hires
        slow = comparison.slow_hires
        cohort_size = fast.count + slow.count
        confidence = calculate_confidence(cohort_size, self._thresholds.confidence_cohort)
        gap = round_half_up(slow.avg_time_to_fill - fast.avg_time_to_fill)

        insights = [
            VelocityInsight(
                type="info",
                title="Speed Gap Between Cohorts",
                description=(
                    f"Fastest 25% close in {round_half_up(fast.avg_time_to_fill)} days "
                    f"(n={fast.count}) vs {round_half_up(slow.avg_time_to_fill)} days for "
                    f"slowest 25% (n={slow.count}): {gap} day difference."
                ),
                metric=f"{gap} day gap",
                evidence=f"Fast cohort: n={fast.count}, Slow cohort: n={slow.count}",
                sample_size=cohort_size,
                so_what="Understanding what makes fast hires different can improve overall velocity.",
                next_step="Review the factors below to identify actionable improvements.",
                confidence=confidence,
            )
        ]

        top_factor = next(
            (
                factor
                for factor in comparison.factors
                if factor.impact_level == "high" and factor.factor != TIME_TO_FILL_FACTOR
            ),
            None,
        )
        if top_factor is not None:
            insights.append(self._differentiator_insight(top_factor, cohort_size, confidence))

        referral_gap = fast.referral_percent - slow.referral_percent
        if referral_gap > self._thresholds.referral_gap_points:
            verb = "May Correlate" if _tentative(confidence) else "Correlate"
            insights.append(
                VelocityInsight(
                    type="success",
                    title=f"Referrals {verb} with Speed",
                    description=(
                        f"Fast hires: {round_half_up(fast.referral_percent)}% referrals vs "
                        f"{round_half_up(slow.referral_percent)}% for slow hires."
                    ),
                    metric=f"+{round_half_up(referral_gap)}% referrals",
                    action="Push for referrals on stalled reqs",
                    evidence=f"Referral delta: {round_half_up(referral_gap)}%",
                    sample_size=cohort_size,
                    so_what="Referrals often have faster hire cycles due to pre-existing trust.",
                    next_step="Prioritize referral outreach for roles that have been open >30 days.",
                    confidence=confidence,
                )
            )
        return insights

    @staticmethod
    def _differentiator_insight(
        factor: SuccessFactorComparison,
        cohort_size: int,
        confidence: ConfidenceLevel,
    ) -> VelocityInsight:
        action, next_step = next(
            (
                (action, step)
                for fragment, action, step in _FACTOR_PLAYBOOK
                if fragment in factor.factor
            ),
            _FALLBACK_PLAY,
        )
        qualifier = "Potential " if _tentative(confidence) else ""
        return VelocityInsight(
            type="success",
            title=f"{qualifier}Differentiator: {factor.factor}",
            description=(
                f"Fast hires: {factor.fast_display} {factor.unit} vs slow hires: "
                f"{factor.slow_display} {factor.unit}. Delta: {factor.delta_display} {factor.unit}."
            ),
            metric=f"{factor.delta_display} {factor.unit}",
            action=action,
            evidence=f"Fast: {factor.fast_display}, Slow: {factor.slow_display}",
            sample_size=cohort_size,
            so_what="This factor shows a meaningful difference between fast and slow hires.",
            next_step=next_step,
            confidence=confidence,
        )

    def _limited_data_insight(self, decay: CandidateDecayAnalysis) -> VelocityInsight | None:
        required = self._thresholds.limited_offer_sample
        if decay.total_offers >= required:
            return None
        return VelocityInsight(
            type="info",
            title="Limited Offer Data",
            description=(
                f"Analysis based on {decay.total_offers} offers. "
                f"Need {required} for full analysis."
            ),
            evidence=f"n={decay.total_offers} offers",
            sample_size=decay.total_offers,
            so_what="Some decay insights are unavailable due to limited sample size.",
            next_step="Continue collecting data to unlock additional analysis.",
            confidence="INSUFFICIENT",
        )
