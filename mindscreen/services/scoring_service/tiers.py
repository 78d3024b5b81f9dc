"""Tier decision table.

Rules are evaluated in order and the first match wins, so a rule's
position is its priority. Crisis rules come first; the final rule
always matches and yields the moderate tier.
"""
from dataclasses import dataclass
from typing import Callable, Tuple

from mindscreen.shared.models import EscalationTier

from .config import DEFAULT_SCORING_CONFIG, TierThresholds


@dataclass(frozen=True)
class TierInputs:
    """The signals the decision table looks at."""
    emergency_flag: bool
    phq4_total: float
    wellness_score: int
    focus: int
    mood: int
    emotion: int


@dataclass(frozen=True)
class TierRule:
    """One row of the decision table."""
    name: str
    predicate: Callable[[TierInputs, TierThresholds], bool]
    tier: EscalationTier

    def matches(self, inputs: TierInputs, thresholds: TierThresholds) -> bool:
        return self.predicate(inputs, thresholds)


def _high_pillar_count(inputs: TierInputs, thresholds: TierThresholds) -> int:
    pillars = (inputs.focus, inputs.mood, inputs.emotion)
    return sum(1 for score in pillars if score > thresholds.high_pillar_score)


def _is_compounding(inputs: TierInputs, t: TierThresholds) -> bool:
    return (
        inputs.wellness_score < t.compound_wellness_max
        and _high_pillar_count(inputs, t) >= t.high_pillar_count
    )


def _is_low_risk(inputs: TierInputs, t: TierThresholds) -> bool:
    return (
        inputs.wellness_score >= t.low_risk_wellness_min
        and inputs.phq4_total <= t.low_risk_phq4_max
        and inputs.focus <= t.low_risk_focus_max
        and inputs.emotion <= t.low_risk_emotion_max
    )


TIER_RULES: Tuple[TierRule, ...] = (
    TierRule(
        "emergency_override",
        lambda i, t: bool(i.emergency_flag),
        EscalationTier.HIGH,
    ),
    TierRule(
        "severe_self_report",
        lambda i, t: i.phq4_total >= t.phq4_severe_min,
        EscalationTier.HIGH,
    ),
    TierRule("compounding_pillars", _is_compounding, EscalationTier.HIGH),
    TierRule(
        "moderate_self_report",
        lambda i, t: t.phq4_moderate_min <= i.phq4_total <= t.phq4_moderate_max,
        EscalationTier.MODERATE,
    ),
    TierRule("low_risk", _is_low_risk, EscalationTier.LOW),
    TierRule("default", lambda i, t: True, EscalationTier.MODERATE),
)


def match_tier_rule(
    inputs: TierInputs,
    thresholds: TierThresholds = DEFAULT_SCORING_CONFIG.tier_thresholds,
    rules: Tuple[TierRule, ...] = TIER_RULES,
) -> TierRule:
    """Return the first rule that matches.

    Raises:
        ValueError: If no rule matches (a custom table without a catch-all)
    """
    for rule in rules:
        if rule.matches(inputs, thresholds):
            return rule
    raise ValueError("Tier rules must end with a catch-all rule")


def decide_tier(
    inputs: TierInputs,
    thresholds: TierThresholds = DEFAULT_SCORING_CONFIG.tier_thresholds,
    rules: Tuple[TierRule, ...] = TIER_RULES,
) -> EscalationTier:
    """Classify a scored submission into tier 1, 2 or 3."""
    return match_tier_rule(inputs, thresholds, rules).tier
