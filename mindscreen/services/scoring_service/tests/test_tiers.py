"""Tests for the tier decision table.

Rule order is the priority order, so several tests pair a lower-priority
match with a higher-priority one and check which fires.
"""
import itertools

import pytest

from mindscreen.shared.models import EscalationTier
from mindscreen.services.scoring_service.tiers import (
    TIER_RULES,
    TierInputs,
    TierRule,
    decide_tier,
    match_tier_rule,
)


def make_inputs(**overrides) -> TierInputs:
    """Low-risk inputs unless overridden."""
    values = dict(
        emergency_flag=False,
        phq4_total=0,
        wellness_score=99,
        focus=3,
        mood=0,
        emotion=0,
    )
    values.update(overrides)
    return TierInputs(**values)


class TestRuleTable:
    def test_rule_order(self):
        assert [rule.name for rule in TIER_RULES] == [
            "emergency_override",
            "severe_self_report",
            "compounding_pillars",
            "moderate_self_report",
            "low_risk",
            "default",
        ]

    def test_last_rule_is_catch_all(self):
        assert TIER_RULES[-1].tier == EscalationTier.MODERATE
        assert TIER_RULES[-1].matches(make_inputs(wellness_score=0), None)

    def test_table_without_catch_all_raises(self):
        rules = (TierRule("never", lambda i, t: False, EscalationTier.LOW),)
        with pytest.raises(ValueError):
            match_tier_rule(make_inputs(), rules=rules)


class TestCrisisOverride:
    def test_emergency_flag_overrides_low_risk(self):
        inputs = make_inputs(emergency_flag=True)
        assert decide_tier(inputs) == EscalationTier.HIGH
        assert match_tier_rule(inputs).name == "emergency_override"

    def test_emergency_flag_wins_over_severe_self_report(self):
        inputs = make_inputs(emergency_flag=True, phq4_total=12)
        assert match_tier_rule(inputs).name == "emergency_override"


class TestSevereSelfReport:
    @pytest.mark.parametrize("phq4", [9, 10, 12])
    def test_severe_band(self, phq4):
        inputs = make_inputs(phq4_total=phq4)
        assert decide_tier(inputs) == EscalationTier.HIGH
        assert match_tier_rule(inputs).name == "severe_self_report"

    def test_severe_regardless_of_wellness(self):
        assert decide_tier(make_inputs(phq4_total=10, wellness_score=100)) == EscalationTier.HIGH


class TestCompoundingPillars:
    def test_two_high_pillars_with_low_wellness(self):
        inputs = make_inputs(phq4_total=4, wellness_score=20, focus=80, mood=75, emotion=10)
        assert decide_tier(inputs) == EscalationTier.HIGH
        assert match_tier_rule(inputs).name == "compounding_pillars"

    def test_one_high_pillar_is_not_enough(self):
        inputs = make_inputs(wellness_score=20, focus=80, mood=50, emotion=10)
        assert decide_tier(inputs) == EscalationTier.MODERATE
        assert match_tier_rule(inputs).name == "default"

    def test_pillars_at_seventy_do_not_count(self):
        inputs = make_inputs(wellness_score=10, focus=70, mood=70, emotion=70)
        assert match_tier_rule(inputs).name == "default"

    def test_wellness_at_thirty_does_not_compound(self):
        inputs = make_inputs(wellness_score=30, focus=90, mood=90, emotion=90)
        assert match_tier_rule(inputs).name == "default"

    def test_compounding_wins_over_moderate_band(self):
        inputs = make_inputs(phq4_total=7, wellness_score=15, focus=90, mood=85, emotion=20)
        assert match_tier_rule(inputs).name == "compounding_pillars"


class TestModerateSelfReport:
    @pytest.mark.parametrize("phq4", [6, 7, 8])
    def test_moderate_band(self, phq4):
        inputs = make_inputs(phq4_total=phq4)
        assert decide_tier(inputs) == EscalationTier.MODERATE
        assert match_tier_rule(inputs).name == "moderate_self_report"


class TestLowRisk:
    def test_all_thresholds_at_limit(self):
        inputs = make_inputs(wellness_score=75, phq4_total=5, focus=40, emotion=40)
        assert decide_tier(inputs) == EscalationTier.LOW
        assert match_tier_rule(inputs).name == "low_risk"

    @pytest.mark.parametrize("override", [
        {"wellness_score": 74},
        {"focus": 41},
        {"emotion": 41},
    ])
    def test_any_threshold_missed_falls_to_default(self, override):
        inputs = make_inputs(**override)
        assert decide_tier(inputs) == EscalationTier.MODERATE
        assert match_tier_rule(inputs).name == "default"

    def test_high_mood_alone_does_not_block_low_risk(self):
        """Mood is not part of the low-risk rule; wellness covers it."""
        inputs = make_inputs(wellness_score=80, mood=60)
        assert decide_tier(inputs) == EscalationTier.LOW


class TestTotality:
    def test_every_combination_yields_one_tier(self):
        grid = itertools.product(
            (False, True),
            (0, 5, 6, 8, 9, 12),
            (0, 29, 30, 74, 75, 100),
            (0, 40, 71, 100),
            (0, 71, 100),
            (0, 40, 71, 100),
        )
        for flag, phq4, wellness, focus, mood, emotion in grid:
            tier = decide_tier(TierInputs(flag, phq4, wellness, focus, mood, emotion))
            assert tier in (EscalationTier.LOW, EscalationTier.MODERATE, EscalationTier.HIGH)
