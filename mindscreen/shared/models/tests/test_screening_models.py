"""Tests for screening domain models."""
from dataclasses import FrozenInstanceError
from datetime import datetime, timezone

import pytest

from mindscreen.shared.models import (
    EmotionGameMetrics,
    EscalationTier,
    FocusGameMetrics,
    ScreeningRecord,
    SubScores,
    WellnessResult,
)


class TestEscalationTier:
    def test_values(self):
        assert [int(t) for t in EscalationTier] == [1, 2, 3]

    def test_ordering(self):
        assert EscalationTier.LOW < EscalationTier.MODERATE < EscalationTier.HIGH


class TestSubScores:
    def test_valid(self):
        scores = SubScores(focus=0, emotion=100, mood=50, stress=1)
        assert scores.to_dict() == {"stress": 1, "mood": 50, "focus": 0, "emotion": 100}

    @pytest.mark.parametrize("field", ["focus", "emotion", "mood", "stress"])
    def test_out_of_range_rejected(self, field):
        values = dict(focus=0, emotion=0, mood=0, stress=0)
        values[field] = 101
        with pytest.raises(ValueError):
            SubScores(**values)

    def test_immutable(self):
        scores = SubScores(focus=1, emotion=1, mood=1, stress=1)
        with pytest.raises(FrozenInstanceError):
            scores.focus = 2


class TestWellnessResult:
    def test_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            WellnessResult(wellness_score=-1, tier=EscalationTier.LOW)


class TestGameMetrics:
    def test_focus_defaults(self):
        metrics = FocusGameMetrics()
        assert metrics.median_reaction_time_ms == 400.0
        assert metrics.to_dict() == {
            "mean_error_rate": 0.0,
            "median_rt_ms": 400.0,
            "rt_sd_ms": 0.0,
            "dropoff_rate": 0.0,
        }

    def test_emotion_defaults(self):
        assert EmotionGameMetrics().to_dict() == {
            "negative_correct_rate": 0.0,
            "positive_correct_rate": 0.0,
            "avoidance_index": 0.0,
        }


class TestScreeningRecord:
    @pytest.fixture
    def record(self):
        return ScreeningRecord(
            user_id=None,
            created_at=datetime(2026, 10, 19, tzinfo=timezone.utc),
            phq4_total=0,
            pss4_total=0,
            burnout_score=0,
            focus_game=FocusGameMetrics(),
            emotion_game=EmotionGameMetrics(),
            subscores=SubScores(focus=3, emotion=0, mood=0, stress=1),
            wellness_score=99,
            tier=EscalationTier.LOW,
            emergency_flag=False,
        )

    def test_to_dict(self, record):
        doc = record.to_dict()

        assert doc["user_id"] is None
        assert doc["created_at"] == "2026-10-19T00:00:00+00:00"
        assert doc["burnout"] == 0
        assert doc["wellness_score"] == 99
        assert doc["tier"] == 1
        assert type(doc["tier"]) is int

    def test_to_dict_uses_snake_case_keys(self, record):
        assert list(record.to_dict()) == [
            "user_id",
            "created_at",
            "phq4_total",
            "pss4_total",
            "burnout",
            "game1",
            "game2",
            "subscores",
            "wellness_score",
            "tier",
            "emergency_flag",
        ]

    def test_low_tier_needs_no_follow_up(self, record):
        assert record.requires_follow_up is False
