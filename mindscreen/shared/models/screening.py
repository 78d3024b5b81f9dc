"""Screening submission and result domain models.

A submission arrives as self-report totals (PHQ-4, PSS-4, burnout) plus
metrics from two short games. Scoring turns it into four pillar scores,
a wellness score and an escalation tier, which are stored together as
a ScreeningRecord.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, Optional


class EscalationTier(IntEnum):
    """Discrete escalation level driving downstream follow-up."""
    LOW = 1         # Self-help resources appropriate
    MODERATE = 2    # Check-in or counselor referral suggested
    HIGH = 3        # Crisis or severe self-report: immediate follow-up


@dataclass(frozen=True)
class FocusGameMetrics:
    """Metrics from the attention game (game1).

    Rates are fractions 0.0-1.0; reaction times are milliseconds.
    """
    mean_error_rate: float = 0.0
    median_reaction_time_ms: float = 400.0
    reaction_time_sd_ms: float = 0.0
    dropoff_rate: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "mean_error_rate": self.mean_error_rate,
            "median_rt_ms": self.median_reaction_time_ms,
            "rt_sd_ms": self.reaction_time_sd_ms,
            "dropoff_rate": self.dropoff_rate,
        }


@dataclass(frozen=True)
class EmotionGameMetrics:
    """Metrics from the emotion recognition game (game2).

    Correct rates are fractions 0.0-1.0; avoidance_index is on a 0-100 scale.
    """
    negative_correct_rate: float = 0.0
    positive_correct_rate: float = 0.0
    avoidance_index: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "negative_correct_rate": self.negative_correct_rate,
            "positive_correct_rate": self.positive_correct_rate,
            "avoidance_index": self.avoidance_index,
        }


@dataclass(frozen=True)
class RawSubmission:
    """A fully-populated screening submission.

    Built by intake.parse_submission(); scorers never see missing fields.
    """
    phq4_total: float = 0           # 0-12 scale
    pss4_total: float = 0           # 0-16 scale
    burnout_score: float = 0        # 0-4 scale
    focus_game: FocusGameMetrics = field(default_factory=FocusGameMetrics)
    emotion_game: EmotionGameMetrics = field(default_factory=EmotionGameMetrics)
    emergency_flag: bool = False
    user_profile: Dict[str, Any] = field(default_factory=dict)  # Pass-through, never scored or stored


@dataclass(frozen=True)
class SubScores:
    """The four pillar scores, each an int in [0, 100]. Higher is riskier."""
    focus: int
    emotion: int
    mood: int
    stress: int

    def __post_init__(self):
        for name in ("focus", "emotion", "mood", "stress"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} score must be 0-100, got {value}")

    def to_dict(self) -> Dict[str, int]:
        return {
            "stress": self.stress,
            "mood": self.mood,
            "focus": self.focus,
            "emotion": self.emotion,
        }


@dataclass(frozen=True)
class WellnessResult:
    """Overall wellness (higher is better) and the tier it was classified into."""
    wellness_score: int
    tier: EscalationTier

    def __post_init__(self):
        if not 0 <= self.wellness_score <= 100:
            raise ValueError(f"Wellness score must be 0-100, got {self.wellness_score}")


@dataclass(frozen=True)
class ScreeningRecord:
    """The persisted result of one screening submission.

    Created once per submission and never mutated; storage lifecycle
    belongs to the ScreeningStore.
    """
    user_id: Optional[str]          # "auth:<uid>" or None for anonymous
    created_at: datetime
    phq4_total: float
    pss4_total: float
    burnout_score: float
    focus_game: FocusGameMetrics
    emotion_game: EmotionGameMetrics
    subscores: SubScores
    wellness_score: int
    tier: EscalationTier
    emergency_flag: bool

    @property
    def requires_follow_up(self) -> bool:
        """Check if the record needs human follow-up."""
        return self.tier == EscalationTier.HIGH

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the stored document shape.

        Keys are snake_case (user_id, created_at, wellness_score) like the
        request body and the other JSON this service emits. Consumers that
        expect camelCase names such as userId or createdAt must map them.
        """
        return {
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat(),
            "phq4_total": self.phq4_total,
            "pss4_total": self.pss4_total,
            "burnout": self.burnout_score,
            "game1": self.focus_game.to_dict(),
            "game2": self.emotion_game.to_dict(),
            "subscores": self.subscores.to_dict(),
            "wellness_score": self.wellness_score,
            "tier": int(self.tier),
            "emergency_flag": self.emergency_flag,
        }
