"""Shared domain models for Mindscreen."""
from .screening import (
    EscalationTier,
    FocusGameMetrics,
    EmotionGameMetrics,
    RawSubmission,
    SubScores,
    WellnessResult,
    ScreeningRecord,
)

__all__ = [
    "EscalationTier",
    "FocusGameMetrics",
    "EmotionGameMetrics",
    "RawSubmission",
    "SubScores",
    "WellnessResult",
    "ScreeningRecord",
]
