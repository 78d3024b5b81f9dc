"""Scoring Service: screening submission -> wellness score and tier.

Pipeline:
1. Intake fills defaults for missing or invalid fields
2. Pillar scorers compute Focus, Emotion, Mood and Stress (0-100 risk)
3. The aggregator inverts the weighted risk index into wellness
4. An ordered decision table picks escalation tier 1, 2 or 3
5. The record is appended once to the injected ScreeningStore

Endpoints:
- POST /screening/score - Score and store a submission
- GET /health - Liveness
- GET /ready - Readiness (checks the database when configured)
"""

from .config import ScoringConfig, ServiceConfig, DEFAULT_SCORING_CONFIG
from .handler import ScreeningHandler, assemble_record
from .intake import parse_submission, resolve_identity
from .pipeline import ScoringOutcome, ScoringPipeline
from .screening_repository import (
    InMemoryScreeningStore,
    ScreeningRepository,
    ScreeningStore,
)
from .tiers import TIER_RULES, TierInputs, TierRule, decide_tier

__all__ = [
    "ScoringConfig",
    "ServiceConfig",
    "DEFAULT_SCORING_CONFIG",
    "ScreeningHandler",
    "assemble_record",
    "parse_submission",
    "resolve_identity",
    "ScoringOutcome",
    "ScoringPipeline",
    "InMemoryScreeningStore",
    "ScreeningRepository",
    "ScreeningStore",
    "TIER_RULES",
    "TierInputs",
    "TierRule",
    "decide_tier",
]
