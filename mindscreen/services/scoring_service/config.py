"""Scoring weights, clinical cut-offs and service configuration.

PHQ-4 bands follow the published scoring guide (0-2 normal, 3-5 mild,
6-8 moderate, 9-12 severe).
Source: Kroenke et al. 2009, Psychosomatics 50(6):613-621
"""
import math
import os
from dataclasses import dataclass, field, fields
from typing import Optional

from mindscreen.shared.database import DatabaseConfig


def _check_weights_sum(instance) -> None:
    total = sum(getattr(instance, f.name) for f in fields(instance))
    if not math.isclose(total, 1.0, abs_tol=1e-9):
        raise ValueError(
            f"{type(instance).__name__} weights must sum to 1.0, got {total}"
        )


@dataclass(frozen=True)
class FocusWeights:
    """Weights of the four attention-game risk terms."""
    error: float = 0.45
    reaction_time: float = 0.30
    reaction_time_variability: float = 0.15
    dropoff: float = 0.10

    def __post_init__(self):
        _check_weights_sum(self)


@dataclass(frozen=True)
class EmotionWeights:
    negative_bias: float = 0.6
    avoidance: float = 0.4

    def __post_init__(self):
        _check_weights_sum(self)


@dataclass(frozen=True)
class MoodWeights:
    """Weights of the self-report risk terms."""
    mood: float = 0.5        # PHQ-4
    stress: float = 0.35     # PSS-4
    burnout: float = 0.15

    def __post_init__(self):
        _check_weights_sum(self)


@dataclass(frozen=True)
class StressWeights:
    """Stress is a meta-pillar over the other three pillar scores."""
    mood: float = 0.5
    focus: float = 0.2
    emotion: float = 0.3

    def __post_init__(self):
        _check_weights_sum(self)


@dataclass(frozen=True)
class WellnessWeights:
    """Weights of the risk index that wellness is inverted from."""
    stress: float = 0.30
    mood: float = 0.30
    focus: float = 0.25
    emotion: float = 0.15

    def __post_init__(self):
        _check_weights_sum(self)


@dataclass(frozen=True)
class FocusBounds:
    """Input ranges mapped onto 0-100 risk for the attention game."""
    reaction_time_min_ms: float = 300.0
    reaction_time_max_ms: float = 1500.0
    reaction_time_sd_min_ms: float = 0.0
    reaction_time_sd_max_ms: float = 600.0


@dataclass(frozen=True)
class EmotionBounds:
    negative_bias_multiplier: float = 2.0   # 50 percentage points of negative bias saturates risk


@dataclass(frozen=True)
class InstrumentMaxima:
    """Maximum totals of the self-report instruments."""
    phq4: float = 12.0
    pss4: float = 16.0
    burnout: float = 4.0


@dataclass(frozen=True)
class TierThresholds:
    """Cut-offs used by the tier decision table."""
    phq4_severe_min: float = 9          # Severe band: always tier 3
    phq4_moderate_min: float = 6        # Moderate band: tier 2
    phq4_moderate_max: float = 8
    compound_wellness_max: float = 30   # Wellness strictly below this ...
    high_pillar_score: float = 70       # ... with pillars strictly above this ...
    high_pillar_count: int = 2          # ... at least this many of them: tier 3
    low_risk_wellness_min: float = 75
    low_risk_phq4_max: float = 5
    low_risk_focus_max: float = 40
    low_risk_emotion_max: float = 40


@dataclass(frozen=True)
class InputDefaults:
    """Values substituted for missing submission fields."""
    phq4_total: float = 0
    pss4_total: float = 0
    burnout_score: float = 0
    median_reaction_time_ms: float = 400.0  # Neutral baseline, inside the low-risk part of the range
    game_metric: float = 0.0
    emergency_flag: bool = False


@dataclass(frozen=True)
class ScoringConfig:
    """Everything the scoring pipeline needs, in one immutable object."""
    focus_weights: FocusWeights = field(default_factory=FocusWeights)
    emotion_weights: EmotionWeights = field(default_factory=EmotionWeights)
    mood_weights: MoodWeights = field(default_factory=MoodWeights)
    stress_weights: StressWeights = field(default_factory=StressWeights)
    wellness_weights: WellnessWeights = field(default_factory=WellnessWeights)
    focus_bounds: FocusBounds = field(default_factory=FocusBounds)
    emotion_bounds: EmotionBounds = field(default_factory=EmotionBounds)
    instrument_maxima: InstrumentMaxima = field(default_factory=InstrumentMaxima)
    tier_thresholds: TierThresholds = field(default_factory=TierThresholds)
    input_defaults: InputDefaults = field(default_factory=InputDefaults)

    # Version tracking for audit trail
    model_version: str = "2026.10.1"


DEFAULT_SCORING_CONFIG = ScoringConfig()


STORAGE_BACKENDS = ("memory", "postgres")


@dataclass(frozen=True)
class ServiceConfig:
    """Runtime configuration for the scoring HTTP service."""
    port: int = 8004
    storage_backend: str = "memory"
    pii_salt: str = "default_dev_salt_change_in_production_32chars"
    table_name: str = "screening_results"
    database: Optional[DatabaseConfig] = None

    def __post_init__(self):
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"STORAGE_BACKEND must be one of {STORAGE_BACKENDS}, got {self.storage_backend!r}"
            )

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Create config from environment variables.

        Environment variables:
            PORT: HTTP port (default 8004)
            STORAGE_BACKEND: "memory" or "postgres" (default memory)
            PII_HASH_SALT: Salt for identity hashing in logs
            SCREENING_TABLE: Table name (default screening_results)
            DB_SECRET_ARN: Load database credentials from Secrets Manager
            AWS_REGION: Region for Secrets Manager (default us-east-1)
            DB_*: See DatabaseConfig.from_env
        """
        storage_backend = os.getenv("STORAGE_BACKEND", "memory").lower()

        database = None
        if storage_backend == "postgres":
            secret_arn = os.getenv("DB_SECRET_ARN")
            if secret_arn:
                database = DatabaseConfig.from_secrets_manager(
                    secret_arn, region=os.getenv("AWS_REGION", "us-east-1")
                )
            else:
                database = DatabaseConfig.from_env()

        return cls(
            port=int(os.getenv("PORT", "8004")),
            storage_backend=storage_backend,
            pii_salt=os.getenv("PII_HASH_SALT", "default_dev_salt_change_in_production_32chars"),
            table_name=os.getenv("SCREENING_TABLE", "screening_results"),
            database=database,
        )
