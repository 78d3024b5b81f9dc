"""Scoring pipeline: pillars -> wellness -> tier.

Pure and synchronous. A ScoringPipeline holds only its immutable config,
so one instance can serve concurrent requests.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from mindscreen.shared.models import RawSubmission, SubScores, WellnessResult

from .config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .pillars import (
    compute_emotion_score,
    compute_focus_score,
    compute_mood_score,
    compute_stress_score,
)
from .tiers import TierInputs, match_tier_rule
from .wellness import compute_wellness_score

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringOutcome:
    """Everything the pipeline computed for one submission."""
    subscores: SubScores
    result: WellnessResult
    rule_name: str      # Tier rule that fired


class ScoringPipeline:
    """Turns a RawSubmission into pillar scores, wellness and tier."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or DEFAULT_SCORING_CONFIG

        logger.info(
            "SCORING_PIPELINE_INITIALIZED",
            extra={"model_version": self.config.model_version}
        )

    def score_pillars(self, submission: RawSubmission) -> SubScores:
        config = self.config
        focus = compute_focus_score(
            submission.focus_game, config.focus_weights, config.focus_bounds
        )
        emotion = compute_emotion_score(
            submission.emotion_game, config.emotion_weights, config.emotion_bounds
        )
        mood = compute_mood_score(
            submission.phq4_total,
            submission.pss4_total,
            submission.burnout_score,
            config.mood_weights,
            config.instrument_maxima,
        )
        stress = compute_stress_score(mood, focus, emotion, config.stress_weights)

        return SubScores(focus=focus, emotion=emotion, mood=mood, stress=stress)

    def score(self, submission: RawSubmission) -> ScoringOutcome:
        """Run the full pipeline.

        Args:
            submission: Fully-populated submission from parse_submission()

        Returns:
            ScoringOutcome with sub-scores, wellness/tier and the rule name
        """
        subscores = self.score_pillars(submission)
        wellness_score = compute_wellness_score(subscores, self.config.wellness_weights)

        rule = match_tier_rule(
            TierInputs(
                emergency_flag=submission.emergency_flag,
                phq4_total=submission.phq4_total,
                wellness_score=wellness_score,
                focus=subscores.focus,
                mood=subscores.mood,
                emotion=subscores.emotion,
            ),
            self.config.tier_thresholds,
        )

        return ScoringOutcome(
            subscores=subscores,
            result=WellnessResult(wellness_score=wellness_score, tier=rule.tier),
            rule_name=rule.name,
        )
