"""Pillar scorers: Focus, Emotion, Mood and Stress.

Each scorer is a pure function returning an int in [0, 100], where
higher means more risk. The final weighted sum is clamped and then
rounded; overflowing or undefined sums saturate instead of raising.
"""
from mindscreen.shared.models import EmotionGameMetrics, FocusGameMetrics

from .config import (
    DEFAULT_SCORING_CONFIG,
    EmotionBounds,
    EmotionWeights,
    FocusBounds,
    FocusWeights,
    InstrumentMaxima,
    MoodWeights,
    StressWeights,
)
from .normalizers import bounded_score, clamp, normalize_linear


def _finalize(score: float) -> int:
    return bounded_score(score)


def compute_focus_score(
    metrics: FocusGameMetrics,
    weights: FocusWeights = DEFAULT_SCORING_CONFIG.focus_weights,
    bounds: FocusBounds = DEFAULT_SCORING_CONFIG.focus_bounds,
) -> int:
    """Score attention-game performance.

    Error and dropoff rates are fractions scaled to percent; reaction
    time and its variability are interpolated over fixed ranges.
    """
    error_risk = clamp(metrics.mean_error_rate * 100, 0, 100)
    rt_risk = normalize_linear(
        metrics.median_reaction_time_ms,
        bounds.reaction_time_min_ms,
        bounds.reaction_time_max_ms,
    )
    rt_var_risk = normalize_linear(
        metrics.reaction_time_sd_ms,
        bounds.reaction_time_sd_min_ms,
        bounds.reaction_time_sd_max_ms,
    )
    dropoff_risk = clamp(metrics.dropoff_rate * 100, 0, 100)

    score = (
        error_risk * weights.error +
        rt_risk * weights.reaction_time +
        rt_var_risk * weights.reaction_time_variability +
        dropoff_risk * weights.dropoff
    )
    return _finalize(score)


def compute_emotion_score(
    metrics: EmotionGameMetrics,
    weights: EmotionWeights = DEFAULT_SCORING_CONFIG.emotion_weights,
    bounds: EmotionBounds = DEFAULT_SCORING_CONFIG.emotion_bounds,
) -> int:
    """Score negative recognition bias and avoidance.

    Only a bias toward negative faces contributes risk; a positive bias
    clamps to zero.
    """
    negative_bias_pp = (metrics.negative_correct_rate - metrics.positive_correct_rate) * 100
    neg_risk = clamp(negative_bias_pp * bounds.negative_bias_multiplier, 0, 100)
    avoidance_risk = clamp(metrics.avoidance_index, 0, 100)

    score = neg_risk * weights.negative_bias + avoidance_risk * weights.avoidance
    return _finalize(score)


def compute_mood_score(
    phq4_total: float,
    pss4_total: float,
    burnout_score: float,
    weights: MoodWeights = DEFAULT_SCORING_CONFIG.mood_weights,
    maxima: InstrumentMaxima = DEFAULT_SCORING_CONFIG.instrument_maxima,
) -> int:
    """Score the self-report instruments.

    The three risk terms are deliberately left unclamped; out-of-range
    totals saturate only at the final clamp.
    """
    mood_risk = (phq4_total / maxima.phq4) * 100
    stress_risk = (pss4_total / maxima.pss4) * 100
    burnout_risk = (burnout_score / maxima.burnout) * 100

    score = (
        mood_risk * weights.mood +
        stress_risk * weights.stress +
        burnout_risk * weights.burnout
    )
    return _finalize(score)


def compute_stress_score(
    mood_score: int,
    focus_score: int,
    emotion_score: int,
    weights: StressWeights = DEFAULT_SCORING_CONFIG.stress_weights,
) -> int:
    """Combine the other three pillar scores. Must run after them."""
    score = (
        mood_score * weights.mood +
        focus_score * weights.focus +
        emotion_score * weights.emotion
    )
    return _finalize(score)
