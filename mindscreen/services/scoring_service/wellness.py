"""Wellness aggregator: inverts the weighted pillar risk index."""
from mindscreen.shared.models import SubScores

from .config import DEFAULT_SCORING_CONFIG, WellnessWeights
from .normalizers import bounded_score


def compute_risk_index(
    subscores: SubScores,
    weights: WellnessWeights = DEFAULT_SCORING_CONFIG.wellness_weights,
) -> float:
    return (
        subscores.stress * weights.stress +
        subscores.mood * weights.mood +
        subscores.focus * weights.focus +
        subscores.emotion * weights.emotion
    )


def compute_wellness_score(
    subscores: SubScores,
    weights: WellnessWeights = DEFAULT_SCORING_CONFIG.wellness_weights,
) -> int:
    """Overall wellness in [0, 100]; higher means lower composite risk."""
    risk_index = compute_risk_index(subscores, weights)
    return bounded_score(100 - risk_index, saturate_nan_to=0)
