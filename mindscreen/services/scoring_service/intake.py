"""Submission intake: fill in defaults before any scorer runs.

Request bodies may omit fields, send nulls or send garbage. All of that
is resolved here, in one place, so the scorers can stay total.
"""
import logging
import math
from typing import Any, Dict, Optional, Union

from mindscreen.shared.models import EmotionGameMetrics, FocusGameMetrics, RawSubmission

from .config import DEFAULT_SCORING_CONFIG, InputDefaults

logger = logging.getLogger(__name__)

Number = Union[int, float]

_FALSE_STRINGS = frozenset({"false", "0", "no", "off", ""})

# Numeric inputs are capped to this magnitude so weighted sums stay finite.
MAX_INPUT_MAGNITUDE = 1e15


def _coerce_number(data: Dict[str, Any], key: str, default: Number) -> Number:
    """Read a bounded, finite number from data[key], falling back to default.

    Values beyond MAX_INPUT_MAGNITUDE are capped rather than defaulted, so an
    absurdly high questionnaire total still reads as high.
    """
    value = data.get(key)
    if value is None:
        return default

    if isinstance(value, bool):
        number = None
    elif isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            number = None
    else:
        number = None

    if number is None or (isinstance(number, float) and not math.isfinite(number)):
        logger.warning(
            "SUBMISSION_FIELD_DEFAULTED",
            extra={"field": key, "value_type": type(value).__name__}
        )
        return default

    if abs(number) > MAX_INPUT_MAGNITUDE:
        logger.warning(
            "SUBMISSION_FIELD_CAPPED",
            extra={"field": key, "value_type": type(value).__name__}
        )
        return MAX_INPUT_MAGNITUDE if number > 0 else -MAX_INPUT_MAGNITUDE

    if isinstance(number, float) and number.is_integer() and not isinstance(value, float):
        return int(number)
    return number


def _coerce_flag(value: Any) -> bool:
    """Read the emergency flag, failing toward escalation.

    Only explicit false values clear it: False, None, zero, and the
    strings in _FALSE_STRINGS. Any other value sets it.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    if isinstance(value, (int, float)):
        return value != 0
    return True


def _as_mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def parse_focus_game(
    data: Dict[str, Any],
    defaults: InputDefaults = DEFAULT_SCORING_CONFIG.input_defaults,
) -> FocusGameMetrics:
    """Build attention-game metrics from the game1 payload.

    A reaction time of 0 means the game did not measure one and takes
    the neutral baseline, same as a missing value.
    """
    median_rt = _coerce_number(data, "median_rt_ms", defaults.median_reaction_time_ms)
    if median_rt == 0:
        median_rt = defaults.median_reaction_time_ms

    return FocusGameMetrics(
        mean_error_rate=_coerce_number(data, "mean_error_rate", defaults.game_metric),
        median_reaction_time_ms=median_rt,
        reaction_time_sd_ms=_coerce_number(data, "rt_sd_ms", defaults.game_metric),
        dropoff_rate=_coerce_number(data, "dropoff_rate", defaults.game_metric),
    )


def parse_emotion_game(
    data: Dict[str, Any],
    defaults: InputDefaults = DEFAULT_SCORING_CONFIG.input_defaults,
) -> EmotionGameMetrics:
    """Build emotion-game metrics from the game2 payload."""
    return EmotionGameMetrics(
        negative_correct_rate=_coerce_number(data, "negative_correct_rate", defaults.game_metric),
        positive_correct_rate=_coerce_number(data, "positive_correct_rate", defaults.game_metric),
        avoidance_index=_coerce_number(data, "avoidance_index", defaults.game_metric),
    )


def parse_submission(
    data: Optional[Dict[str, Any]],
    defaults: InputDefaults = DEFAULT_SCORING_CONFIG.input_defaults,
) -> RawSubmission:
    """Map a partially-populated request body onto a full RawSubmission.

    Never raises. Out-of-range values are kept as sent; the scorers
    clamp them.

    Args:
        data: Request body using wire keys (phq4_total, game1, ...)
        defaults: Values for missing or invalid fields

    Returns:
        RawSubmission with every field populated
    """
    data = _as_mapping(data)

    emergency_value = data.get("emergency_flag")
    emergency_flag = (
        defaults.emergency_flag if emergency_value is None else _coerce_flag(emergency_value)
    )

    return RawSubmission(
        phq4_total=_coerce_number(data, "phq4_total", defaults.phq4_total),
        pss4_total=_coerce_number(data, "pss4_total", defaults.pss4_total),
        burnout_score=_coerce_number(data, "burnout", defaults.burnout_score),
        focus_game=parse_focus_game(_as_mapping(data.get("game1")), defaults),
        emotion_game=parse_emotion_game(_as_mapping(data.get("game2")), defaults),
        emergency_flag=emergency_flag,
        user_profile=_as_mapping(data.get("userProfile")),
    )


def resolve_identity(subject_id: Optional[str]) -> Optional[str]:
    """Turn an authenticated subject id into the stored user_id.

    Returns:
        "auth:<subject_id>", or None when the caller is anonymous
    """
    if subject_id is None:
        return None
    subject_id = subject_id.strip()
    if not subject_id:
        return None
    return f"auth:{subject_id}"
