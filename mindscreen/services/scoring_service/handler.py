"""Screening handler - scores a submission and stores the result.

Parses the request body, runs the scoring pipeline, assembles the
ScreeningRecord and appends it to the injected store exactly once.
"""
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Tuple

from mindscreen.shared.models import EscalationTier, RawSubmission, ScreeningRecord
from mindscreen.shared.utils import hash_pii
from .intake import parse_submission, resolve_identity
from .pipeline import ScoringOutcome, ScoringPipeline
from .screening_repository import ScreeningStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def assemble_record(
    submission: RawSubmission,
    outcome: ScoringOutcome,
    user_id: Optional[str],
    created_at: datetime,
) -> ScreeningRecord:
    """Package inputs and computed values into the record to persist.

    user_profile is transient and left out.
    """
    return ScreeningRecord(
        user_id=user_id,
        created_at=created_at,
        phq4_total=submission.phq4_total,
        pss4_total=submission.pss4_total,
        burnout_score=submission.burnout_score,
        focus_game=submission.focus_game,
        emotion_game=submission.emotion_game,
        subscores=outcome.subscores,
        wellness_score=outcome.result.wellness_score,
        tier=outcome.result.tier,
        emergency_flag=submission.emergency_flag,
    )


class ScreeningHandler:
    """Scores screening submissions and hands them to storage."""

    def __init__(
        self,
        store: ScreeningStore,
        pipeline: Optional[ScoringPipeline] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize handler with dependencies.

        Args:
            store: Where records are appended
            pipeline: Scoring pipeline (default config if omitted)
            clock: Source of created_at timestamps (injected for testing)
        """
        self.store = store
        self.pipeline = pipeline or ScoringPipeline()
        self.clock = clock

        logger.info(
            "SCREENING_HANDLER_INITIALIZED",
            extra={"store": type(store).__name__}
        )

    def score_and_save(
        self,
        data: Optional[Dict[str, Any]],
        subject_id: Optional[str] = None,
    ) -> Tuple[str, ScreeningRecord]:
        """Score a submission and persist the resulting record.

        Args:
            data: Request body (missing fields take defaults)
            subject_id: Authenticated subject, None for anonymous callers

        Returns:
            (storage_id, record)

        Raises:
            Whatever the store raises; nothing is retried or persisted partially.

        Logs:
            - SCREENING_SCORED: After scoring
            - SCREENING_TIER_CRISIS: Tier 3 outcomes (critical)
            - SCREENING_PERSISTED / SCREENING_PERSIST_FAILED
        """
        start_time = time.perf_counter()

        user_id = resolve_identity(subject_id)
        user_id_hash = hash_pii(user_id) if user_id else None

        submission = parse_submission(data, self.pipeline.config.input_defaults)
        outcome = self.pipeline.score(submission)
        record = assemble_record(submission, outcome, user_id, self.clock())

        latency_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            "SCREENING_SCORED",
            extra={
                "user_id_hash": user_id_hash,
                "focus": outcome.subscores.focus,
                "emotion": outcome.subscores.emotion,
                "mood": outcome.subscores.mood,
                "stress": outcome.subscores.stress,
                "wellness_score": record.wellness_score,
                "tier": int(record.tier),
                "tier_rule": outcome.rule_name,
                "latency_ms": latency_ms,
            }
        )

        if record.tier == EscalationTier.HIGH:
            logger.critical(
                "SCREENING_TIER_CRISIS",
                extra={
                    "user_id_hash": user_id_hash,
                    "tier_rule": outcome.rule_name,
                    "emergency_flag": record.emergency_flag,
                    "action": "FOLLOW_UP_REQUIRED",
                }
            )

        try:
            storage_id = self.store.append_record(record)
        except Exception as e:
            logger.error(
                "SCREENING_PERSIST_FAILED",
                extra={
                    "user_id_hash": user_id_hash,
                    "tier": int(record.tier),
                    "error": str(e),
                }
            )
            raise

        logger.info(
            "SCREENING_PERSISTED",
            extra={
                "storage_id": storage_id,
                "user_id_hash": user_id_hash,
            }
        )

        return storage_id, record
