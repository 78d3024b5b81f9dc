"""Screening result persistence.

ScreeningStore is the one seam between scoring and storage: the handler
only ever calls append_record(). Records are append-only.
"""
import json
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import timezone
from typing import Any, Dict, List, Optional

from mindscreen.shared.database import BaseRepository, ConnectionManager
from mindscreen.shared.models import (
    EmotionGameMetrics,
    EscalationTier,
    FocusGameMetrics,
    ScreeningRecord,
    SubScores,
)

logger = logging.getLogger(__name__)


def new_storage_id() -> str:
    return f"scr_{uuid.uuid4().hex[:12]}"


class ScreeningStore(ABC):
    """Durable storage for screening records."""

    @abstractmethod
    def append_record(self, record: ScreeningRecord) -> str:
        """Store a record and return its storage id."""
        pass


class InMemoryScreeningStore(ScreeningStore):
    """Dict-backed store for development and tests.

    Not for production traffic: records live only as long as the process,
    the dict grows without bound, and appends are not synchronized across
    threads. Use ScreeningRepository behind a real server.
    """

    def __init__(self):
        self._records: Dict[str, ScreeningRecord] = {}

    def append_record(self, record: ScreeningRecord) -> str:
        storage_id = new_storage_id()
        self._records[storage_id] = record

        logger.info(
            "SCREENING_RECORD_APPENDED",
            extra={"storage_id": storage_id, "backend": "memory", "tier": int(record.tier)}
        )
        return storage_id

    def get(self, storage_id: str) -> Optional[ScreeningRecord]:
        return self._records.get(storage_id)

    def __len__(self) -> int:
        return len(self._records)


SCREENING_RESULTS_DDL = """
    CREATE TABLE IF NOT EXISTS {table} (
        id TEXT PRIMARY KEY,
        user_id TEXT,
        phq4_total DOUBLE PRECISION NOT NULL,
        pss4_total DOUBLE PRECISION NOT NULL,
        burnout DOUBLE PRECISION NOT NULL,
        game1_json JSONB NOT NULL,
        game2_json JSONB NOT NULL,
        focus_score SMALLINT NOT NULL,
        emotion_score SMALLINT NOT NULL,
        mood_score SMALLINT NOT NULL,
        stress_score SMALLINT NOT NULL,
        wellness_score SMALLINT NOT NULL,
        tier SMALLINT NOT NULL CHECK (tier IN (1, 2, 3)),
        emergency_flag BOOLEAN NOT NULL,
        created_at TIMESTAMPTZ NOT NULL
    )
"""


class ScreeningRepository(BaseRepository[ScreeningRecord], ScreeningStore):
    """PostgreSQL store for screening results.

    Expected columns, in order:
        0: id
        1: user_id
        2: phq4_total
        3: pss4_total
        4: burnout
        5: game1_json
        6: game2_json
        7: focus_score
        8: emotion_score
        9: mood_score
        10: stress_score
        11: wellness_score
        12: tier
        13: emergency_flag
        14: created_at
    """

    def __init__(
        self,
        connection_manager: ConnectionManager,
        table_name: str = "screening_results",
    ):
        super().__init__(connection_manager, table_name)

    def create_table(self) -> None:
        """Create the results table if it does not exist."""
        with self.connection_manager.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(SCREENING_RESULTS_DDL.format(table=self.table_name))
                conn.commit()

        logger.info("SCREENING_TABLE_READY", extra={"table_name": self.table_name})

    def _row_to_entity(self, row: tuple) -> ScreeningRecord:
        game1 = json.loads(row[5]) if isinstance(row[5], str) else row[5]
        game2 = json.loads(row[6]) if isinstance(row[6], str) else row[6]

        return ScreeningRecord(
            user_id=row[1],
            created_at=row[14],
            phq4_total=row[2],
            pss4_total=row[3],
            burnout_score=row[4],
            focus_game=FocusGameMetrics(
                mean_error_rate=game1["mean_error_rate"],
                median_reaction_time_ms=game1["median_rt_ms"],
                reaction_time_sd_ms=game1["rt_sd_ms"],
                dropoff_rate=game1["dropoff_rate"],
            ),
            emotion_game=EmotionGameMetrics(**game2),
            subscores=SubScores(
                focus=row[7],
                emotion=row[8],
                mood=row[9],
                stress=row[10],
            ),
            wellness_score=row[11],
            tier=EscalationTier(row[12]),
            emergency_flag=row[13],
        )

    def _entity_to_params(self, entity: ScreeningRecord) -> Dict[str, Any]:
        created_at = entity.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        return {
            "user_id": entity.user_id,
            "phq4_total": entity.phq4_total,
            "pss4_total": entity.pss4_total,
            "burnout": entity.burnout_score,
            "game1_json": json.dumps(entity.focus_game.to_dict()),
            "game2_json": json.dumps(entity.emotion_game.to_dict()),
            "focus_score": entity.subscores.focus,
            "emotion_score": entity.subscores.emotion,
            "mood_score": entity.subscores.mood,
            "stress_score": entity.subscores.stress,
            "wellness_score": entity.wellness_score,
            "tier": int(entity.tier),
            "emergency_flag": entity.emergency_flag,
            "created_at": created_at,
        }

    def append_record(self, record: ScreeningRecord) -> str:
        """Insert one record atomically and return its generated id."""
        storage_id = self.insert(new_storage_id(), record)

        logger.info(
            "SCREENING_RECORD_APPENDED",
            extra={
                "storage_id": storage_id,
                "backend": "postgres",
                "table_name": self.table_name,
                "tier": int(record.tier),
            }
        )
        return storage_id

    def find_by_user(
        self,
        user_id: str,
        limit: int = 50,
    ) -> List[ScreeningRecord]:
        """Find records for a user, newest first.

        Args:
            user_id: Resolved identity ("auth:<uid>")
            limit: Maximum records to return
        """
        with self.connection_manager.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT * FROM {self.table_name}
                    WHERE user_id = %s
                    ORDER BY created_at DESC
                    LIMIT %s
                    """,
                    (user_id, limit)
                )
                rows = cur.fetchall()

                return [self._row_to_entity(row) for row in rows]
