"""Tests for ScreeningHandler: scoring, record assembly and persistence."""
import logging
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from mindscreen.shared.models import EscalationTier, ScreeningRecord
from mindscreen.shared.utils import configure_pii_salt
from mindscreen.services.scoring_service.handler import ScreeningHandler
from mindscreen.services.scoring_service.screening_repository import (
    InMemoryScreeningStore,
    ScreeningStore,
)

FIXED_NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def setup_pii_salt():
    configure_pii_salt("test_salt_that_is_at_least_32_characters_long")


@pytest.fixture
def store():
    return InMemoryScreeningStore()


@pytest.fixture
def handler(store):
    return ScreeningHandler(store=store, clock=lambda: FIXED_NOW)


class TestScoreAndSave:
    def test_returns_storage_id_and_record(self, handler, store):
        storage_id, record = handler.score_and_save({})

        assert storage_id.startswith("scr_")
        assert store.get(storage_id) is record
        assert len(store) == 1

    def test_record_contents(self, handler):
        _, record = handler.score_and_save({"phq4_total": 7, "pss4_total": 3})

        assert isinstance(record, ScreeningRecord)
        assert record.created_at == FIXED_NOW
        assert record.phq4_total == 7
        assert record.pss4_total == 3
        assert record.burnout_score == 0
        assert record.focus_game.median_reaction_time_ms == 400
        assert record.tier == EscalationTier.MODERATE
        assert record.emergency_flag is False

    def test_authenticated_identity(self, handler):
        _, record = handler.score_and_save({}, subject_id="uid_42")
        assert record.user_id == "auth:uid_42"

    def test_anonymous_identity(self, handler):
        _, record = handler.score_and_save({})
        assert record.user_id is None

    def test_each_submission_appends_new_record(self, handler, store):
        first_id, _ = handler.score_and_save({})
        second_id, _ = handler.score_and_save({})

        assert first_id != second_id
        assert len(store) == 2

    def test_crisis_requires_follow_up(self, handler):
        _, record = handler.score_and_save({"emergency_flag": True})

        assert record.tier == EscalationTier.HIGH
        assert record.requires_follow_up is True


class TestRecordSerialization:
    def test_document_shape(self, handler):
        _, record = handler.score_and_save(
            {"phq4_total": 2, "userProfile": {"nickname": "sam"}},
            subject_id="uid_1",
        )
        doc = record.to_dict()

        assert set(doc) == {
            "user_id", "created_at", "phq4_total", "pss4_total", "burnout",
            "game1", "game2", "subscores", "wellness_score", "tier", "emergency_flag",
        }
        assert doc["user_id"] == "auth:uid_1"
        assert doc["created_at"] == "2026-10-19T09:30:00+00:00"
        assert doc["game1"]["median_rt_ms"] == 400
        assert set(doc["subscores"]) == {"stress", "mood", "focus", "emotion"}
        assert isinstance(doc["tier"], int)

    def test_user_profile_not_persisted(self, handler):
        _, record = handler.score_and_save({"userProfile": {"nickname": "sam"}})
        assert "sam" not in repr(record.to_dict())


class TestPersistenceFailure:
    def test_store_error_propagates_unmodified(self):
        error = ConnectionError("database unavailable")
        store = MagicMock(spec=ScreeningStore)
        store.append_record.side_effect = error
        handler = ScreeningHandler(store=store)

        with pytest.raises(ConnectionError) as exc_info:
            handler.score_and_save({"phq4_total": 3})

        assert exc_info.value is error
        store.append_record.assert_called_once()

    def test_store_called_once_with_assembled_record(self):
        store = MagicMock(spec=ScreeningStore)
        store.append_record.return_value = "scr_external"
        handler = ScreeningHandler(store=store)

        storage_id, record = handler.score_and_save({})

        assert storage_id == "scr_external"
        store.append_record.assert_called_once_with(record)


class TestLogging:
    def test_crisis_logged_as_critical(self, handler, caplog):
        with caplog.at_level(logging.INFO):
            handler.score_and_save({"phq4_total": 11}, subject_id="uid_9")

        crisis = [r for r in caplog.records if r.getMessage() == "SCREENING_TIER_CRISIS"]
        assert len(crisis) == 1
        assert crisis[0].levelno == logging.CRITICAL
        assert crisis[0].tier_rule == "severe_self_report"

    def test_identity_never_logged_raw(self, handler, caplog):
        with caplog.at_level(logging.INFO):
            handler.score_and_save({}, subject_id="uid_secret")

        for record in caplog.records:
            assert "uid_secret" not in repr(record.__dict__)
