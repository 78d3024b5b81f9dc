"""Scoring Service HTTP handler - screening submission endpoint.

Thin transport around ScreeningHandler. Identity arrives from the
upstream gateway in the X-Authenticated-User header; this service does
no authentication of its own.
"""
import logging
from typing import Optional, Tuple

from flask import Flask, current_app, jsonify, request

from mindscreen.shared.database import ConnectionManager
from mindscreen.shared.utils import configure_pii_salt
from .config import ServiceConfig
from .handler import ScreeningHandler
from .screening_repository import InMemoryScreeningStore, ScreeningRepository

logger = logging.getLogger(__name__)

IDENTITY_HEADER = "X-Authenticated-User"


def build_handler(
    service_config: ServiceConfig,
) -> Tuple[ScreeningHandler, Optional[ConnectionManager]]:
    """Construct the handler and its store from service config."""
    if service_config.storage_backend == "postgres":
        connection_manager = ConnectionManager(service_config.database)
        store = ScreeningRepository(connection_manager, service_config.table_name)
        return ScreeningHandler(store=store), connection_manager

    return ScreeningHandler(store=InMemoryScreeningStore()), None


def create_app(
    handler: Optional[ScreeningHandler] = None,
    connection_manager: Optional[ConnectionManager] = None,
    service_config: Optional[ServiceConfig] = None,
) -> Flask:
    """Create the Flask app.

    Args:
        handler: Pre-built handler (tests inject one with a fake store)
        connection_manager: Database manager checked by /ready
        service_config: Defaults to ServiceConfig.from_env()
    """
    service_config = service_config or ServiceConfig.from_env()
    configure_pii_salt(service_config.pii_salt)

    if handler is None:
        handler, connection_manager = build_handler(service_config)

    app = Flask(__name__)
    app.config["SCREENING_HANDLER"] = handler
    app.config["CONNECTION_MANAGER"] = connection_manager
    app.config["STORAGE_BACKEND"] = service_config.storage_backend

    app.add_url_rule("/health", view_func=health, methods=["GET"])
    app.add_url_rule("/ready", view_func=ready, methods=["GET"])
    app.add_url_rule("/screening/score", view_func=score_screening, methods=["POST"])

    logger.info(
        "SCORING_SERVICE_APP_CREATED",
        extra={"storage_backend": service_config.storage_backend}
    )
    return app


def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "scoring-service",
    }), 200


def ready():
    """Readiness check, including the database when one is configured."""
    connection_manager = current_app.config.get("CONNECTION_MANAGER")
    storage = current_app.config.get("STORAGE_BACKEND")

    if connection_manager is None:
        return jsonify({"status": "ready", "storage": storage}), 200

    if not connection_manager.is_initialized:
        try:
            connection_manager.initialize()
        except Exception as e:
            logger.error("SCORING_SERVICE_NOT_READY", extra={"error": str(e)})
            return jsonify({"status": "not_ready", "storage": storage}), 503

    database = connection_manager.health_check()
    if not database.get("healthy"):
        return jsonify({"status": "not_ready", "storage": storage, "database": database}), 503

    return jsonify({"status": "ready", "storage": storage, "database": database}), 200


def score_screening():
    """Score a screening submission and store the result.

    Request Body:
        {
            "phq4_total": 4,
            "pss4_total": 6,
            "burnout": 1.5,
            "game1": {"mean_error_rate": 0.1, "median_rt_ms": 520, ...},
            "game2": {"negative_correct_rate": 0.8, ...},
            "emergency_flag": false,
            "userProfile": {}
        }

    Response:
        {
            "id": "scr_abc123",
            "doc": {"subscores": {...}, "wellness_score": 81, "tier": 1, ...}
        }
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Request body required"}), 400

    handler: ScreeningHandler = current_app.config["SCREENING_HANDLER"]
    subject_id = request.headers.get(IDENTITY_HEADER)

    logger.info(
        "SCREENING_REQUEST_RECEIVED",
        extra={
            "authenticated": bool(subject_id),
            "field_count": len(data),
        }
    )

    try:
        storage_id, record = handler.score_and_save(data, subject_id=subject_id)
    except Exception as e:
        logger.error("SCREENING_SCORE_ERROR", extra={"error": str(e)})
        return jsonify({"error": "Failed to score screening"}), 500

    return jsonify({
        "id": storage_id,
        "doc": record.to_dict(),
    }), 201


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    config = ServiceConfig.from_env()
    app = create_app(service_config=config)
    app.run(host="0.0.0.0", port=config.port, debug=False)
