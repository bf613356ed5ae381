"""
API routes shared by every blueprint.

Handles:
- /health - Health check endpoint
- JSON error bodies for application errors and bad requests
"""

from flask import Blueprint, current_app
from werkzeug.exceptions import BadRequest

from core.exceptions import (
    PrintCostLedgerError,
    PreconditionViolation,
    QueryRangeError,
    ConfigurationError,
    StoreUnavailableError,
)
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint with service status."""
    health_status = {
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "checks": {}
    }

    job_service = current_app.config.get("JOB_SERVICE")
    if job_service:
        health_status["checks"]["job_service"] = "ok"
    else:
        health_status["checks"]["job_service"] = "not_available"
        health_status["status"] = "degraded"

    statistics_service = current_app.config.get("STATISTICS_SERVICE")
    if statistics_service:
        cache = statistics_service.cache
        health_status["checks"]["statistics_service"] = "ok"
        health_status["checks"]["statistics_cache"] = {
            "entries": len(cache),
            "hits": cache.hits,
            "misses": cache.misses,
            "ttl_seconds": cache.ttl_seconds,
        }
    else:
        health_status["checks"]["statistics_service"] = "not_available"
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@api_bp.app_errorhandler(PreconditionViolation)
@api_bp.app_errorhandler(QueryRangeError)
@api_bp.app_errorhandler(ConfigurationError)
def handle_request_error(e: PrintCostLedgerError):
    logger.warning(f"Rejected request: {e}")
    return e.to_dict(), 400


@api_bp.app_errorhandler(StoreUnavailableError)
def handle_store_unavailable(e: StoreUnavailableError):
    logger.error(f"Record store unavailable: {e}")
    return e.to_dict(), 503


@api_bp.app_errorhandler(BadRequest)
def handle_bad_request(e: BadRequest):
    return {"error": e.description, "type": "BadRequest", "details": {}}, 400
