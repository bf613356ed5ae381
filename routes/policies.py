"""
Policy configuration routes.

Handles:
- GET /api/v1/policies - Current policy and pricing configuration
- PUT /api/v1/policies - Replace some options (hot reload)

A reload builds a new immutable PolicyConfiguration; requests already in
flight keep the snapshot they started with.
"""

from flask import Blueprint, current_app, request
from werkzeug.exceptions import BadRequest

from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

policies_bp = Blueprint("policies", __name__, url_prefix="/api/v1/policies")


@policies_bp.route("", methods=["GET"])
def get_policies():
    """Return the active configuration."""
    return current_app.config["POLICY_CONFIGURATION"].to_dict()


@policies_bp.route("", methods=["PUT"])
def update_policies():
    """
    Hot-reload policy options.

    Body: {"force_duplex": false, "color_page_ratio_threshold": "0.2", ...}
    Unknown options or out-of-range values are rejected and nothing changes.
    """
    overrides = request.get_json(silent=True)
    if not isinstance(overrides, dict) or not overrides:
        raise BadRequest("Request body must be a non-empty JSON object")

    current = current_app.config["POLICY_CONFIGURATION"]
    updated = current.with_overrides(overrides)

    current_app.config["POLICY_CONFIGURATION"] = updated
    current_app.config["STATISTICS_SERVICE"].update_configuration(updated)

    logger.info(f"Policy configuration reloaded: {sorted(overrides)}")
    return updated.to_dict()
