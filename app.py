"""
PrintCostLedger - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration (.env + Config class) and sets up logging
2. Builds the policy configuration snapshot (fail-fast on bad values)
3. Creates the record store, statistics cache and services
4. Registers route blueprints

ARCHITECTURE:
    Request threads (Flask)
    ├── POST /api/v1/print-jobs -> PrintJobService (record owned by the request)
    └── GET  statistics         -> StatisticsService -> StatisticsCache (locked)

The statistics cache is the only state shared between requests.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from flask import Flask

from logging_config import setup_logging, get_logger
from core.exceptions import ConfigurationError
from core.record_store import InMemoryRecordStore, RecordStore
from core.stats_cache import StatisticsCache
from models.policy import PolicyConfiguration
from modules.policy_engine import PolicyEngine
from services.print_job_service import PrintJobService
from services.statistics_service import StatisticsService
from routes import register_blueprints


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def create_app(
    config_object="config.Config",
    store: Optional[RecordStore] = None
) -> Flask:
    """
    Application factory - creates and configures Flask app.

    Args:
        config_object: Config class or its import path
        store: Record store to use (in-memory store by default)

    Returns:
        Configured Flask application

    Raises:
        ConfigurationError: If a policy or pricing option is invalid
    """
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )

    # Set Flask's logger to use our configured logger
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting PrintCostLedger in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # POLICY CONFIGURATION (FAIL-FAST)
    # =========================================================================

    try:
        policy = PolicyConfiguration.from_mapping(app.config)
    except ConfigurationError as e:
        logger.error(f"FATAL: Cannot start application - {e}")
        raise

    app.config["POLICY_CONFIGURATION"] = policy
    logger.info(f"Policy configuration loaded: {policy.to_dict()}")

    # =========================================================================
    # SERVICES INITIALIZATION
    # =========================================================================

    if store is None:
        store = InMemoryRecordStore()

    stats_cache = StatisticsCache(ttl_seconds=app.config.get("STATS_CACHE_TTL_SECONDS", 60.0))

    app.config["JOB_SERVICE"] = PrintJobService(
        store,
        policy_engine=PolicyEngine(),
        stats_cache=stats_cache,
        invalidate_on_write=app.config.get("STATS_INVALIDATE_ON_WRITE", False),
    )
    app.config["STATISTICS_SERVICE"] = StatisticsService(store, stats_cache, policy)
    logger.info("Job and statistics services initialized")

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
