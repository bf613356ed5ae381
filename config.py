"""
Configuration for PrintCostLedger.

Every option can be overridden from the environment or a .env file.
Policy and pricing options are parsed and validated into a
PolicyConfiguration by the app factory; a bad value stops startup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
# This must happen before the Config class is defined
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"

    # ==========================================================================
    # Cost-saving policies
    # ==========================================================================
    # POLICY_COLOR_PAGE_RATIO_THRESHOLD: jobs whose color pages make up at
    #   most this fraction of the total are printed black/white (0.0 - 1.0)
    # POLICY_FORCE_DUPLEX: single-sided jobs of 2+ pages go duplex, except
    #   on A3 and PHOTO paper
    # ==========================================================================
    POLICY_AUTO_CONVERT_COLOR_TO_BW = os.environ.get("POLICY_AUTO_CONVERT_COLOR_TO_BW", "true")
    POLICY_FORCE_DUPLEX = os.environ.get("POLICY_FORCE_DUPLEX", "true")
    POLICY_COLOR_PAGE_RATIO_THRESHOLD = os.environ.get("POLICY_COLOR_PAGE_RATIO_THRESHOLD", "0.1")

    # ==========================================================================
    # Pricing (minor currency units per page)
    # ==========================================================================
    # Formula: bw_cost = bw_pages x BW - total_pages x DUPLEX_DISCOUNT (duplex only)
    #          color_cost = color_pages x COLOR
    # Savings reported per converted page / per sheet saved by duplex.
    # ==========================================================================
    COST_PER_PAGE_BW = os.environ.get("COST_PER_PAGE_BW", "30")
    COST_PER_PAGE_COLOR = os.environ.get("COST_PER_PAGE_COLOR", "150")
    COST_DUPLEX_DISCOUNT_PER_PAGE = os.environ.get("COST_DUPLEX_DISCOUNT_PER_PAGE", "20")
    SAVING_COLOR_CONVERSION_PER_PAGE = os.environ.get("SAVING_COLOR_CONVERSION_PER_PAGE", "120")
    SAVING_DUPLEX_PER_PAGE = os.environ.get("SAVING_DUPLEX_PER_PAGE", "30")

    # ==========================================================================
    # Statistics cache
    # ==========================================================================
    # STATS_CACHE_TTL_SECONDS: lifetime of cached aggregates. Keep it short -
    #   windows ending "now" go stale as soon as a new job is recorded.
    # STATS_INVALIDATE_ON_WRITE: drop cached windows containing each new job
    # ==========================================================================
    STATS_CACHE_TTL_SECONDS = float(os.environ.get("STATS_CACHE_TTL_SECONDS", "60"))
    STATS_INVALIDATE_ON_WRITE = os.environ.get("STATS_INVALIDATE_ON_WRITE", "0") == "1"


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    ENVIRONMENT = "production"


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    ENVIRONMENT = "testing"
