"""
Flask route blueprints for PrintCostLedger.

- print_jobs: job submission, job listing and statistics (/api/v1/print-jobs)
- policies: read and hot-reload the policy configuration (/api/v1/policies)
- api: health check and JSON error handlers

Each blueprint is registered with the Flask app in create_app().
"""

from .print_jobs import print_jobs_bp
from .policies import policies_bp
from .api import api_bp

__all__ = [
    "print_jobs_bp",
    "policies_bp",
    "api_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(print_jobs_bp)
    app.register_blueprint(policies_bp)
    app.register_blueprint(api_bp)
