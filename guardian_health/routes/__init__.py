# guardian_health/routes/__init__.py
"""
This module imports all blueprint instances from the route modules
and provides a function to register them on the Flask app.
"""
import logging
from flask import Flask

from .health_check_routes import health_check_bp
from .guardian_prover_routes import guardian_prover_bp
from .status_routes import status_bp

logger = logging.getLogger(__name__)


def register_routes(app: Flask):
    """Register all blueprints with the Flask app."""
    app.register_blueprint(health_check_bp)
    app.register_blueprint(guardian_prover_bp)
    app.register_blueprint(status_bp)

    logger.info("✅ All application blueprints registered.")
