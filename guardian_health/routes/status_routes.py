# guardian_health/routes/status_routes.py
import http
from datetime import datetime, timezone

from flask import Blueprint, jsonify

from guardian_health import __version__
from guardian_health.metrics import render_latest

status_bp = Blueprint("status", __name__)


@status_bp.route("/health", methods=["GET"])
def health():
    """Liveness of the service itself."""
    return jsonify({
        "status": "ok",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }), http.HTTPStatus.OK


@status_bp.route("/metrics", methods=["GET"])
def metrics():
    payload, content_type = render_latest()
    return payload, http.HTTPStatus.OK, {"Content-Type": content_type}
