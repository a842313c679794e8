import http
from flask import Blueprint, current_app, jsonify

guardian_prover_bp = Blueprint("guardian_prover", __name__)


@guardian_prover_bp.route("/guardianProvers", methods=["GET"])
def list_guardian_provers():
    """Lists the known guardian provers with their health check counts."""
    guardian_provers = current_app.extensions["guardian_provers"]
    return jsonify({
        "count": len(guardian_provers),
        "guardianProvers": guardian_provers.to_list(),
    }), http.HTTPStatus.OK
