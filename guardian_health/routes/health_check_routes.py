# guardian_health/routes/health_check_routes.py
import http
import logging

from flask import Blueprint, current_app, g, jsonify, request

from guardian_health.errors import (
    HealthCheckStoreError,
    InvalidSignatureError,
    UnknownGuardianProverError,
)
from guardian_health.metrics import health_check_requests
from guardian_health.services.health_check_service import SaveHealthCheckOpts
from guardian_health.signature import HEART_BEAT_MESSAGE, signature_to_guardian_prover
from guardian_health.utils.validation import validate_with
from guardian_health.validate.schemas import HealthCheckRequest

logger = logging.getLogger(__name__)

health_check_bp = Blueprint("health_check", __name__)


def _paging_args():
    page = request.args.get("page", 1, type=int)
    per_page = request.args.get("per_page", 20, type=int)
    return page, per_page


@health_check_bp.route("/healthCheck", methods=["POST"])
@validate_with(HealthCheckRequest)
def post_health_check():
    """
    Post a health check from a guardian prover.
    ---
    tags:
      - health checks
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [prover, heartBeatSignature]
          properties:
            prover:
              type: string
            heartBeatSignature:
              type: string
    responses:
      200:
        description: Heartbeat accepted; the body is null.
      400:
        description: Malformed body, untrusted signer or storage failure.
    """
    req: HealthCheckRequest = g.validated_data
    guardian_provers = current_app.extensions["guardian_provers"]
    service = current_app.extensions["health_check_service"]

    try:
        guardian_prover = signature_to_guardian_prover(
            HEART_BEAT_MESSAGE,
            req.heart_beat_signature,
            guardian_provers,
        )
    except (InvalidSignatureError, UnknownGuardianProverError) as e:
        logger.warning(f"Rejected heartbeat claiming prover {req.prover}: {e}")
        health_check_requests.labels("untrusted_signer").inc()
        return jsonify(e.to_dict()), http.HTTPStatus.BAD_REQUEST

    # Expected and recovered address stay identical until there is an auth
    # mechanism that lets us store heartbeats recovering to an unexpected address.
    try:
        service.save(SaveHealthCheckOpts(
            guardian_prover_id=guardian_prover.id,
            alive=True,
            expected_address=guardian_prover.address,
            recovered_address=guardian_prover.address,
            signed_response=req.heart_beat_signature,
        ))
    except HealthCheckStoreError as e:
        logger.error(f"Could not store health check for {guardian_prover.address}: {e}", exc_info=True)
        health_check_requests.labels("store_error").inc()
        return jsonify(e.to_dict()), http.HTTPStatus.BAD_REQUEST

    guardian_provers.increment_health_check(guardian_prover.address)
    health_check_requests.labels("success").inc()

    logger.info(f"successful health check guardianProver={guardian_prover.address}")

    return jsonify(None), http.HTTPStatus.OK


@health_check_bp.route("/healthchecks", methods=["GET"])
def get_health_checks():
    """
    Returns all health checks, newest first.
    Query Params: ?page=1&per_page=20
    """
    page, per_page = _paging_args()
    service = current_app.extensions["health_check_service"]
    try:
        result = service.get_all(page=page, per_page=per_page)
    except ValueError as e:
        return jsonify({"error": "Invalid pagination parameters", "message": str(e)}), http.HTTPStatus.BAD_REQUEST
    return jsonify(result), http.HTTPStatus.OK


@health_check_bp.route("/healthchecks/<int:guardian_prover_id>", methods=["GET"])
def get_health_checks_by_guardian_prover(guardian_prover_id: int):
    """
    Returns the health checks of one guardian prover, newest first.
    Query Params: ?page=1&per_page=20
    """
    if current_app.extensions["guardian_provers"].get(guardian_prover_id) is None:
        return jsonify({"error": "Guardian prover not found"}), http.HTTPStatus.NOT_FOUND

    page, per_page = _paging_args()
    service = current_app.extensions["health_check_service"]
    try:
        result = service.get_by_guardian_prover_id(guardian_prover_id, page=page, per_page=per_page)
    except ValueError as e:
        return jsonify({"error": "Invalid pagination parameters", "message": str(e)}), http.HTTPStatus.BAD_REQUEST
    return jsonify(result), http.HTTPStatus.OK


@health_check_bp.route("/liveness/<int:guardian_prover_id>", methods=["GET"])
def get_liveness(guardian_prover_id: int):
    """Returns the most recent health check of a guardian prover."""
    if current_app.extensions["guardian_provers"].get(guardian_prover_id) is None:
        return jsonify({"error": "Guardian prover not found"}), http.HTTPStatus.NOT_FOUND

    service = current_app.extensions["health_check_service"]
    latest = service.get_most_recent_by_guardian_prover_id(guardian_prover_id)
    if latest is None:
        return jsonify({"error": "No health checks recorded"}), http.HTTPStatus.NOT_FOUND
    return jsonify(latest), http.HTTPStatus.OK
