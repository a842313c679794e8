import http
import json
import logging
from functools import wraps
from typing import Callable, Type

from flask import g, jsonify, request
from pydantic import BaseModel, ValidationError
from werkzeug.exceptions import BadRequest

from guardian_health.metrics import health_check_requests

logger = logging.getLogger(__name__)


def validate_with(schema: Type[BaseModel]) -> Callable:
    """
    Decorator for Flask routes that validates JSON request data against a Pydantic schema.

    Usage:
        @bp.route('/endpoint', methods=['POST'])
        @validate_with(MySchema)
        def endpoint():
            validated_data = g.validated_data
            ...

    Malformed JSON and schema violations both produce a 400 with the
    parse error in the body; the wrapped view is not called.
    """
    def decorator(f):
        @wraps(f)
        def wrapped(*args, **kwargs):
            try:
                json_data = request.get_json(force=True)
                g.validated_data = schema.model_validate(json_data)
            except ValidationError as e:
                logger.warning(f"Request validation error: {e.errors(include_url=False)}")
                health_check_requests.labels("bad_request").inc()
                return jsonify({
                    "error": "ValidationError",
                    "details": json.loads(e.json(include_url=False)),
                }), http.HTTPStatus.BAD_REQUEST
            except BadRequest as e:
                logger.warning(f"Malformed JSON request: {e.description}")
                health_check_requests.labels("bad_request").inc()
                return jsonify({
                    "error": "MalformedRequest",
                    "message": "Request body is not valid JSON",
                }), http.HTTPStatus.BAD_REQUEST

            return f(*args, **kwargs)
        return wrapped
    return decorator
