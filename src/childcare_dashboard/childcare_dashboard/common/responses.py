from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from flask import Flask, jsonify

from ..core.exceptions import AuthenticationError, DomainError, NotFoundError, StoreError, ValidationError

logger = logging.getLogger(__name__)

STORE_ERROR_MESSAGE = "The record store is unavailable, please try again"


def ok(data: Any = None, status: int = 200):
    return jsonify({"success": True, "data": data}), status


def error_response(error: DomainError):
    if isinstance(error, ValidationError):
        status, message = 400, str(error)
    elif isinstance(error, AuthenticationError):
        status, message = 401, str(error)
    elif isinstance(error, NotFoundError):
        status, message = 404, str(error)
    elif isinstance(error, StoreError):
        status, message = 502, STORE_ERROR_MESSAGE
    else:
        status, message = 400, str(error)
    return jsonify({"success": False, "message": message}), status


def result_response(result, status: int = 200, serialize: Optional[Callable[[Any], Any]] = None):
    """Render a replica ``MutationResult``."""
    if not result.ok:
        return error_response(result.error)
    value = result.value
    if serialize is not None:
        value = serialize(value)
    elif value is not None:
        value = value.to_dict()
    return ok(value, status)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return error_response(e)

    @app.errorhandler(404)
    def handle_not_found(_e):
        return jsonify({"success": False, "message": "Not found"}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(_e):
        return jsonify({"success": False, "message": "Method not allowed"}), 405

    @app.errorhandler(500)
    def handle_internal_error(e):
        logger.error("unhandled error: %s", getattr(e, "original_exception", e))
        return jsonify({"success": False, "message": "Internal server error"}), 500
