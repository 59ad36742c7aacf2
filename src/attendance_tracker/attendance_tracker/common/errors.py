from __future__ import annotations

from flask import Flask, jsonify
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, StoreError
from ..core.logging import get_logger

logger = get_logger(__name__)


def error_response(message: str, status_code: int):
    return jsonify({"success": False, "message": message}), status_code


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if isinstance(e, StoreError):
            logger.error("Store error: %s", e, exc_info=e)
            return error_response("Server error", e.status_code)
        return error_response(str(e), e.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return error_response(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error")
        return error_response("Server error", 500)


def register_jwt_handlers(jwt: JWTManager) -> None:
    @jwt.unauthorized_loader
    def missing_token(reason: str):
        return error_response("Access token required", 401)

    @jwt.invalid_token_loader
    def invalid_token(reason: str):
        return error_response("Invalid token", 401)

    @jwt.expired_token_loader
    def expired_token(jwt_header: dict, jwt_payload: dict):
        return error_response("Token expired", 401)
