"""
Centralized error handling middleware.

Provides consistent error handling across all routes with automatic
error logging and standardized response format.
"""

import logging

from pydantic import ValidationError
from quart import Quart
from werkzeug.exceptions import HTTPException

from application.routes.common.response import APIResponse
from common.exception import GatewayError, NotFoundError
from common.utils.jwt_utils import TokenExpiredError, TokenValidationError

logger = logging.getLogger(__name__)


def register_error_handlers(app: Quart) -> None:
    """
    Register centralized error handlers for the application.

    Handles:
    - NotFoundError → 404 Not Found
    - ValidationError (Pydantic) → 400 Bad Request
    - ValueError → 400 Bad Request
    - GatewayError → 500 Internal Server Error
    - TokenExpiredError → 401 Unauthorized
    - TokenValidationError → 401 Unauthorized
    - HTTPException (Werkzeug) → Appropriate status
    - Exception (Generic) → 500 Internal Server Error

    Example:
        >>> app = Quart(__name__)
        >>> register_error_handlers(app)
    """

    @app.errorhandler(NotFoundError)
    async def handle_not_found_error(error: NotFoundError):
        logger.info(f"Not found: {error.resource} {error.resource_id}")
        return APIResponse.not_found(error.resource)

    @app.errorhandler(ValidationError)
    async def handle_validation_error(error: ValidationError):
        """
        Handle Pydantic validation errors.

        Returns 400 Bad Request with detailed validation errors.
        """
        errors = []
        for err in error.errors():
            field = " -> ".join(str(loc) for loc in err["loc"])
            errors.append({"field": field, "message": err["msg"], "type": err["type"]})

        logger.warning(f"Validation error: {errors}")
        return APIResponse.error("Validation failed", 400, details={"errors": errors})

    @app.errorhandler(ValueError)
    async def handle_value_error(error: ValueError):
        logger.warning(f"Value error: {error}")
        return APIResponse.error(str(error), 400)

    @app.errorhandler(GatewayError)
    async def handle_gateway_error(error: GatewayError):
        logger.error(f"Model gateway error: {error}", exc_info=error)
        return APIResponse.internal_error("Model request failed")

    @app.errorhandler(TokenExpiredError)
    async def handle_token_expired(error: TokenExpiredError):
        logger.warning(f"Token expired: {error}")
        return APIResponse.unauthorized("Token has expired")

    @app.errorhandler(TokenValidationError)
    async def handle_token_invalid(error: TokenValidationError):
        logger.warning(f"Invalid token: {error}")
        return APIResponse.unauthorized("Invalid or malformed token")

    @app.errorhandler(HTTPException)
    async def handle_http_exception(error: HTTPException):
        """
        Handle Werkzeug HTTP exceptions.

        Preserves the original HTTP status code.
        """
        logger.info(f"HTTP exception: {error.code} - {error.description}")
        if error.code == 404:
            return APIResponse.not_found("Endpoint")
        return APIResponse.error(error.name, error.code or 500)

    @app.errorhandler(Exception)
    async def handle_generic_exception(error: Exception):
        """
        Handle all uncaught exceptions.

        Returns 500 Internal Server Error.
        Logs full stack trace for debugging.
        """
        logger.exception(f"Unhandled exception: {error}")
        return APIResponse.internal_error("An unexpected error occurred")
