"""
Response utilities for standardized API responses.

Provides consistent response formatting across all routes.
"""

from typing import Any, AsyncIterable, Tuple

from quart import Response, jsonify


class APIResponse:
    """
    Standardized API response helper.

    Ensures consistent response format across all endpoints.
    """

    @staticmethod
    def success(data: Any, status: int = 200) -> Tuple[Response, int]:
        """
        Create a successful response.

        Args:
            data: Response data (dict, list, or serializable object)
            status: HTTP status code (default: 200)

        Example:
            >>> return APIResponse.success({"status": "ok"})
            >>> return APIResponse.success(conversation, 201)
        """
        return jsonify(data), status

    @staticmethod
    def no_content() -> Tuple[str, int]:
        """Create an empty 204 response."""
        return "", 204

    @staticmethod
    def error(message: str, status: int = 400, details: Any = None) -> Tuple[Response, int]:
        """
        Create an error response.

        Args:
            message: Error message
            status: HTTP status code (default: 400)
            details: Additional error details (optional)

        Example:
            >>> return APIResponse.error("Invalid request", 400)
            >>> return APIResponse.error("Validation failed", 400, details=validation_errors)
        """
        error_data = {"error": message}
        if details is not None:
            error_data["details"] = details
        return jsonify(error_data), status

    @staticmethod
    def not_found(resource: str = "Resource") -> Tuple[Response, int]:
        """
        Create a 404 Not Found response.

        Example:
            >>> return APIResponse.not_found("Conversation")
        """
        return APIResponse.error(f"{resource} not found", 404)

    @staticmethod
    def unauthorized(message: str = "Unauthorized") -> Tuple[Response, int]:
        """Create a 401 Unauthorized response."""
        return APIResponse.error(message, 401)

    @staticmethod
    def internal_error(message: str = "Internal server error") -> Tuple[Response, int]:
        """Create a 500 Internal Server Error response."""
        return APIResponse.error(message, 500)

    @staticmethod
    def event_stream(event_gen: AsyncIterable[str]) -> Response:
        """Build SSE response with proper headers."""
        return Response(
            event_gen,
            mimetype="text/event-stream",
            headers={
                "Cache-Control": "no-cache, no-transform",
                "X-Accel-Buffering": "no",
                "Connection": "keep-alive",
            },
        )
