"""
Validation utilities for route handlers.

Provides a decorator for automatic request validation using Pydantic models.
"""

import logging
from functools import wraps
from typing import Type, TypeVar

from pydantic import BaseModel, ValidationError
from quart import request

from application.routes.common.response import APIResponse

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def validate_json(model: Type[T], allow_empty: bool = False):
    """
    Decorator to validate JSON request body against Pydantic model.

    Automatically parses and validates the request body, making validated
    data available via request.validated_data attribute.

    Args:
        model: Pydantic model class for validation
        allow_empty: Treat a missing body as an empty JSON object

    Example:
        >>> @validate_json(SendMessageRequest)
        >>> async def send_message(conversation_id):
        >>>     data = request.validated_data
        >>>     # data is now a validated SendMessageRequest instance

    Validation errors are automatically returned as 400 Bad Request with
    detailed error messages.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            json_data = await request.get_json(silent=True)

            if json_data is None:
                if not allow_empty:
                    return APIResponse.error(
                        "Request body required",
                        400,
                        details={"expected": "application/json"},
                    )
                json_data = {}

            if not isinstance(json_data, dict):
                return APIResponse.error("Request body must be a JSON object", 400)

            try:
                validated = model.model_validate(json_data)
            except ValidationError as e:
                errors = []
                for error in e.errors():
                    field = " -> ".join(str(loc) for loc in error["loc"])
                    errors.append(
                        {"field": field, "message": error["msg"], "type": error["type"]}
                    )

                logger.warning(f"Validation error in {func.__name__}: {errors}")

                return APIResponse.error(
                    "Validation failed", 400, details={"errors": errors}
                )

            request.validated_data = validated
            return await func(*args, **kwargs)

        return wrapper

    return decorator
