"""
JWT Token Utilities for Zak Chat

Provides functions for generating and validating the bearer tokens that
identify the calling user:
- Guest users (temporary sessions, 'guest.' prefixed ids)
- Authenticated users (tokens minted by the identity provider with the same secret)
"""

import logging
import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

logger = logging.getLogger(__name__)

GUEST_PREFIX = "guest."


class JWTConfig:
    """JWT configuration from environment variables."""

    def __init__(self):
        self.secret_key = os.getenv(
            "AUTH_SECRET_KEY", "dev-secret-key-change-in-production"
        )
        self.algorithm = "HS256"
        self.guest_token_expiry_weeks = 50  # 50 weeks for guest tokens
        self.user_token_expiry_hours = 24  # 24 hours for user tokens

        if self.secret_key == "dev-secret-key-change-in-production":
            logger.warning(
                "Using default AUTH_SECRET_KEY! "
                "Set AUTH_SECRET_KEY environment variable in production!"
            )


_config = JWTConfig()


class TokenValidationError(Exception):
    """Raised when token validation fails."""

    pass


class TokenExpiredError(Exception):
    """Raised when token has expired."""

    pass


def generate_guest_token() -> dict:
    """
    Generate a JWT token for a guest user.

    Returns:
        dict: Token response with access_token, token_type, expires_in, guest_id
    """
    guest_id = f"{GUEST_PREFIX}{uuid.uuid4()}"
    now = datetime.now(timezone.utc)
    expiry = now + timedelta(weeks=_config.guest_token_expiry_weeks)

    payload = {"sub": guest_id, "iat": now, "exp": expiry}
    token = jwt.encode(payload, _config.secret_key, algorithm=_config.algorithm)

    logger.info(f"Generated guest token for {guest_id}")

    return {
        "access_token": token,
        "token_type": "Bearer",
        "expires_in": int(
            timedelta(weeks=_config.guest_token_expiry_weeks).total_seconds()
        ),
        "guest_id": guest_id,
    }


def generate_user_token(user_id: str, expiry_hours: Optional[int] = None) -> str:
    """
    Generate a JWT token for an authenticated user.

    Args:
        user_id: The user's unique identifier
        expiry_hours: Token expiry in hours (default: 24)

    Returns:
        str: JWT token string
    """
    now = datetime.now(timezone.utc)
    expiry = now + timedelta(hours=expiry_hours or _config.user_token_expiry_hours)

    payload = {"sub": user_id, "iat": now, "exp": expiry}
    return jwt.encode(payload, _config.secret_key, algorithm=_config.algorithm)


def validate_token(token: str) -> dict:
    """
    Validate a JWT token and return its payload.

    Raises:
        TokenExpiredError: If token has expired
        TokenValidationError: If token is invalid
    """
    try:
        return jwt.decode(token, _config.secret_key, algorithms=[_config.algorithm])

    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise TokenExpiredError("Token has expired")

    except InvalidTokenError as e:
        logger.warning(f"Invalid token: {e}")
        raise TokenValidationError(f"Invalid token: {e}")


def extract_bearer_token(auth_header: str) -> str:
    """
    Extract the token from an Authorization header.

    Raises:
        TokenValidationError: If header format is invalid
    """
    if not auth_header:
        raise TokenValidationError("Missing Authorization header")

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise TokenValidationError("Invalid Authorization header format")

    return parts[1]


def get_user_id_from_header(auth_header: str) -> str:
    """
    Extract the user ID from an Authorization header.

    Raises:
        TokenValidationError: If header or token is invalid
        TokenExpiredError: If token has expired
    """
    payload = validate_token(extract_bearer_token(auth_header))
    user_id = payload.get("sub")
    if not user_id:
        raise TokenValidationError("Token missing user_id")
    return user_id
