"""
Token Routes for Zak Chat

Handles:
- Guest token generation (temporary anonymous sessions)
- Resolving the authenticated user from a bearer token

Uses real JWT signing with HS256 algorithm.
"""

import logging
from datetime import timedelta

from quart import Blueprint, request
from quart_rate_limiter import rate_limit

from application.models.response_models import TokenResponse
from application.routes.common.rate_limiting import default_rate_limit_key
from application.routes.common.response import APIResponse
from common.constants import RATE_LIMIT_STANDARD, RATE_LIMIT_TOKEN_GENERATION
from common.middleware import require_auth
from common.utils.jwt_utils import generate_guest_token

logger = logging.getLogger(__name__)

token_bp = Blueprint("token", __name__)


@token_bp.route("/guest-token", methods=["GET"])
@rate_limit(RATE_LIMIT_TOKEN_GENERATION, timedelta(minutes=1), key_function=default_rate_limit_key)
async def get_guest_token():
    """
    Generate a JWT token for a guest user.

    Guest tokens carry a 'guest.' prefixed subject and are
    signature-verified on each request like any other token.

    Returns:
        200: Token response with access_token, token_type, expires_in, guest_id
    """
    token_response = TokenResponse.model_validate(generate_guest_token())
    logger.info(f"Issued guest token for {token_response.guest_id}")
    return APIResponse.success(token_response.model_dump())


@token_bp.route("/user", methods=["GET"])
@rate_limit(RATE_LIMIT_STANDARD, timedelta(minutes=1), key_function=default_rate_limit_key)
@require_auth
async def get_current_user():
    """Return the identity behind the bearer token."""
    return APIResponse.success({"id": request.user_id})
