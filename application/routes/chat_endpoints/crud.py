"""Get and Delete conversation endpoints."""

import logging
from datetime import timedelta

from quart import Blueprint, request
from quart_rate_limiter import rate_limit

from application.routes.chat_endpoints.helpers import (
    get_chat_service,
    serialize_conversation_detail,
)
from application.routes.common.rate_limiting import default_rate_limit_key
from application.routes.common.response import APIResponse
from common.constants import RATE_LIMIT_STANDARD
from common.middleware import require_auth

logger = logging.getLogger(__name__)

crud_bp = Blueprint("chat_crud", __name__)


@crud_bp.route("/<int:conversation_id>", methods=["GET"])
@rate_limit(RATE_LIMIT_STANDARD, timedelta(minutes=1), key_function=default_rate_limit_key)
@require_auth
async def get_conversation(conversation_id: int):
    """Get a conversation with its ordered messages."""
    conversation, messages = await get_chat_service().get_conversation(
        conversation_id, request.user_id
    )
    return APIResponse.success(serialize_conversation_detail(conversation, messages))


@crud_bp.route("/<int:conversation_id>", methods=["DELETE"])
@rate_limit(RATE_LIMIT_STANDARD, timedelta(minutes=1), key_function=default_rate_limit_key)
@require_auth
async def delete_conversation(conversation_id: int):
    """Delete a conversation and its messages."""
    await get_chat_service().delete_conversation(conversation_id, request.user_id)
    logger.info(f"Conversation {conversation_id} deleted by {request.user_id}")
    return APIResponse.no_content()
