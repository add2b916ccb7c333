"""List and Create conversation endpoints."""

import logging
from datetime import timedelta

from quart import Blueprint, request
from quart_rate_limiter import rate_limit

from application.models.request_models import CreateConversationRequest
from application.routes.chat_endpoints.helpers import (
    get_chat_service,
    serialize_conversation,
)
from application.routes.common.rate_limiting import default_rate_limit_key
from application.routes.common.response import APIResponse
from application.routes.common.validation import validate_json
from common.constants import RATE_LIMIT_STANDARD
from common.middleware import require_auth

logger = logging.getLogger(__name__)

list_create_bp = Blueprint("chat_list_create", __name__)


@list_create_bp.route("", methods=["GET"])
@rate_limit(RATE_LIMIT_STANDARD, timedelta(minutes=1), key_function=default_rate_limit_key)
@require_auth
async def list_conversations():
    """List all conversations of the current user, newest first."""
    conversations = await get_chat_service().list_conversations(request.user_id)
    return APIResponse.success([serialize_conversation(c) for c in conversations])


@list_create_bp.route("", methods=["POST"])
@rate_limit(RATE_LIMIT_STANDARD, timedelta(minutes=1), key_function=default_rate_limit_key)
@require_auth
@validate_json(CreateConversationRequest, allow_empty=True)
async def create_conversation():
    """Create a new conversation."""
    data: CreateConversationRequest = request.validated_data

    conversation = await get_chat_service().create_conversation(
        user_id=request.user_id,
        title=data.title,
    )
    return APIResponse.success(serialize_conversation(conversation), 201)
