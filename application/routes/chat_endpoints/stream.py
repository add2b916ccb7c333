"""Send-message endpoint streaming the assistant reply as Server-Sent Events."""

import logging
from datetime import timedelta

from quart import Blueprint, request
from quart_rate_limiter import rate_limit

from application.models.request_models import SendMessageRequest
from application.routes.chat_endpoints.helpers import (
    get_chat_service,
    get_model_gateway,
)
from application.routes.common.rate_limiting import default_rate_limit_key
from application.routes.common.response import APIResponse
from application.routes.common.validation import validate_json
from application.services.streaming import StreamRelay
from application.services.streaming.relay import SEND_FAILED_MESSAGE
from common.constants import RATE_LIMIT_STANDARD
from common.exception import GatewayError
from common.middleware import require_auth

logger = logging.getLogger(__name__)

stream_bp = Blueprint("chat_stream", __name__)


@stream_bp.route("/<int:conversation_id>/messages", methods=["POST"])
@rate_limit(RATE_LIMIT_STANDARD, timedelta(minutes=1), key_function=default_rate_limit_key)
@require_auth
@validate_json(SendMessageRequest)
async def send_message(conversation_id: int):
    """
    Store the user message and stream the assistant reply.

    Events are `data: {json}` frames carrying `content`, `imageUrl`,
    `done` or `error`. Failures before the first fragment are returned as
    a regular 500 JSON response instead of a stream.
    """
    data: SendMessageRequest = request.validated_data

    relay = StreamRelay(
        chat_service=get_chat_service(),
        gateway=get_model_gateway(),
        conversation_id=conversation_id,
        user_id=request.user_id,
    )

    try:
        await relay.open(data.content)
    except GatewayError as e:
        logger.error(f"Error sending message to conversation {conversation_id}: {e}", exc_info=True)
        return APIResponse.internal_error(SEND_FAILED_MESSAGE)

    return APIResponse.event_stream(relay)
