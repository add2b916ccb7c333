"""Shared helper functions for chat endpoints."""

import logging
from typing import Any, Dict, List

from application.entity.chat import Conversation, Message
from application.models.response_models import (
    ConversationDetailResponse,
    ConversationResponse,
    MessageResponse,
)
from application.services.chat_service import ChatService
from application.services.model_gateway import ModelGateway
from application.services.service_factory import get_service_factory

logger = logging.getLogger(__name__)


def get_chat_service() -> ChatService:
    """Get ChatService instance."""
    return get_service_factory().chat_service


def get_model_gateway() -> ModelGateway:
    """Get ModelGateway instance."""
    return get_service_factory().model_gateway


def serialize_conversation(conversation: Conversation) -> Dict[str, Any]:
    return ConversationResponse.model_validate(conversation).to_json()


def serialize_conversation_detail(
    conversation: Conversation, messages: List[Message]
) -> Dict[str, Any]:
    detail = ConversationDetailResponse(
        id=conversation.id,
        user_id=conversation.user_id,
        title=conversation.title,
        created_at=conversation.created_at,
        messages=[MessageResponse.model_validate(message) for message in messages],
    )
    return detail.to_json()
