"""
Application models package.

Contains all request and response DTOs for the Zak Chat API.
"""

from application.models.request_models import (
    CreateConversationRequest,
    GenerateImageRequest,
    SendMessageRequest,
)
from application.models.response_models import (
    ConversationDetailResponse,
    ConversationResponse,
    GeneratedImageResponse,
    MessageResponse,
    TokenResponse,
)

__all__ = [
    # Request models
    "CreateConversationRequest",
    "GenerateImageRequest",
    "SendMessageRequest",
    # Response models
    "ConversationDetailResponse",
    "ConversationResponse",
    "GeneratedImageResponse",
    "MessageResponse",
    "TokenResponse",
]
