"""
Response models for the Zak Chat API.

Defines all response DTOs used by the API endpoints. Keys are camelCase on
the wire.
"""

from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for ORM-backed response models serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ConversationResponse(ApiModel):
    """A conversation without its messages."""

    id: int
    user_id: str
    title: str
    created_at: datetime


class MessageResponse(ApiModel):
    """A single stored message."""

    id: int
    conversation_id: int
    role: str
    content: str
    created_at: datetime


class ConversationDetailResponse(ConversationResponse):
    """A conversation with its ordered messages."""

    messages: List[MessageResponse] = Field(default_factory=list)


class GeneratedImageResponse(BaseModel):
    """Response model for standalone image generation."""

    model_config = ConfigDict(populate_by_name=True)

    b64_json: str = Field(..., description="Base64 encoded image bytes")
    mime_type: str = Field(..., alias="mimeType", description="Image mime type")


class TokenResponse(BaseModel):
    """Response model for guest token generation."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    guest_id: str
