"""
Request models for the Zak Chat API.

Defines all request DTOs used by the API endpoints.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateConversationRequest(BaseModel):
    """Request model for creating a new conversation."""

    title: Optional[str] = Field(
        default=None, description="Display title; defaults to 'New Chat'"
    )


class SendMessageRequest(BaseModel):
    """Request model for sending a message to a conversation."""

    content: str = Field(..., min_length=1, description="The message content")


class GenerateImageRequest(BaseModel):
    """Request model for standalone image generation."""

    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(..., min_length=1, description="Description of the image")
    source_image: Optional[str] = Field(
        default=None,
        alias="sourceImage",
        description="Optional data URI or base64 image to edit",
    )
