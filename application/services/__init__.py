"""
Application services package.

Contains business logic services for Zak Chat.
"""

from application.services.chat_service import ChatService
from application.services.model_gateway import GeneratedImage, ModelGateway

__all__ = ["ChatService", "GeneratedImage", "ModelGateway"]
