"""
Application entities package.

Contains the persisted chat entities.
"""

from application.entity.chat import Base, Conversation, Message

__all__ = ["Base", "Conversation", "Message"]
