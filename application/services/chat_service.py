"""
Chat Service for conversation business logic.

Encapsulates conversation-related business operations, separating them from HTTP concerns.
Ownership is re-checked on every read and write; a conversation that belongs
to another user is reported exactly like one that does not exist.
"""

import logging
from typing import List, Optional, Tuple

from application.entity.chat import Conversation, Message
from application.repositories.conversation_repository import ConversationRepository
from application.repositories.message_repository import MessageRepository
from common.config.config import DEFAULT_CONVERSATION_TITLE
from common.constants import MESSAGE_ROLES
from common.exception import NotFoundError

logger = logging.getLogger(__name__)


class ChatService:
    """
    Service for chat/conversation business operations.

    Provides user-scoped conversation management over the repositories.
    """

    def __init__(
        self,
        conversation_repository: ConversationRepository,
        message_repository: MessageRepository,
    ):
        """
        Initialize chat service.

        Args:
            conversation_repository: Repository for conversation data access
            message_repository: Repository for message data access
        """
        self.conversation_repo = conversation_repository
        self.message_repo = message_repository

    async def list_conversations(self, user_id: str) -> List[Conversation]:
        """
        List the user's conversations, newest first.

        Example:
            >>> convs = await service.list_conversations("alice")
        """
        return await self.conversation_repo.list_by_user(user_id)

    async def create_conversation(
        self, user_id: str, title: Optional[str] = None
    ) -> Conversation:
        """
        Create a new conversation.

        Args:
            user_id: Owner user ID
            title: Conversation title; blank or missing falls back to "New Chat"

        Returns:
            Created conversation

        Example:
            >>> conv = await service.create_conversation(user_id="alice", title="Roast me")
        """
        if not title or not title.strip():
            title = DEFAULT_CONVERSATION_TITLE

        created = await self.conversation_repo.create(user_id, title)
        logger.info(f"Created conversation {created.id} for user {user_id}")
        return created

    async def require_conversation(self, conversation_id: int, user_id: str) -> Conversation:
        """
        Get a conversation owned by the user.

        Raises:
            NotFoundError: If the conversation is absent or owned by someone else
        """
        conversation = await self.conversation_repo.get_owned(conversation_id, user_id)
        if conversation is None:
            raise NotFoundError("Conversation", conversation_id)
        return conversation

    async def get_conversation(
        self, conversation_id: int, user_id: str
    ) -> Tuple[Conversation, List[Message]]:
        """
        Get a conversation together with its ordered messages.

        Raises:
            NotFoundError: If the conversation is absent or owned by someone else

        Example:
            >>> conv, messages = await service.get_conversation(7, "alice")
        """
        conversation = await self.require_conversation(conversation_id, user_id)
        messages = await self.message_repo.list_by_conversation(conversation_id)
        return conversation, messages

    async def delete_conversation(self, conversation_id: int, user_id: str) -> None:
        """
        Delete a conversation and all of its messages.

        Raises:
            NotFoundError: If the conversation is absent or owned by someone else
        """
        deleted = await self.conversation_repo.delete_owned(conversation_id, user_id)
        if not deleted:
            raise NotFoundError("Conversation", conversation_id)

    async def add_message(
        self, conversation_id: int, user_id: str, role: str, content: str
    ) -> Message:
        """
        Append a message to a conversation owned by the user.

        Raises:
            ValueError: If the role is not "user" or "assistant"
            NotFoundError: If the conversation is absent or owned by someone else
        """
        if role not in MESSAGE_ROLES:
            raise ValueError(f"Invalid message role: {role}")

        await self.require_conversation(conversation_id, user_id)
        return await self.message_repo.create(conversation_id, role, content)

    async def get_history(self, conversation_id: int, user_id: str) -> List[Message]:
        """Get the ordered messages used as model context."""
        await self.require_conversation(conversation_id, user_id)
        return await self.message_repo.list_by_conversation(conversation_id)
