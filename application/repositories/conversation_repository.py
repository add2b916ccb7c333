"""
Conversation Repository for data access operations.

Every query is scoped by the owning user so a conversation is only ever
visible to the user who created it.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from application.entity.chat import Conversation, Message

logger = logging.getLogger(__name__)


class ConversationRepository:
    """
    Repository for conversation entity operations.

    Encapsulates data access logic and provides domain-specific methods.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """
        Initialize conversation repository.

        Args:
            session_factory: Factory producing async database sessions
        """
        self.session_factory = session_factory

    async def list_by_user(self, user_id: str) -> List[Conversation]:
        """
        List conversations owned by a user, newest first.

        Example:
            >>> convs = await repo.list_by_user("alice")
        """
        async with self.session_factory() as session:
            result = await session.execute(
                select(Conversation)
                .where(Conversation.user_id == user_id)
                .order_by(Conversation.created_at.desc(), Conversation.id.desc())
            )
            return list(result.scalars().all())

    async def get_owned(self, conversation_id: int, user_id: str) -> Optional[Conversation]:
        """
        Get a conversation by ID if it belongs to the user.

        Returns:
            Conversation object or None if absent or owned by someone else
        """
        async with self.session_factory() as session:
            result = await session.execute(
                select(Conversation).where(
                    Conversation.id == conversation_id,
                    Conversation.user_id == user_id,
                )
            )
            return result.scalar_one_or_none()

    async def create(self, user_id: str, title: str) -> Conversation:
        """
        Create a new conversation.

        Example:
            >>> conv = await repo.create("alice", "My Chat")
            >>> print(conv.id)
        """
        async with self.session_factory() as session:
            conversation = Conversation(user_id=user_id, title=title)
            session.add(conversation)
            await session.commit()
            await session.refresh(conversation)
            return conversation

    async def delete_owned(self, conversation_id: int, user_id: str) -> bool:
        """
        Delete a conversation and its messages if it belongs to the user.

        Returns:
            True if a conversation was deleted, False if none matched
        """
        async with self.session_factory() as session:
            async with session.begin():
                owned = await session.execute(
                    select(Conversation.id).where(
                        Conversation.id == conversation_id,
                        Conversation.user_id == user_id,
                    )
                )
                if owned.scalar_one_or_none() is None:
                    return False

                await session.execute(
                    delete(Message).where(Message.conversation_id == conversation_id)
                )
                await session.execute(
                    delete(Conversation).where(Conversation.id == conversation_id)
                )

        logger.info(f"Deleted conversation {conversation_id} for user {user_id}")
        return True
