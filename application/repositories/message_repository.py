"""
Message Repository for data access operations.

Messages are append-only: there is no update or per-message delete.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from application.entity.chat import Message

logger = logging.getLogger(__name__)


class MessageRepository:
    """Repository for message entity operations."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def list_by_conversation(self, conversation_id: int) -> List[Message]:
        """List messages of a conversation in creation order."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(Message)
                .where(Message.conversation_id == conversation_id)
                .order_by(Message.created_at, Message.id)
            )
            return list(result.scalars().all())

    async def create(self, conversation_id: int, role: str, content: str) -> Message:
        """Append a message to a conversation."""
        async with self.session_factory() as session:
            message = Message(conversation_id=conversation_id, role=role, content=content)
            session.add(message)
            await session.commit()
            await session.refresh(message)

        logger.debug(
            f"Saved {role} message {message.id} to conversation {conversation_id} "
            f"({len(content)} chars)"
        )
        return message
