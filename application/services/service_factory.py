"""
Service Factory for centralized service initialization.

Implements the Factory pattern for creating and managing service instances.
Provides singleton access to services across the application.
"""

import logging
from typing import Optional

from application.config.chat_config import ChatConfig
from application.repositories.conversation_repository import ConversationRepository
from application.repositories.database import Database, get_database
from application.repositories.message_repository import MessageRepository
from application.services.chat_service import ChatService
from application.services.model_gateway import ModelGateway

logger = logging.getLogger(__name__)


class ServiceFactory:
    """
    Factory for creating and managing service instances.

    Implements singleton pattern for services to ensure single instance
    across the application. Manages dependencies between services.
    """

    _instance: Optional["ServiceFactory"] = None

    # Service instances (lazy-loaded)
    _chat_config: Optional[ChatConfig] = None
    _conversation_repository: Optional[ConversationRepository] = None
    _message_repository: Optional[MessageRepository] = None
    _chat_service: Optional[ChatService] = None
    _model_gateway: Optional[ModelGateway] = None

    def __new__(cls):
        """Ensure only one instance exists (Singleton pattern)."""
        if cls._instance is None:
            cls._instance = super(ServiceFactory, cls).__new__(cls)
            logger.debug("ServiceFactory instance created")
        return cls._instance

    @property
    def database(self) -> Database:
        return get_database()

    @property
    def chat_config(self) -> ChatConfig:
        if self._chat_config is None:
            self._chat_config = ChatConfig.from_env()
            logger.debug("ChatConfig loaded")
        return self._chat_config

    @property
    def conversation_repository(self) -> ConversationRepository:
        if self._conversation_repository is None:
            self._conversation_repository = ConversationRepository(
                self.database.session_factory
            )
            logger.debug("ConversationRepository initialized")
        return self._conversation_repository

    @property
    def message_repository(self) -> MessageRepository:
        if self._message_repository is None:
            self._message_repository = MessageRepository(self.database.session_factory)
            logger.debug("MessageRepository initialized")
        return self._message_repository

    @property
    def chat_service(self) -> ChatService:
        """
        Get ChatService instance.

        Example:
            >>> factory = ServiceFactory()
            >>> chat = factory.chat_service
        """
        if self._chat_service is None:
            self._chat_service = ChatService(
                conversation_repository=self.conversation_repository,
                message_repository=self.message_repository,
            )
            logger.debug("ChatService initialized")
        return self._chat_service

    @property
    def model_gateway(self) -> ModelGateway:
        """
        Get ModelGateway instance.

        The Gemini client itself is created on first use, so a missing API key
        only fails the requests that need the model.
        """
        if self._model_gateway is None:
            self._model_gateway = ModelGateway(self.chat_config)
            logger.debug("ModelGateway initialized")
        return self._model_gateway

    def clear_cache(self):
        """
        Clear all cached service instances.

        Useful for testing or when configuration changes.
        """
        self._chat_config = None
        self._conversation_repository = None
        self._message_repository = None
        self._chat_service = None
        self._model_gateway = None
        logger.debug("ServiceFactory cache cleared")


# Global factory instance
_factory_instance: Optional[ServiceFactory] = None


def get_service_factory() -> ServiceFactory:
    """
    Get global ServiceFactory instance.

    Returns:
        ServiceFactory: Singleton factory instance

    Example:
        >>> from application.services.service_factory import get_service_factory
        >>> factory = get_service_factory()
        >>> chat_service = factory.chat_service
    """
    global _factory_instance
    if _factory_instance is None:
        _factory_instance = ServiceFactory()
    return _factory_instance
