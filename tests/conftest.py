"""Pytest configuration for tests.

Sets up Python path and fixtures for all tests.
"""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add project root to Python path so imports work correctly
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from application.repositories.conversation_repository import ConversationRepository  # noqa: E402
from application.repositories.database import Database  # noqa: E402
from application.repositories.message_repository import MessageRepository  # noqa: E402
from application.services.chat_service import ChatService  # noqa: E402


@pytest_asyncio.fixture
async def database(tmp_path):
    """Fresh SQLite database file per test."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def chat_service(database):
    return ChatService(
        conversation_repository=ConversationRepository(database.session_factory),
        message_repository=MessageRepository(database.session_factory),
    )


@pytest.fixture
def gateway():
    from tests.fixtures.conversation_fixtures import FakeGateway

    return FakeGateway()


@pytest_asyncio.fixture
async def app(tmp_path, gateway):
    """Quart app with every blueprint, backed by a temporary database."""
    from application.repositories.database import init_database
    from application.services.service_factory import get_service_factory
    from tests.fixtures.conversation_fixtures import create_test_app

    db = init_database(f"sqlite+aiosqlite:///{tmp_path / 'routes.db'}")
    await db.create_all()

    factory = get_service_factory()
    factory.clear_cache()
    factory._model_gateway = gateway

    yield create_test_app()

    factory.clear_cache()
    await db.dispose()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()
