"""
Application routes package.

Contains all API endpoint blueprints for Zak Chat.
"""

from application.routes.chat_endpoints.crud import crud_bp
from application.routes.chat_endpoints.list_and_create import list_create_bp
from application.routes.chat_endpoints.stream import stream_bp
from application.routes.images import images_bp
from application.routes.token import token_bp

__all__ = ["crud_bp", "images_bp", "list_create_bp", "stream_bp", "token_bp"]
