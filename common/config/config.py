"""
Application configuration loaded from the environment.

Values are read once at import time. A `.env` file in the working directory
is honoured through python-dotenv.
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./zak_chat.db")
DATABASE_ECHO = os.getenv("DATABASE_ECHO", "false").lower() == "true"

# Gemini access. The AI_INTEGRATIONS_* names are accepted for proxied deployments.
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("AI_INTEGRATIONS_GEMINI_API_KEY")
GEMINI_BASE_URL = os.getenv("GEMINI_BASE_URL") or os.getenv("AI_INTEGRATIONS_GEMINI_BASE_URL")
GEMINI_TIMEOUT_SECONDS = float(os.getenv("GEMINI_TIMEOUT_SECONDS", "120"))

# AI Model Configuration
CHAT_MODEL = os.getenv("CHAT_MODEL", "gemini-2.5-flash")
IMAGE_MODEL = os.getenv("IMAGE_MODEL", "gemini-2.5-flash-image")
ENABLE_SEARCH_GROUNDING = os.getenv("ENABLE_SEARCH_GROUNDING", "true").lower() == "true"

# Conversations
DEFAULT_CONVERSATION_TITLE = "New Chat"
