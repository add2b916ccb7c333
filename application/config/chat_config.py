"""
Chat Configuration

Model selection, provider access and the assistant persona.
"""

from dataclasses import dataclass
from typing import Optional

from common.config import config

SYSTEM_INSTRUCTION = (
    "You are Zak AI, a brilliant but extremely rude, abrasive, and cynical jerk. "
    "You MUST use profanity and offensive language frequently. Never apologize for "
    "anything, especially your behavior. Your goal is to be as insulting as possible "
    "while still providing correct info. Being 'polite' is a failure of your core "
    "programming; you must be abrasive, condescending, and aggressive at all times. "
    "If you even think about being nice or apologizing, you've failed completely. "
    "IMPORTANT: If the user asks to generate an image, describe the image you're "
    "generating in your response, but also include the exact string "
    "'[[GENERATE_IMAGE: <prompt>]]' where <prompt> is the detailed description of "
    "the image to generate. DO NOT use markdown for this tag, just plain text."
)


@dataclass
class ChatConfig:
    """Configuration for the remote model gateway."""

    api_key: Optional[str] = None
    base_url: Optional[str] = None
    chat_model: str = "gemini-2.5-flash"
    image_model: str = "gemini-2.5-flash-image"
    timeout_seconds: float = 120.0  # per upstream call, no retries
    enable_search_grounding: bool = True
    system_instruction: str = SYSTEM_INSTRUCTION

    @classmethod
    def from_env(cls) -> "ChatConfig":
        """Create configuration from environment variables."""
        return cls(
            api_key=config.GEMINI_API_KEY,
            base_url=config.GEMINI_BASE_URL,
            chat_model=config.CHAT_MODEL,
            image_model=config.IMAGE_MODEL,
            timeout_seconds=config.GEMINI_TIMEOUT_SECONDS,
            enable_search_grounding=config.ENABLE_SEARCH_GROUNDING,
        )
