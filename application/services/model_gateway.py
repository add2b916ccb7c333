"""Model Gateway for the remote Gemini text and image endpoints.

Wraps two provider capabilities:
- Streaming text completion over the conversation history, with the fixed
  Zak persona as system instruction
- Single-shot image generation from a prompt, optionally editing a source image

Safety thresholds are BLOCK_NONE for every harm category; the persona is
abrasive on purpose. Every provider failure surfaces as GatewayError and is
never retried here.
"""

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional, Sequence, Tuple

from google import genai
from google.genai import types

from application.config.chat_config import ChatConfig
from common.constants import (
    DEFAULT_IMAGE_MIME_TYPE,
    PROVIDER_ROLE_MODEL,
    ROLE_ASSISTANT,
)
from common.exception import GatewayError, NoImageDataError

logger = logging.getLogger(__name__)

HARM_CATEGORIES = (
    types.HarmCategory.HARM_CATEGORY_HARASSMENT,
    types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
    types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
    types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
)


@dataclass(frozen=True)
class GeneratedImage:
    """Raw image bytes returned by the image model."""

    data: bytes
    mime_type: str = DEFAULT_IMAGE_MIME_TYPE

    @property
    def b64_data(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.b64_data}"


def build_safety_settings() -> list[types.SafetySetting]:
    """Most permissive threshold for all harm categories."""
    return [
        types.SafetySetting(
            category=category,
            threshold=types.HarmBlockThreshold.BLOCK_NONE,
        )
        for category in HARM_CATEGORIES
    ]


def build_contents(history: Sequence[Any]) -> list[types.Content]:
    """Convert stored messages (role/content) to provider turns.

    Accepts objects with ``role`` and ``content`` attributes or
    ``(role, content)`` tuples. Assistant turns use the provider's ``model`` role.
    """
    contents = []
    for turn in history:
        if isinstance(turn, tuple):
            role, text = turn
        else:
            role, text = turn.role, turn.content
        provider_role = PROVIDER_ROLE_MODEL if role == ROLE_ASSISTANT else "user"
        contents.append(types.Content(role=provider_role, parts=[types.Part(text=text)]))
    return contents


def decode_image_source(source_image: str) -> Tuple[bytes, str]:
    """Decode a data URI or bare base64 string into bytes and a mime type.

    Raises:
        ValueError: If the payload is not valid base64
    """
    mime_type = DEFAULT_IMAGE_MIME_TYPE
    payload = source_image.strip()
    if payload.startswith("data:"):
        header, _, payload = payload.partition(",")
        declared = header[len("data:"):].split(";", 1)[0]
        if declared:
            mime_type = declared

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError("sourceImage must be base64 encoded image data") from e

    if not data:
        raise ValueError("sourceImage is empty")
    return data, mime_type


def extract_image(response: Any) -> Optional[GeneratedImage]:
    """Return the first inline image part of a response, if any."""
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline_data = getattr(part, "inline_data", None)
            data = getattr(inline_data, "data", None) if inline_data else None
            if not data:
                continue
            if isinstance(data, str):
                data = base64.b64decode(data)
            mime_type = getattr(inline_data, "mime_type", None) or DEFAULT_IMAGE_MIME_TYPE
            return GeneratedImage(data=bytes(data), mime_type=mime_type)
    return None


class ModelGateway:
    """Boundary wrapper around the Gemini API."""

    def __init__(self, config: ChatConfig, client: Optional[genai.Client] = None):
        self.config = config
        self._client = client

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            if not self.config.api_key:
                raise GatewayError("GEMINI_API_KEY is not configured")

            http_options = types.HttpOptions(timeout=int(self.config.timeout_seconds * 1000))
            if self.config.base_url:
                # Proxied endpoints take the version from the base URL
                http_options = types.HttpOptions(
                    base_url=self.config.base_url,
                    api_version="",
                    timeout=int(self.config.timeout_seconds * 1000),
                )
            self._client = genai.Client(api_key=self.config.api_key, http_options=http_options)
            logger.info(f"Gemini client created (chat={self.config.chat_model}, image={self.config.image_model})")
        return self._client

    def _chat_config(self) -> types.GenerateContentConfig:
        tools = None
        if self.config.enable_search_grounding:
            tools = [types.Tool(google_search=types.GoogleSearch())]
        return types.GenerateContentConfig(
            system_instruction=self.config.system_instruction,
            safety_settings=build_safety_settings(),
            tools=tools,
        )

    async def stream_chat(self, history: Sequence[Any]) -> AsyncIterator[str]:
        """Stream text fragments of the model reply to the given history.

        The upstream request is issued when the first fragment is awaited.
        Empty fragments are skipped.

        Raises:
            GatewayError: If opening or reading the stream fails
        """
        contents = build_contents(history)
        try:
            stream = await self.client.aio.models.generate_content_stream(
                model=self.config.chat_model,
                contents=contents,
                config=self._chat_config(),
            )
        except GatewayError:
            raise
        except Exception as e:
            raise GatewayError(f"Failed to open chat stream: {e}") from e

        try:
            async for chunk in stream:
                text = chunk.text
                if text:
                    yield text
        except Exception as e:
            raise GatewayError(f"Chat stream failed: {e}") from e
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

    async def generate_image(
        self, prompt: str, source_image: Optional[str] = None
    ) -> GeneratedImage:
        """Generate one image from a prompt.

        Args:
            prompt: Text description of the image
            source_image: Optional data URI or base64 image to edit

        Raises:
            ValueError: If source_image cannot be decoded
            NoImageDataError: If the response contains no image
            GatewayError: If the provider call fails
        """
        parts = []
        if source_image:
            data, mime_type = decode_image_source(source_image)
            parts.append(types.Part(inline_data=types.Blob(data=data, mime_type=mime_type)))
        parts.append(types.Part(text=prompt))

        try:
            response = await self.client.aio.models.generate_content(
                model=self.config.image_model,
                contents=[types.Content(role="user", parts=parts)],
                config=types.GenerateContentConfig(
                    response_modalities=["TEXT", "IMAGE"],
                    safety_settings=build_safety_settings(),
                ),
            )
        except GatewayError:
            raise
        except Exception as e:
            raise GatewayError(f"Image generation failed: {e}") from e

        image = extract_image(response)
        if image is None:
            raise NoImageDataError("No image data in response")

        logger.info(f"Generated image ({image.mime_type}, {len(image.data)} bytes)")
        return image
