"""Stream Relay turning the upstream token stream into SSE events.

One relay serves exactly one send-message request. It walks through:

    IDLE -> AWAITING_HISTORY -> STREAMING -> TRIGGER_CHECK
         -> (IMAGE_GENERATING) -> PERSISTING -> DONE

with ABORTED reached when the client goes away before the reply is stored,
and FAILED when the upstream breaks after streaming has started.

The user message is stored before the model is contacted. The assistant
message is stored only once the whole reply (plus any generated image) is
known; an aborted or failed turn stores nothing.
"""

import asyncio
import logging
from enum import Enum
from typing import AsyncIterator, Optional

from application.services.chat_service import ChatService
from application.services.model_gateway import ModelGateway
from application.services.streaming.events import StreamEvent
from application.services.streaming.image_trigger import extract_image_prompt
from common.constants import GENERATED_IMAGE_ALT, ROLE_ASSISTANT, ROLE_USER

logger = logging.getLogger(__name__)

SEND_FAILED_MESSAGE = "Failed to send message"


class RelayState(str, Enum):
    IDLE = "idle"
    AWAITING_HISTORY = "awaiting_history"
    STREAMING = "streaming"
    TRIGGER_CHECK = "trigger_check"
    IMAGE_GENERATING = "image_generating"
    PERSISTING = "persisting"
    DONE = "done"
    ABORTED = "aborted"
    FAILED = "failed"


class StreamRelay:
    """Relays one model reply to one client."""

    def __init__(
        self,
        chat_service: ChatService,
        gateway: ModelGateway,
        conversation_id: int,
        user_id: str,
    ):
        self.chat_service = chat_service
        self.gateway = gateway
        self.conversation_id = conversation_id
        self.user_id = user_id
        self.state = RelayState.IDLE
        self.final_text: Optional[str] = None
        self._upstream: Optional[AsyncIterator[str]] = None
        self._first_fragment: Optional[str] = None
        self._exhausted = False
        self._event_iter: Optional[AsyncIterator[str]] = None

    async def open(self, content: str) -> None:
        """Store the user message and open the upstream stream.

        The first fragment is awaited here so that failures before any output
        reach the caller as exceptions rather than as SSE events.

        Raises:
            NotFoundError: If the conversation is absent or not owned by the user
            GatewayError: If the model call fails before producing output
        """
        if self.state is not RelayState.IDLE:
            raise RuntimeError(f"Relay already opened (state={self.state.value})")

        await self.chat_service.add_message(
            self.conversation_id, self.user_id, ROLE_USER, content
        )

        self.state = RelayState.AWAITING_HISTORY
        history = await self.chat_service.get_history(self.conversation_id, self.user_id)

        self.state = RelayState.STREAMING
        self._upstream = self.gateway.stream_chat(history)
        try:
            self._first_fragment = await self._upstream.__anext__()
        except StopAsyncIteration:
            self._exhausted = True
        except BaseException:
            self.state = RelayState.FAILED
            raise

        logger.info(
            f"Stream opened for conversation {self.conversation_id} "
            f"({len(history)} messages of context)"
        )

    async def events(self) -> AsyncIterator[str]:
        """Yield SSE-formatted events for the rest of the turn."""
        if self.state is not RelayState.STREAMING or self._upstream is None:
            raise RuntimeError("Relay must be opened before streaming events")

        accumulated = ""
        try:
            if self._first_fragment is not None:
                fragment, self._first_fragment = self._first_fragment, None
                accumulated += fragment
                yield StreamEvent.content(fragment).to_sse()

            if not self._exhausted:
                async for fragment in self._upstream:
                    accumulated += fragment
                    logger.debug(f"Relaying fragment ({len(fragment)} chars, total {len(accumulated)})")
                    yield StreamEvent.content(fragment).to_sse()
                self._exhausted = True

            self.state = RelayState.TRIGGER_CHECK
            prompt = extract_image_prompt(accumulated)
            if prompt:
                self.state = RelayState.IMAGE_GENERATING
                image_url = await self._generate_image_url(prompt)
                if image_url:
                    accumulated += f"\n\n![{GENERATED_IMAGE_ALT}]({image_url})"
                    yield StreamEvent.image(image_url).to_sse()

            self.state = RelayState.PERSISTING
            await self.chat_service.add_message(
                self.conversation_id, self.user_id, ROLE_ASSISTANT, accumulated
            )
            self.final_text = accumulated
            self.state = RelayState.DONE
            logger.info(
                f"Assistant reply saved for conversation {self.conversation_id} "
                f"({len(accumulated)} chars)"
            )

            yield StreamEvent.done().to_sse()

        except (asyncio.CancelledError, GeneratorExit):
            if self.state is not RelayState.DONE:
                self.state = RelayState.ABORTED
                logger.info(
                    f"Client disconnected from conversation {self.conversation_id}; "
                    f"discarding {len(accumulated)} chars"
                )
            raise

        except Exception as e:
            self.state = RelayState.FAILED
            logger.error(f"Error streaming reply for conversation {self.conversation_id}: {e}", exc_info=True)
            yield StreamEvent.error(SEND_FAILED_MESSAGE).to_sse()

        finally:
            await self._close_upstream()

    def __aiter__(self) -> "StreamRelay":
        return self

    async def __anext__(self) -> str:
        if self._event_iter is None:
            self._event_iter = self.events()
        return await self._event_iter.__anext__()

    async def aclose(self) -> None:
        """Release the upstream stream, whether or not any event was sent.

        Called by the server when the response body is closed, including when
        the client went away before the first event was read.
        """
        if self._event_iter is not None:
            await self._event_iter.aclose()
        if self.state is RelayState.STREAMING:
            self.state = RelayState.ABORTED
            logger.info(
                f"Client disconnected from conversation {self.conversation_id} "
                f"before the reply was sent"
            )
        await self._close_upstream()

    async def _generate_image_url(self, prompt: str) -> Optional[str]:
        """Generate the requested image; failures degrade to a text-only reply."""
        logger.info(f"Image directive found for conversation {self.conversation_id}: {prompt[:80]}")
        try:
            image = await self.gateway.generate_image(prompt)
        except Exception as e:
            logger.error(f"Error generating image in chat: {e}", exc_info=True)
            return None
        return image.to_data_uri()

    async def _close_upstream(self) -> None:
        if self._exhausted or self._upstream is None:
            return
        self._exhausted = True
        aclose = getattr(self._upstream, "aclose", None)
        if aclose is None:
            return
        try:
            await aclose()
        except Exception as e:
            logger.warning(f"Error closing upstream stream: {e}")
