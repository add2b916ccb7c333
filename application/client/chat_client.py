"""
Async HTTP client for the Zak Chat API.

Wraps the conversation, image and auth endpoints over httpx.AsyncClient and
consumes streamed replies through ChatStream.
"""

import asyncio
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from application.client.sse_parser import SSEEventParser
from common.constants import GENERATED_IMAGE_ALT

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 120.0


class ChatClientError(Exception):
    """Raised when the API answers with an error status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and "error" in body:
        return str(body["error"])
    return response.reason_phrase


class ChatClient:
    """
    Client for the Zak Chat REST and streaming endpoints.

    Example:
        >>> async with ChatClient("http://localhost:8000") as client:
        ...     await client.fetch_guest_token()
        ...     conversation = await client.create_conversation()
        ...     stream = client.stream_message(conversation["id"], "hi Zak")
        ...     async for event in stream.events():
        ...         print(stream.transcript)
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.token = token
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "ChatClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    def headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        response = await self._http.request(method, path, headers=self.headers(), **kwargs)
        if response.is_error:
            raise ChatClientError(response.status_code, _error_message(response))
        return response

    async def fetch_guest_token(self) -> Dict[str, Any]:
        """Obtain a guest token and use it for subsequent requests."""
        response = await self._request("GET", "/api/auth/guest-token")
        data = response.json()
        self.token = data["access_token"]
        logger.info(f"Using guest identity {data.get('guest_id')}")
        return data

    async def get_user(self) -> Dict[str, Any]:
        response = await self._request("GET", "/api/auth/user")
        return response.json()

    async def list_conversations(self) -> List[Dict[str, Any]]:
        response = await self._request("GET", "/api/conversations")
        return response.json()

    async def get_conversation(self, conversation_id: int) -> Dict[str, Any]:
        response = await self._request("GET", f"/api/conversations/{conversation_id}")
        return response.json()

    async def create_conversation(self, title: Optional[str] = None) -> Dict[str, Any]:
        body = {"title": title} if title else {}
        response = await self._request("POST", "/api/conversations", json=body)
        return response.json()

    async def delete_conversation(self, conversation_id: int) -> None:
        await self._request("DELETE", f"/api/conversations/{conversation_id}")

    async def generate_image(
        self, prompt: str, source_image: Optional[str] = None
    ) -> Dict[str, Any]:
        body = {"prompt": prompt}
        if source_image:
            body["sourceImage"] = source_image
        response = await self._request("POST", "/api/generate-image", json=body)
        return response.json()

    def stream_message(self, conversation_id: int, content: str) -> "ChatStream":
        return ChatStream(self, conversation_id, content)

    def open_stream(self, conversation_id: int, content: str):
        """Open the raw streaming POST for a message."""
        return self._http.stream(
            "POST",
            f"/api/conversations/{conversation_id}/messages",
            headers=self.headers(),
            json={"content": content},
        )


class ChatStream:
    """
    One streamed reply as seen by the client.

    While streaming, ``transcript`` holds the provisional assistant text.
    Once the stream ends for any reason the provisional text is discarded and
    ``conversation`` is re-fetched from the server, which is the only source
    of truth. Nothing is persisted client-side.
    """

    def __init__(self, client: ChatClient, conversation_id: int, content: str):
        self.client = client
        self.conversation_id = conversation_id
        self.content = content
        self.transcript = ""
        self.done = False
        self.error: Optional[str] = None
        self.cancelled = False
        self.conversation: Optional[Dict[str, Any]] = None
        self._parser = SSEEventParser()
        self._cancel_requested = asyncio.Event()

    def cancel(self) -> None:
        """Stop forwarding fragments and drop the connection.

        A read that is already waiting on the network is abandoned at once,
        so the server sees the disconnect and stores no reply.
        """
        self.cancelled = True
        self._cancel_requested.set()

    def apply(self, event: Dict[str, Any]) -> None:
        if "content" in event:
            self.transcript += event["content"]
        if "imageUrl" in event:
            self.transcript += f"\n\n![{GENERATED_IMAGE_ALT}]({event['imageUrl']})"
        if event.get("done"):
            self.done = True
        if "error" in event:
            self.error = event["error"]

    async def events(self) -> AsyncIterator[Dict[str, Any]]:
        """Yield decoded events, then reconcile with the stored conversation."""
        try:
            async with self.client.open_stream(self.conversation_id, self.content) as response:
                if response.is_error:
                    await response.aread()
                    self.error = _error_message(response)
                    raise ChatClientError(response.status_code, self.error)

                chunks = response.aiter_text()
                try:
                    while not self.cancelled:
                        chunk = await self._next_chunk(chunks)
                        if chunk is None:
                            break
                        for event in self._parser.feed(chunk):
                            if self.cancelled:
                                break
                            self.apply(event)
                            yield event
                finally:
                    await chunks.aclose()
        finally:
            if self.cancelled:
                logger.info(f"Stream for conversation {self.conversation_id} cancelled")
            self.transcript = ""
            await self._refetch()

    async def _next_chunk(self, chunks: AsyncIterator[str]) -> Optional[str]:
        """Next body chunk, or None when the body ends or cancel() is called."""
        read = asyncio.ensure_future(anext(chunks, None))
        stop = asyncio.ensure_future(self._cancel_requested.wait())
        try:
            await asyncio.wait({read, stop}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stop.cancel()
            if not read.done():
                read.cancel()
                await asyncio.wait({read})

        if read.cancelled():
            return None
        return read.result()

    async def run(self) -> Optional[Dict[str, Any]]:
        """Consume the whole stream and return the re-fetched conversation."""
        async for _ in self.events():
            pass
        return self.conversation

    async def _refetch(self) -> None:
        try:
            self.conversation = await self.client.get_conversation(self.conversation_id)
        except (ChatClientError, httpx.HTTPError) as e:
            logger.warning(f"Could not re-fetch conversation {self.conversation_id}: {e}")
