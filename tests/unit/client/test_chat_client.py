"""
Tests for ChatClient and ChatStream.

HTTP traffic goes through httpx.MockTransport.
"""

import asyncio
import json

import httpx
import pytest

from application.client.chat_client import ChatClient, ChatClientError


class ChunkedStream(httpx.AsyncByteStream):
    """Response body delivered in the given byte chunks."""

    def __init__(self, chunks):
        self.chunks = chunks

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk


class StalledStream(httpx.AsyncByteStream):
    """Response body that sends its chunks and then hangs."""

    def __init__(self, chunks):
        self.chunks = chunks
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk
        await asyncio.sleep(30)
        yield b'data: {"content": "too late"}\n\n'

    async def aclose(self):
        self.closed = True


STORED_CONVERSATION = {
    "id": 1,
    "userId": "alice",
    "title": "New Chat",
    "createdAt": "2026-01-01T00:00:00",
    "messages": [
        {"id": 1, "conversationId": 1, "role": "user", "content": "hi", "createdAt": "2026-01-01T00:00:01"},
        {"id": 2, "conversationId": 1, "role": "assistant", "content": "Hello there", "createdAt": "2026-01-01T00:00:02"},
    ],
}


def make_client(handler, token="test-token"):
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://testserver"
    )
    return ChatClient("http://testserver", token=token, http_client=http_client)


def stream_handler(chunks, status_code=200, requests=None):
    async def handler(request: httpx.Request):
        if requests is not None:
            requests.append(request)
        if request.method == "POST" and request.url.path == "/api/conversations/1/messages":
            if status_code != 200:
                return httpx.Response(status_code, json={"error": "Failed to send message"})
            return httpx.Response(
                200,
                headers={"content-type": "text/event-stream"},
                stream=ChunkedStream(chunks),
            )
        if request.method == "GET" and request.url.path == "/api/conversations/1":
            return httpx.Response(200, json=STORED_CONVERSATION)
        return httpx.Response(404, json={"error": "Endpoint not found"})

    return handler


class TestChatStream:
    """Test consuming a streamed reply."""

    @pytest.mark.asyncio
    async def test_events_split_across_reads_are_applied(self):
        # Arrange
        requests = []
        handler = stream_handler(
            [b'data: {"cont', b'ent": "Hello"}\n\ndata: {"content": " there"}', b"\n\n", b'data: {"done": true}\n\n'],
            requests=requests,
        )
        client = make_client(handler)
        stream = client.stream_message(1, "hi")
        transcripts = []

        # Act
        async for _ in stream.events():
            transcripts.append(stream.transcript)

        # Assert
        assert transcripts == ["Hello", "Hello there", "Hello there"]
        assert stream.done is True
        assert stream.error is None
        assert json.loads(requests[0].content) == {"content": "hi"}
        assert requests[0].headers["Authorization"] == "Bearer test-token"

    @pytest.mark.asyncio
    async def test_transcript_discarded_and_conversation_refetched(self):
        client = make_client(stream_handler([b'data: {"content": "Hello"}\n\ndata: {"done": true}\n\n']))
        stream = client.stream_message(1, "hi")

        conversation = await stream.run()

        assert stream.transcript == ""
        assert conversation == STORED_CONVERSATION
        assert stream.conversation == STORED_CONVERSATION

    @pytest.mark.asyncio
    async def test_image_event_appends_markdown(self):
        client = make_client(
            stream_handler([b'data: {"content": "Look"}\n\ndata: {"imageUrl": "data:image/png;base64,AAAA"}\n\n'])
        )
        stream = client.stream_message(1, "draw")
        seen = []

        async for _ in stream.events():
            seen.append(stream.transcript)

        assert seen[-1] == "Look\n\n![Generated Image](data:image/png;base64,AAAA)"

    @pytest.mark.asyncio
    async def test_error_event_is_recorded(self):
        client = make_client(
            stream_handler([b'data: {"content": "par"}\n\ndata: {"error": "Failed to send message"}\n\n'])
        )
        stream = client.stream_message(1, "hi")

        await stream.run()

        assert stream.error == "Failed to send message"
        assert stream.done is False
        assert stream.conversation == STORED_CONVERSATION

    @pytest.mark.asyncio
    async def test_error_status_raises_and_still_refetches(self):
        client = make_client(stream_handler([], status_code=500))
        stream = client.stream_message(1, "hi")

        with pytest.raises(ChatClientError) as exc_info:
            await stream.run()

        assert exc_info.value.status_code == 500
        assert stream.error == "Failed to send message"
        assert stream.conversation == STORED_CONVERSATION

    @pytest.mark.asyncio
    async def test_cancel_stops_forwarding(self):
        # Arrange
        client = make_client(
            stream_handler([b'data: {"content": "one"}\n\n', b'data: {"content": "two"}\n\n'])
        )
        stream = client.stream_message(1, "hi")
        received = []

        # Act
        async for event in stream.events():
            received.append(event)
            stream.cancel()

        # Assert
        assert received == [{"content": "one"}]
        assert stream.cancelled is True
        assert stream.transcript == ""
        assert stream.conversation == STORED_CONVERSATION


class TestChatClientRequests:
    """Test the plain REST wrappers."""

    @pytest.mark.asyncio
    async def test_create_conversation_sends_title(self):
        requests = []

        async def handler(request):
            requests.append(request)
            return httpx.Response(201, json={"id": 3, "title": "Roast"})

        client = make_client(handler)

        result = await client.create_conversation("Roast")

        assert result["id"] == 3
        assert json.loads(requests[0].content) == {"title": "Roast"}

    @pytest.mark.asyncio
    async def test_error_status_raises_with_message(self):
        async def handler(request):
            return httpx.Response(404, json={"error": "Conversation not found"})

        client = make_client(handler)

        with pytest.raises(ChatClientError) as exc_info:
            await client.get_conversation(9)

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Conversation not found"

    @pytest.mark.asyncio
    async def test_delete_conversation(self):
        async def handler(request):
            assert request.method == "DELETE"
            assert request.url.path == "/api/conversations/5"
            return httpx.Response(204)

        client = make_client(handler)

        assert await client.delete_conversation(5) is None

    @pytest.mark.asyncio
    async def test_guest_token_is_used_afterwards(self):
        seen_headers = []

        async def handler(request):
            seen_headers.append(request.headers.get("Authorization"))
            if request.url.path == "/api/auth/guest-token":
                return httpx.Response(
                    200,
                    json={"access_token": "guest-jwt", "token_type": "Bearer", "expires_in": 60, "guest_id": "guest.1"},
                )
            return httpx.Response(200, json=[])

        client = make_client(handler, token=None)

        await client.fetch_guest_token()
        await client.list_conversations()

        assert seen_headers == [None, "Bearer guest-jwt"]

    @pytest.mark.asyncio
    async def test_generate_image_uses_camel_case_source(self):
        requests = []

        async def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"b64_json": "AAAA", "mimeType": "image/png"})

        client = make_client(handler)

        result = await client.generate_image("a cat", source_image="YWJj")

        assert result == {"b64_json": "AAAA", "mimeType": "image/png"}
        assert json.loads(requests[0].content) == {"prompt": "a cat", "sourceImage": "YWJj"}


class TestChatStreamCancel:
    """Test cancelling a reply in flight."""

    @pytest.mark.asyncio
    async def test_cancel_between_events_of_one_read(self):
        # Arrange
        client = make_client(
            stream_handler([b'data: {"content": "one"}\n\ndata: {"content": "two"}\n\n'])
        )
        stream = client.stream_message(1, "hi")
        received = []

        # Act
        async for event in stream.events():
            received.append(event)
            stream.cancel()

        # Assert
        assert received == [{"content": "one"}]
        assert stream.conversation == STORED_CONVERSATION

    @pytest.mark.asyncio
    async def test_cancel_interrupts_stalled_read(self):
        # Arrange
        body = StalledStream([b'data: {"content": "one"}\n\n'])

        async def handler(request: httpx.Request):
            if request.method == "POST":
                return httpx.Response(
                    200, headers={"content-type": "text/event-stream"}, stream=body
                )
            return httpx.Response(200, json=STORED_CONVERSATION)

        client = make_client(handler)
        stream = client.stream_message(1, "hi")
        received = []
        first_event = asyncio.Event()

        async def consume():
            async for event in stream.events():
                received.append(event)
                first_event.set()

        # Act
        task = asyncio.create_task(consume())
        await asyncio.wait_for(first_event.wait(), timeout=2)
        stream.cancel()
        await asyncio.wait_for(task, timeout=2)

        # Assert
        assert received == [{"content": "one"}]
        assert stream.cancelled is True
        assert body.closed is True
        assert stream.transcript == ""
        assert stream.conversation == STORED_CONVERSATION
