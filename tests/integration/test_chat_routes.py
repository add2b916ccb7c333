"""
Integration tests for conversation and message routes.

Tests the complete HTTP request/response cycle including:
- Authentication
- Request validation
- Ownership checks
- Streamed replies and persistence
"""

import pytest

from tests.fixtures.conversation_fixtures import auth_headers, parse_sse_body


async def _create(client, user_id="alice", **body):
    response = await client.post("/api/conversations", json=body, headers=auth_headers(user_id))
    return await response.get_json()


class TestConversationCrud:
    """Test list, get, create and delete."""

    @pytest.mark.asyncio
    async def test_create_conversation_default_title(self, client):
        # Act
        response = await client.post("/api/conversations", headers=auth_headers())
        data = await response.get_json()

        # Assert
        assert response.status_code == 201
        assert data["title"] == "New Chat"
        assert data["userId"] == "alice"
        assert set(data) == {"id", "userId", "title", "createdAt"}

    @pytest.mark.asyncio
    async def test_create_conversation_with_title(self, client):
        data = await _create(client, title="Roast session")

        assert data["title"] == "Roast session"

    @pytest.mark.asyncio
    async def test_list_conversations_newest_first(self, client):
        # Arrange
        first = await _create(client, title="first")
        second = await _create(client, title="second")
        await _create(client, user_id="bob", title="not yours")

        # Act
        response = await client.get("/api/conversations", headers=auth_headers())
        data = await response.get_json()

        # Assert
        assert response.status_code == 200
        assert [c["id"] for c in data] == [second["id"], first["id"]]

    @pytest.mark.asyncio
    async def test_get_conversation_includes_messages(self, client):
        created = await _create(client)

        response = await client.get(f"/api/conversations/{created['id']}", headers=auth_headers())
        data = await response.get_json()

        assert response.status_code == 200
        assert data["id"] == created["id"]
        assert data["messages"] == []

    @pytest.mark.asyncio
    async def test_get_conversation_of_other_user_is_404(self, client):
        created = await _create(client)

        response = await client.get(f"/api/conversations/{created['id']}", headers=auth_headers("bob"))
        data = await response.get_json()

        assert response.status_code == 404
        assert data == {"error": "Conversation not found"}

    @pytest.mark.asyncio
    async def test_delete_conversation(self, client):
        created = await _create(client)

        response = await client.delete(f"/api/conversations/{created['id']}", headers=auth_headers())
        follow_up = await client.get(f"/api/conversations/{created['id']}", headers=auth_headers())

        assert response.status_code == 204
        assert follow_up.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_conversation_of_other_user_is_404(self, client):
        created = await _create(client)

        response = await client.delete(f"/api/conversations/{created['id']}", headers=auth_headers("bob"))
        still_there = await client.get(f"/api/conversations/{created['id']}", headers=auth_headers())

        assert response.status_code == 404
        assert still_there.status_code == 200

    @pytest.mark.asyncio
    async def test_non_integer_id_is_404(self, client):
        response = await client.get("/api/conversations/abc", headers=auth_headers())

        assert response.status_code == 404


class TestAuthentication:
    """Test bearer token enforcement."""

    @pytest.mark.asyncio
    async def test_missing_token_is_401(self, client):
        response = await client.get("/api/conversations")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_token_is_401(self, client):
        response = await client.get(
            "/api/conversations", headers={"Authorization": "Bearer not-a-jwt"}
        )
        data = await response.get_json()

        assert response.status_code == 401
        assert "error" in data

    @pytest.mark.asyncio
    async def test_send_message_without_token_is_401(self, client, gateway):
        response = await client.post("/api/conversations/1/messages", json={"content": "hi"})

        assert response.status_code == 401
        assert gateway.histories == []


class TestSendMessage:
    """Test the streamed send-message endpoint."""

    @pytest.mark.asyncio
    async def test_round_trip_create_send_fetch(self, client, gateway):
        # Arrange
        gateway.chunks = ["Oh great", ", another one."]
        created = await _create(client)
        url = f"/api/conversations/{created['id']}"

        # Act
        response = await client.post(f"{url}/messages", json={"content": "hi Zak"}, headers=auth_headers())
        body = await response.get_data(as_text=True)
        fetched = await (await client.get(url, headers=auth_headers())).get_json()

        # Assert
        assert response.status_code == 200
        assert response.mimetype == "text/event-stream"
        assert response.headers["Cache-Control"] == "no-cache, no-transform"
        assert parse_sse_body(body) == [
            {"content": "Oh great"},
            {"content": ", another one."},
            {"done": True},
        ]
        assert [(m["role"], m["content"]) for m in fetched["messages"]] == [
            ("user", "hi Zak"),
            ("assistant", "Oh great, another one."),
        ]
        assert fetched["messages"][0]["conversationId"] == created["id"]

    @pytest.mark.asyncio
    async def test_image_directive_in_reply(self, client, gateway):
        # Arrange
        gateway.chunks = ["Fine. [[GENERATE_IMAGE: a cat]]"]
        created = await _create(client)

        # Act
        response = await client.post(
            f"/api/conversations/{created['id']}/messages",
            json={"content": "draw a cat"},
            headers=auth_headers(),
        )
        events = parse_sse_body(await response.get_data(as_text=True))

        # Assert
        assert events[1]["imageUrl"].startswith("data:image/png;base64,")
        assert events[-1] == {"done": True}
        assert gateway.image_requests[0]["prompt"] == "a cat"

    @pytest.mark.asyncio
    async def test_missing_content_is_400(self, client, gateway):
        created = await _create(client)

        response = await client.post(
            f"/api/conversations/{created['id']}/messages", json={}, headers=auth_headers()
        )

        assert response.status_code == 400
        assert gateway.histories == []

    @pytest.mark.asyncio
    async def test_empty_content_is_400(self, client):
        created = await _create(client)

        response = await client.post(
            f"/api/conversations/{created['id']}/messages", json={"content": ""}, headers=auth_headers()
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_send_to_other_users_conversation_is_404(self, client, gateway):
        created = await _create(client)

        response = await client.post(
            f"/api/conversations/{created['id']}/messages",
            json={"content": "hi"},
            headers=auth_headers("bob"),
        )

        assert response.status_code == 404
        assert gateway.histories == []

    @pytest.mark.asyncio
    async def test_upstream_failure_before_stream_is_500(self, client, gateway):
        # Arrange
        gateway.fail_before_stream = True
        created = await _create(client)
        url = f"/api/conversations/{created['id']}"

        # Act
        response = await client.post(f"{url}/messages", json={"content": "hello?"}, headers=auth_headers())
        data = await response.get_json()
        fetched = await (await client.get(url, headers=auth_headers())).get_json()

        # Assert
        assert response.status_code == 500
        assert data == {"error": "Failed to send message"}
        assert [m["role"] for m in fetched["messages"]] == ["user"]

    @pytest.mark.asyncio
    async def test_upstream_failure_mid_stream_sends_error_event(self, client, gateway):
        gateway.chunks = ["one", "two"]
        gateway.fail_after = 1
        created = await _create(client)

        response = await client.post(
            f"/api/conversations/{created['id']}/messages", json={"content": "hi"}, headers=auth_headers()
        )
        events = parse_sse_body(await response.get_data(as_text=True))

        assert response.status_code == 200
        assert events == [{"content": "one"}, {"error": "Failed to send message"}]
