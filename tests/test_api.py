"""Tests for the chat, conversation and inventory endpoints."""

import pytest
from httpx import AsyncClient

from tests.conftest import FakeSheetsBackend, ScriptedModelClient, text_completion, tool_completion


@pytest.mark.asyncio
async def test_send_message(client: AsyncClient, model: ScriptedModelClient):
    model.queue(text_completion("Hi there."))

    response = await client.post("/chats/alice/messages", json={"content": "Hello"})

    assert response.status_code == 201
    data = response.json()
    assert data["chat_id"] == "alice"
    assert data["role"] == "assistant"
    assert data["content"] == "Hi there."


@pytest.mark.asyncio
async def test_send_message_runs_tool(
    client: AsyncClient, model: ScriptedModelClient, sheet: FakeSheetsBackend
):
    model.queue(
        tool_completion(("updateItemQuantity", {"itemName": "keyboard", "newQuantity": 12})),
        text_completion("Keyboard is now at 12."),
    )

    response = await client.post(
        "/chats/alice/messages", json={"content": "Set keyboard to 12"}
    )

    assert response.json()["content"] == "Keyboard is now at 12."
    assert sheet.rows[2][1] == 12


@pytest.mark.asyncio
async def test_send_empty_message(client: AsyncClient):
    """Empty messages fail validation."""
    response = await client.post("/chats/alice/messages", json={"content": ""})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_stream_message(client: AsyncClient, model: ScriptedModelClient):
    model.queue(text_completion("Streaming hello."))

    response = await client.post(
        "/chats/bob/messages/stream", json={"content": "Hello"}
    )

    assert response.status_code == 200
    body = response.text
    assert "event: typing" in body
    assert "event: message" in body
    assert "Streaming hello." in body
    assert "event: done" in body


@pytest.mark.asyncio
async def test_conversation_lifecycle(client: AsyncClient, model: ScriptedModelClient):
    """A conversation appears after the first message and goes away on reset."""
    assert (await client.get("/chats")).json() == {"conversations": [], "total": 0}

    model.queue(text_completion("Hello."))
    await client.post("/chats/carol/messages", json={"content": "Hi"})

    listing = (await client.get("/chats")).json()
    assert listing["total"] == 1
    assert listing["conversations"][0]["chat_id"] == "carol"
    assert listing["conversations"][0]["message_count"] == 2

    detail = await client.get("/chats/carol")
    assert detail.status_code == 200

    delete_response = await client.delete("/chats/carol")
    assert delete_response.status_code == 204

    assert (await client.get("/chats/carol")).status_code == 404


@pytest.mark.asyncio
async def test_reset_unknown_chat(client: AsyncClient):
    response = await client.delete("/chats/nobody")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_read_inventory_endpoint(client: AsyncClient):
    response = await client.get("/inventory")

    assert response.status_code == 200
    assert response.json()["summary"].startswith("Current Inventory:\n- Item: Mouse")
