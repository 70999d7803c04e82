"""Example client for the inventory agent API."""

import asyncio
import json
from typing import Any

import httpx


class InventoryAgentClient:
    """Client for interacting with the inventory agent API."""

    def __init__(self, base_url: str = "http://localhost:8000") -> None:
        """Initialize the client.

        Args:
            base_url: Base URL of the API
        """
        self.base_url = base_url
        self.client = httpx.AsyncClient(base_url=base_url, timeout=60.0)

    async def close(self) -> None:
        """Close the client."""
        await self.client.aclose()

    async def list_chats(self) -> dict[str, Any]:
        """List active conversations."""
        response = await self.client.get("/chats")
        response.raise_for_status()
        return response.json()

    async def reset_chat(self, chat_id: str) -> None:
        """Forget a chat's conversation.

        Args:
            chat_id: Chat identifier
        """
        response = await self.client.delete(f"/chats/{chat_id}")
        response.raise_for_status()

    async def send_message(self, chat_id: str, content: str) -> dict[str, Any]:
        """Send a message and get the assistant's reply.

        Args:
            chat_id: Chat identifier
            content: Message content

        Returns:
            dict: Assistant reply
        """
        response = await self.client.post(
            f"/chats/{chat_id}/messages",
            json={"content": content},
        )
        response.raise_for_status()
        return response.json()

    async def send_message_stream(self, chat_id: str, content: str) -> None:
        """Send a message and print the SSE events of the reply."""
        async with self.client.stream(
            "POST",
            f"/chats/{chat_id}/messages/stream",
            json={"content": content},
        ) as response:
            response.raise_for_status()
            async for line in response.aiter_lines():
                if line.startswith("data: "):
                    data = line[6:]
                    try:
                        print(f"Event: {json.loads(data)}")
                    except json.JSONDecodeError:
                        print(f"Raw data: {data}")

    async def read_inventory(self) -> str:
        """Fetch the inventory summary without going through the model."""
        response = await self.client.get("/inventory")
        response.raise_for_status()
        return response.json()["summary"]

    async def health_check(self) -> dict[str, Any]:
        """Check API health."""
        response = await self.client.get("/health")
        response.raise_for_status()
        return response.json()


async def main():
    """Example usage of the inventory agent API client."""
    client = InventoryAgentClient()
    chat_id = "example"

    try:
        print("=== Health Check ===")
        health = await client.health_check()
        print(f"Status: {health['status']}")
        print()

        print("=== Inventory ===")
        print(await client.read_inventory())
        print()

        print("=== Sending Message ===")
        message = "Add 20 cookies at $75 each"
        print(f"User: {message}")
        reply = await client.send_message(chat_id, message)
        print(f"Assistant: {reply['content']}")
        print()

        print("=== Streaming Message ===")
        await client.send_message_stream(chat_id, "How many cookies do we have?")
        print()

        print("=== Active Chats ===")
        chats = await client.list_chats()
        print(f"Total chats: {chats['total']}")
        print()

        print("=== Resetting Chat ===")
        await client.reset_chat(chat_id)
        print(f"Chat {chat_id} reset")

    finally:
        await client.close()


if __name__ == "__main__":
    asyncio.run(main())
