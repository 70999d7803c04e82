"""Pytest configuration and shared fixtures."""

import copy
import json
import re
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from openai.types.chat import ChatCompletion

from api.app import AppBuilder
from config import Settings
from container import ServiceContainer
from logic.inventory import InventoryService

HEADERS = ["Name", "Quantity", "Price", "Last Updated"]

_CELL = re.compile(r"!([A-Z]+)(\d+)$")


def column_index(letters: str) -> int:
    index = 0
    for letter in letters:
        index = index * 26 + (ord(letter) - ord("A") + 1)
    return index - 1


class FakeSheetsBackend:
    """In-memory stand-in for the Sheets values API.

    Reads return strings, as the real API does for formatted values.
    """

    def __init__(self, rows: list[list[Any]] | None = None) -> None:
        self.rows: list[list[Any]] = [list(row) for row in rows or []]
        self.calls: list[tuple[str, Any]] = []
        self.fail_reads = False
        self.fail_writes = False

    async def get_values(self, range_a1: str) -> list[list[Any]]:
        self.calls.append(("get", range_a1))
        if self.fail_reads:
            raise RuntimeError("sheets read failed")
        return [[str(cell) for cell in row] for row in self.rows]

    async def append_row(self, range_a1: str, row: list[Any]) -> None:
        self.calls.append(("append", range_a1))
        if self.fail_writes:
            raise RuntimeError("sheets write failed")
        self.rows.append(list(row))

    async def batch_update(self, data: dict[str, list[list[Any]]]) -> None:
        self.calls.append(("batch_update", dict(data)))
        if self.fail_writes:
            raise RuntimeError("sheets write failed")
        for range_a1, values in data.items():
            match = _CELL.search(range_a1)
            assert match, f"unexpected range {range_a1}"
            col = column_index(match.group(1))
            row = self.rows[int(match.group(2)) - 1]
            row.extend([""] * (col + 1 - len(row)))
            row[col] = values[0][0]


class SteppingClock:
    """Clock that moves forward one second every time it is read."""

    def __init__(self, start: datetime = datetime(2024, 5, 1, 9, 30, 0)) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


def make_completion(message: dict[str, Any], finish_reason: str = "stop") -> ChatCompletion:
    return ChatCompletion.model_validate(
        {
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "created": 0,
            "model": "test-model",
            "choices": [
                {"index": 0, "finish_reason": finish_reason, "message": message}
            ],
        }
    )


def text_completion(content: str | None) -> ChatCompletion:
    return make_completion({"role": "assistant", "content": content})


def tool_completion(*calls: tuple[str, Any]) -> ChatCompletion:
    """Completion requesting tool calls given as (name, arguments) pairs.

    Arguments that are not strings are JSON encoded.
    """
    return make_completion(
        {
            "role": "assistant",
            "content": None,
            "tool_calls": [
                {
                    "id": f"call_{index}",
                    "type": "function",
                    "function": {
                        "name": name,
                        "arguments": args if isinstance(args, str) else json.dumps(args),
                    },
                }
                for index, (name, args) in enumerate(calls, start=1)
            ],
        },
        finish_reason="tool_calls",
    )


class ScriptedModelClient:
    """Model client that returns queued completions in order."""

    def __init__(self, *replies: ChatCompletion | Exception) -> None:
        self.replies = list(replies)
        self.requests: list[dict[str, Any]] = []
        self.closed = False

    def queue(self, *replies: ChatCompletion | Exception) -> None:
        self.replies.extend(replies)

    async def create_chat_completion(self, messages, tools=None) -> ChatCompletion:
        self.requests.append({"messages": copy.deepcopy(messages), "tools": tools})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    """Settings that do not depend on the environment."""
    return Settings(
        openai_api_key="test-key",
        spreadsheet_id="test-spreadsheet",
        _env_file=None,  # type: ignore[call-arg]
    )


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def sheet() -> FakeSheetsBackend:
    """Sheet with headers and two items."""
    return FakeSheetsBackend(
        [
            HEADERS,
            ["Mouse", "50", "25", "2024-01-01 10:00:00"],
            ["Keyboard", "10", "45", "2024-01-01 10:00:00"],
        ]
    )


@pytest.fixture
def inventory(sheet: FakeSheetsBackend, clock: SteppingClock) -> InventoryService:
    return InventoryService(sheet, worksheet_name="Sheet1", clock=clock)


@pytest.fixture
def model() -> ScriptedModelClient:
    return ScriptedModelClient()


@pytest.fixture
def container(
    settings: Settings, model: ScriptedModelClient, inventory: InventoryService
) -> ServiceContainer:
    return ServiceContainer.from_parts(settings, model, inventory)  # type: ignore[arg-type]


@pytest_asyncio.fixture
async def client(
    settings: Settings, container: ServiceContainer
) -> AsyncGenerator[AsyncClient, None]:
    """Create an HTTP client for testing with initialized app."""
    app_builder = AppBuilder(settings=settings, container=container)

    async with AsyncClient(
        transport=ASGITransport(app=app_builder.app),
        base_url="http://test",
    ) as ac:
        yield ac
