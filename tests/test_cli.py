"""Tests for the interactive command-line loop."""

import io

import pytest
from rich.console import Console

import cli
from cli import CLI_CHAT_ID, chat_loop
from container import ServiceContainer
from infrastructure.sheets_client import SheetsConnectionError
from tests.conftest import ScriptedModelClient, text_completion


def scripted_input(*lines: str):
    remaining = list(lines)

    def ask() -> str:
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return ask


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200)


@pytest.mark.asyncio
async def test_exit_stops_without_model_call(container, model: ScriptedModelClient, console):
    await chat_loop(container.agent, console, ask=scripted_input("EXIT", "never read"))

    assert model.requests == []
    assert console.file.getvalue().strip() == "Exiting chat."


@pytest.mark.asyncio
async def test_prompts_are_answered_until_exit(
    container, model: ScriptedModelClient, console
):
    model.queue(text_completion("You have 2 items."))

    await chat_loop(
        container.agent, console, ask=scripted_input("How many items?", "   ", "exit")
    )

    output = console.file.getvalue()
    assert "Assistant: You have 2 items." in output
    assert output.rstrip().endswith("Exiting chat.")
    assert len(model.requests) == 1
    assert container.conversations.get(CLI_CHAT_ID) is not None


@pytest.mark.asyncio
async def test_end_of_input_exits(container, console):
    await chat_loop(container.agent, console, ask=scripted_input())

    assert "Exiting chat." in console.file.getvalue()


@pytest.mark.asyncio
async def test_run_exits_when_spreadsheet_unreachable(settings, console, monkeypatch):
    async def unreachable(self):
        raise SheetsConnectionError("Spreadsheet not found, check the ID.")

    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    monkeypatch.setattr(ServiceContainer, "start", unreachable)

    assert await cli.run(console) == 1
    assert "Exiting chat." not in console.file.getvalue()
