"""Interactive command-line chat with the inventory assistant."""

import asyncio
import logging
import sys
from collections.abc import Callable

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt

from config import configure_logging, get_settings
from container import ServiceContainer
from infrastructure.sheets_client import SheetsConnectionError
from logic.chat import AgentService

logger = logging.getLogger(__name__)

CLI_CHAT_ID = "cli"

WELCOME = (
    "[bold green]Inventory Assistant[/bold green]\n"
    "Tell me what to do with your inventory spreadsheet.\n\n"
    "Try commands like:\n"
    "- Read the inventory\n"
    "- Add a new item called Laptop, quantity 5, price 1200\n"
    "- Update the quantity of Mouse to 55\n\n"
    "[yellow]Type 'exit' to quit[/yellow]"
)


async def chat_loop(
    agent: AgentService,
    console: Console,
    ask: Callable[[], str] | None = None,
) -> None:
    """Read prompts until the user types exit.

    Args:
        agent: Agent service answering each prompt
        console: Console replies are printed to
        ask: Reads one line of input; defaults to a rich prompt
    """
    if ask is None:

        def ask() -> str:
            return Prompt.ask("[bold cyan]You[/bold cyan]", console=console)

    while True:
        try:
            prompt = await asyncio.to_thread(ask)
        except (EOFError, KeyboardInterrupt):
            prompt = "exit"

        if prompt.lower() == "exit":
            console.print("Exiting chat.")
            break

        if not prompt.strip():
            continue

        with console.status("[bold green]Thinking...[/bold green]"):
            reply = await agent.process_message(CLI_CHAT_ID, prompt)

        console.print(f"[bold green]Assistant:[/bold green] {escape(reply)}")


async def run(console: Console) -> int:
    settings = get_settings()
    configure_logging(settings.app_log_level)

    container = ServiceContainer(settings)
    try:
        await container.start()
    except SheetsConnectionError as e:
        logger.error(str(e))
        return 1

    try:
        console.print(Panel.fit(WELCOME, title=settings.openai_model, border_style="green"))
        await chat_loop(container.agent, console)
    finally:
        await container.close()
    return 0


def main() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(run(Console())))


if __name__ == "__main__":
    main()
