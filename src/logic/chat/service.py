"""Agent orchestrator with tool-calling capabilities.

Each user message runs one turn:
- MessageFormatter: Builds OpenAI messages for tool calls and results
- ToolDispatcher: Executes the requested inventory tool
- AgentService: Drives the per-turn state machine against a chat's conversation
"""

import logging
from enum import Enum
from typing import Any

from openai.types.chat import (
    ChatCompletionAssistantMessageParam,
    ChatCompletionMessage,
    ChatCompletionToolMessageParam,
    ChatCompletionUserMessageParam,
)

from domain.entities import ToolEnvelope
from infrastructure.openai_client import OpenAIClient
from logic.chat.tools import ToolDispatcher, parse_tool_call
from logic.sessions import Conversation, ConversationStore

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an assistant that manages an inventory spreadsheet.
Use readInventory to look up what is in stock, addRow to add a new item and
updateItemQuantity to change the quantity of an existing item.
Request at most one tool per reply. After a tool runs, tell the user what
happened in plain language, including any error it reported.
If the user leaves out a name, quantity or price, ask for it instead of guessing."""

ERROR_REPLY = "I encountered an error. Please try rephrasing your request."
UNPROCESSED_REPLY = "Sorry, I could not process that request."
NO_FOLLOWUP_REPLY = "Sorry, I could not produce a response after running that action."


class TurnState(Enum):
    """States of a single user turn."""

    AWAITING_MODEL_REPLY = "awaiting_model_reply"
    AWAITING_TOOL_FOLLOWUP = "awaiting_tool_followup"
    DONE = "done"


class MessageFormatter:
    """Formats messages exchanged with the OpenAI API."""

    @staticmethod
    def create_user_message(content: str) -> ChatCompletionUserMessageParam:
        return ChatCompletionUserMessageParam(role="user", content=content)

    @staticmethod
    def create_assistant_message(content: str) -> ChatCompletionAssistantMessageParam:
        return ChatCompletionAssistantMessageParam(role="assistant", content=content)

    @staticmethod
    def create_assistant_message_with_tools(
        content: str | None,
        tool_calls: list[Any],
    ) -> ChatCompletionAssistantMessageParam:
        """Create an assistant message carrying the model's tool calls.

        Args:
            content: Text that accompanied the tool calls, if any
            tool_calls: Tool calls from the OpenAI response

        Returns:
            ChatCompletionAssistantMessageParam: Formatted assistant message
        """
        return ChatCompletionAssistantMessageParam(
            role="assistant",
            content=content,
            tool_calls=[
                {
                    "id": tc.id,
                    "type": "function",
                    "function": {
                        "name": tc.function.name,
                        "arguments": tc.function.arguments,
                    },
                }
                for tc in tool_calls
            ],
        )

    @staticmethod
    def create_tool_message(
        tool_call_id: str,
        envelope: ToolEnvelope,
    ) -> ChatCompletionToolMessageParam:
        """Create a tool result message holding the serialized envelope."""
        return ChatCompletionToolMessageParam(
            role="tool",
            tool_call_id=tool_call_id,
            content=envelope.model_dump_json(),
        )


class AgentService:
    """Runs user turns: model reply, at most one tool call, final reply.

    A turn never raises. Model failures are logged and turned into a generic
    apology, and the chat's conversation stays open for the next message.
    """

    def __init__(
        self,
        openai_client: OpenAIClient,
        dispatcher: ToolDispatcher,
        conversations: ConversationStore,
    ) -> None:
        """Initialize agent service.

        Args:
            openai_client: Model client
            dispatcher: Tool dispatcher for inventory operations
            conversations: Per-chat conversation store
        """
        self.openai_client = openai_client
        self.dispatcher = dispatcher
        self.conversations = conversations
        self.message_formatter = MessageFormatter()

    async def process_message(self, chat_id: str, user_message: str) -> str:
        """Process a user message and return the reply text.

        Turns from the same chat run one at a time.

        Args:
            chat_id: Chat identity the message came from
            user_message: Raw user text

        Returns:
            str: Reply to show the user
        """
        logger.info(f"Processing message in chat {chat_id}")
        conversation = self.conversations.get_or_create(chat_id)

        async with conversation.lock:
            try:
                return await self._run_turn(conversation, user_message)
            except Exception as e:
                logger.error(
                    f"Error communicating with model for chat {chat_id}: {e}",
                    exc_info=True,
                )
                return ERROR_REPLY

    async def _run_turn(self, conversation: Conversation, user_message: str) -> str:
        conversation.messages.append(
            self.message_formatter.create_user_message(user_message)
        )

        state = TurnState.AWAITING_MODEL_REPLY
        reply = UNPROCESSED_REPLY
        while state is not TurnState.DONE:
            response = await self.openai_client.create_chat_completion(
                messages=conversation.messages,
                tools=conversation.tools,
            )
            llm_message = response.choices[0].message if response.choices else None

            if state is TurnState.AWAITING_MODEL_REPLY:
                state, reply = await self._on_model_reply(conversation, llm_message)
            else:
                state, reply = self._on_tool_followup(conversation, llm_message)

        return reply

    async def _on_model_reply(
        self,
        conversation: Conversation,
        llm_message: ChatCompletionMessage | None,
    ) -> tuple[TurnState, str]:
        if llm_message is not None and llm_message.tool_calls:
            await self._handle_tool_calls(conversation, llm_message)
            return TurnState.AWAITING_TOOL_FOLLOWUP, NO_FOLLOWUP_REPLY

        if llm_message is not None and llm_message.content:
            return TurnState.DONE, self._record_reply(conversation, llm_message.content)

        logger.warning(
            f"No text or tool call in model reply for chat {conversation.chat_id}"
        )
        return TurnState.DONE, UNPROCESSED_REPLY

    def _on_tool_followup(
        self,
        conversation: Conversation,
        llm_message: ChatCompletionMessage | None,
    ) -> tuple[TurnState, str]:
        if llm_message is not None and llm_message.content:
            return TurnState.DONE, self._record_reply(conversation, llm_message.content)

        # Not recorded: an empty follow-up may still carry unanswered tool calls.
        logger.warning(
            f"No final text after tool call for chat {conversation.chat_id}"
        )
        return TurnState.DONE, NO_FOLLOWUP_REPLY

    def _record_reply(self, conversation: Conversation, content: str) -> str:
        conversation.messages.append(
            self.message_formatter.create_assistant_message(content)
        )
        logger.info(f"Agent produced final response for chat {conversation.chat_id}")
        return content

    async def _handle_tool_calls(
        self, conversation: Conversation, llm_message: ChatCompletionMessage
    ) -> None:
        """Run the first requested tool and answer every call in the reply.

        Only one tool runs per turn. Any further calls get an error result so
        the conversation history stays valid for the API.
        """
        tool_calls = list(llm_message.tool_calls or [])
        logger.info(f"Model requested {len(tool_calls)} tool call(s)")

        results = [
            self.message_formatter.create_tool_message(
                tool_calls[0].id, await self._execute_tool_call(tool_calls[0])
            )
        ]
        for skipped in tool_calls[1:]:
            results.append(
                self.message_formatter.create_tool_message(
                    skipped.id,
                    ToolEnvelope(
                        name=skipped.function.name,
                        content="Error: Only one tool call runs per message; this call was skipped.",
                        is_error=True,
                    ),
                )
            )

        # Appended together so a failure above leaves the history untouched.
        conversation.messages.append(
            self.message_formatter.create_assistant_message_with_tools(
                llm_message.content, tool_calls
            )
        )
        conversation.messages.extend(results)

    async def _execute_tool_call(self, tool_call: Any) -> ToolEnvelope:
        name = tool_call.function.name
        try:
            parsed = parse_tool_call(tool_call.id, name, tool_call.function.arguments)
        except ValueError as e:
            logger.error(f"Invalid tool arguments for {name}: {e}")
            return ToolEnvelope(
                name=name,
                content=f"Error: Invalid tool arguments for {name}. Please try again with a JSON object.",
                is_error=True,
            )

        return await self.dispatcher.dispatch(parsed)
