"""OpenAI client wrapper with tool-calling support."""

import logging
from typing import Any

from openai import AsyncOpenAI
from openai.types.chat import (
    ChatCompletion,
    ChatCompletionMessageParam,
    ChatCompletionToolParam,
)

logger = logging.getLogger(__name__)


class OpenAIClient:
    """Wrapper for the OpenAI async client, used as the model endpoint.

    Any OpenAI-compatible server works, which includes Gemini through its
    OpenAI compatibility layer.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        timeout: int = 60,
        max_retries: int = 3,
        temperature: float = 0.2,
    ) -> None:
        """Initialize OpenAI client.

        Args:
            api_key: API key for the model endpoint
            base_url: Base URL for API (supports OpenRouter, Ollama, Gemini)
            model: Model name to use
            timeout: Request timeout in seconds
            max_retries: Maximum retry attempts
            temperature: Sampling temperature for every completion
        """
        self.model = model
        self.temperature = temperature
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
        )
        logger.info(f"Model client initialized with model: {model}, base_url: {base_url}")

    async def create_chat_completion(
        self,
        messages: list[ChatCompletionMessageParam],
        tools: list[ChatCompletionToolParam] | None = None,
    ) -> ChatCompletion:
        """Create a chat completion, letting the model request at most one tool.

        Args:
            messages: Conversation so far
            tools: Tool definitions the model may call

        Returns:
            ChatCompletion: Model response
        """
        logger.debug(f"Creating chat completion with {len(messages)} messages")

        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
        }

        if tools:
            kwargs["tools"] = tools
            kwargs["tool_choice"] = "auto"
            kwargs["parallel_tool_calls"] = False

        try:
            response: ChatCompletion = await self.client.chat.completions.create(
                **kwargs
            )
            logger.debug(f"Chat completion successful: {response.id}")
            return response

        except Exception as e:
            logger.error(f"Error creating chat completion: {e}")
            raise

    async def close(self) -> None:
        """Close the OpenAI client."""
        await self.client.close()
        logger.info("Model client closed")
