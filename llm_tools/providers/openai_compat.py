"""OpenAI (and OpenAI-compatible endpoint) provider."""

import logging

from openai import AsyncOpenAI

from ..errors import BackendError
from .base import (
    ChatRequest,
    ChatResponse,
    Completion,
    CompletionChoice,
    CompletionRequest,
    CompletionResponse,
    ModelBackend,
    ModelType,
    ProviderConfig,
    Usage,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"


def _usage(raw) -> Usage:
    if raw is None:
        return Usage()
    return Usage(
        prompt_tokens=raw.prompt_tokens or 0,
        completion_tokens=raw.completion_tokens or 0,
        total_tokens=raw.total_tokens or 0,
    )


class OpenAIProvider(ModelBackend):
    """Provider for the OpenAI API or any OpenAI-compatible endpoint."""

    def __init__(self, config: ProviderConfig):
        super().__init__(config)
        self.client = self._build_client(config)

    @staticmethod
    def _build_client(config: ProviderConfig) -> AsyncOpenAI:
        return AsyncOpenAI(
            api_key=config.api_key or "dummy-key",
            base_url=config.base_url or DEFAULT_BASE_URL,
            timeout=config.timeout,
            max_retries=config.max_retries,
        )

    @property
    def model_type(self) -> ModelType:
        return ModelType.OPENAI

    def set_config(self, config: ProviderConfig) -> None:
        super().set_config(config)
        self.client = self._build_client(config)

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """
        Query a chat model.

        Args:
            request: Chat request; unset sampling parameters fall back to the provider config

        Returns:
            ChatResponse with every returned choice and usage counters
        """
        if request is None:
            raise BackendError("request cannot be None")
        if request.stream:
            raise BackendError("streaming responses are not supported")

        params = {
            "model": request.model or self.config.model,
            "messages": [message.to_dict() for message in request.messages],
            "temperature": (
                request.temperature
                if request.temperature is not None
                else self.config.temperature
            ),
            "max_tokens": (
                request.max_tokens
                if request.max_tokens is not None
                else self.config.max_tokens
            ),
        }
        if request.top_p is not None:
            params["top_p"] = request.top_p

        try:
            response = await self.client.chat.completions.create(**params)
        except Exception as e:
            logger.error(f"OpenAI chat completion failed for {params['model']}: {e}")
            raise BackendError(f"openai chat completion failed: {e}") from e

        return ChatResponse(
            completions=[
                Completion(
                    index=choice.index,
                    role=choice.message.role,
                    content=choice.message.content or "",
                    finish_reason=choice.finish_reason,
                )
                for choice in response.choices
            ],
            usage=_usage(response.usage),
            id=response.id,
            model=response.model,
            created=response.created,
        )

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Query the legacy text completion endpoint."""
        if request is None:
            raise BackendError("request cannot be None")

        params = {
            "model": request.model or self.config.model,
            "prompt": request.prompt,
            "temperature": (
                request.temperature
                if request.temperature is not None
                else self.config.temperature
            ),
            "max_tokens": (
                request.max_tokens
                if request.max_tokens is not None
                else self.config.max_tokens
            ),
        }
        if request.top_p is not None:
            params["top_p"] = request.top_p
        if request.stop:
            params["stop"] = request.stop

        try:
            response = await self.client.completions.create(**params)
        except Exception as e:
            logger.error(f"OpenAI completion failed for {params['model']}: {e}")
            raise BackendError(f"openai completion failed: {e}") from e

        return CompletionResponse(
            choices=[
                CompletionChoice(
                    index=choice.index,
                    text=choice.text,
                    finish_reason=choice.finish_reason,
                    logprobs=choice.logprobs,
                )
                for choice in response.choices
            ],
            usage=_usage(response.usage),
            id=response.id,
            model=response.model,
            created=response.created,
        )
