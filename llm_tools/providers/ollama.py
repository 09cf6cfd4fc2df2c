"""Ollama provider for local model inference."""

import logging
from typing import Any, Dict, Optional

import httpx

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

DEFAULT_BASE_URL = "http://localhost:11434"


def _usage(data: Dict[str, Any]) -> Usage:
    prompt_tokens = data.get("prompt_eval_count") or 0
    completion_tokens = data.get("eval_count") or 0
    return Usage(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=prompt_tokens + completion_tokens,
    )


class OllamaProvider(ModelBackend):
    """Ollama provider for local open-source models."""

    def __init__(
        self,
        config: ProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(config)
        self.base_url = (config.base_url or DEFAULT_BASE_URL).rstrip("/")
        self._transport = transport

    @property
    def model_type(self) -> ModelType:
        return ModelType.LOCAL

    def validate_key(self) -> bool:
        # Local server, no key needed
        return True

    def _options(
        self,
        temperature: Optional[float],
        max_tokens: Optional[int],
        top_p: Optional[float],
    ) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            "temperature": temperature if temperature is not None else self.config.temperature,
            "num_predict": max_tokens if max_tokens is not None else self.config.max_tokens,
        }
        if top_p is not None:
            options["top_p"] = top_p
        return options

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout, transport=self._transport
            ) as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Ollama HTTP error on {path}: {e.response.status_code}")
            raise BackendError(
                f"ollama HTTP error: {e.response.status_code} - {e.response.text}"
            ) from e
        except Exception as e:
            logger.error(f"Ollama request to {path} failed: {e}")
            raise BackendError(f"ollama query failed: {e}") from e

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """
        Query a local Ollama chat model.

        Args:
            request: Chat request (model e.g. "llama3:70b")

        Returns:
            ChatResponse with a single completion
        """
        if request.stream:
            raise BackendError("streaming responses are not supported")

        model = request.model or self.config.model
        payload = {
            "model": model,
            "messages": [message.to_dict() for message in request.messages],
            "stream": False,
            "options": self._options(request.temperature, request.max_tokens, request.top_p),
        }

        data = await self._post("/api/chat", payload)
        message = data.get("message") or {}

        return ChatResponse(
            completions=[
                Completion(
                    index=0,
                    role=message.get("role", "assistant"),
                    content=message.get("content", ""),
                    finish_reason=data.get("done_reason"),
                )
            ],
            usage=_usage(data),
            model=data.get("model", model),
        )

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Query Ollama's generate endpoint."""
        model = request.model or self.config.model
        options = self._options(request.temperature, request.max_tokens, request.top_p)
        if request.stop:
            options["stop"] = request.stop

        payload = {
            "model": model,
            "prompt": request.prompt,
            "stream": False,
            "options": options,
        }

        data = await self._post("/api/generate", payload)

        return CompletionResponse(
            choices=[
                CompletionChoice(
                    index=0,
                    text=data.get("response", ""),
                    finish_reason=data.get("done_reason"),
                )
            ],
            usage=_usage(data),
            model=data.get("model", model),
        )
