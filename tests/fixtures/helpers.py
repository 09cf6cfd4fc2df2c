"""Test helper utilities for llm_tools tests.

This module provides:
- A scripted in-memory model backend
- Mock OpenAI SDK response builders
- Sample documents
"""

import asyncio
from types import SimpleNamespace
from typing import List, Optional

from llm_tools.errors import BackendError
from llm_tools.providers.base import (
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
from llm_tools.rag import Document


# ==================== Fake Backend ====================

class FakeBackend(ModelBackend):
    """In-memory backend that records requests and returns a scripted reply.

    Args:
        reply: Content of the single completion returned (None -> no completions)
        error: Exception to raise from chat/complete instead of replying
        delay: Seconds to sleep before replying
    """

    def __init__(
        self,
        reply: Optional[str] = "mock answer",
        error: Optional[Exception] = None,
        delay: float = 0.0,
        usage: Optional[Usage] = None,
    ):
        super().__init__(
            ProviderConfig(
                provider_id="fake",
                api_key="fake-key",
                model="fake-model",
                temperature=0.5,
                max_tokens=128,
            )
        )
        self.reply = reply
        self.error = error
        self.delay = delay
        self.usage = usage or Usage(prompt_tokens=10, completion_tokens=5, total_tokens=15)
        self.requests: List[ChatRequest] = []

    @property
    def model_type(self) -> ModelType:
        return ModelType.LOCAL

    async def chat(self, request: ChatRequest) -> ChatResponse:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.reply is None:
            return ChatResponse(completions=[], usage=Usage())
        return ChatResponse(
            completions=[Completion(index=0, role="assistant", content=self.reply, finish_reason="stop")],
            usage=self.usage,
            model=request.model,
        )

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        if self.error is not None:
            raise self.error
        return CompletionResponse(
            choices=[CompletionChoice(index=0, text=self.reply or "")],
            usage=self.usage,
            model=request.model,
        )

    @property
    def last_prompt(self) -> Optional[str]:
        if not self.requests:
            return None
        return self.requests[-1].messages[-1].content


def failing_backend(message: str = "rate limited") -> FakeBackend:
    return FakeBackend(error=BackendError(f"openai chat completion failed: {message}"))


# ==================== OpenAI SDK Response Builders ====================

def make_openai_chat_completion(content: str = "Hello!", model: str = "gpt-3.5-turbo"):
    """Object shaped like openai.types.chat.ChatCompletion."""
    return SimpleNamespace(
        id="chatcmpl-test",
        object="chat.completion",
        created=1700000000,
        model=model,
        choices=[
            SimpleNamespace(
                index=0,
                message=SimpleNamespace(role="assistant", content=content),
                finish_reason="stop",
            )
        ],
        usage=SimpleNamespace(prompt_tokens=12, completion_tokens=3, total_tokens=15),
    )


def make_openai_completion(text: str = "done", model: str = "gpt-3.5-turbo-instruct"):
    """Object shaped like openai.types.Completion."""
    return SimpleNamespace(
        id="cmpl-test",
        object="text_completion",
        created=1700000000,
        model=model,
        choices=[SimpleNamespace(index=0, text=text, finish_reason="length", logprobs=None)],
        usage=SimpleNamespace(prompt_tokens=4, completion_tokens=2, total_tokens=6),
    )


# ==================== Sample Data ====================

GO_DOCUMENTS = [
    Document(
        id="go1",
        content="Go 语言是由 Google 开发的开源编程语言，具有简洁、高效、并发安全等特点。",
        metadata={"source": "go_docs", "type": "language"},
    ),
    Document(
        id="go2",
        content="Go supports concurrency through goroutines and channels.",
        metadata={"source": "go_concurrency", "type": "feature"},
    ),
    Document(
        id="py1",
        content="Python favours readability and has a large standard library.",
        metadata={"source": "python_docs", "type": "language"},
    ),
]
