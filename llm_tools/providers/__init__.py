"""Model backend abstractions and concrete providers."""

from .base import (
    ChatRequest,
    ChatResponse,
    Completion,
    CompletionChoice,
    CompletionRequest,
    CompletionResponse,
    Message,
    ModelBackend,
    ModelType,
    ProviderConfig,
    Usage,
    user_message,
)
from .ollama import OllamaProvider
from .openai_compat import OpenAIProvider
from .registry import ProviderRegistry

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "Completion",
    "CompletionChoice",
    "CompletionRequest",
    "CompletionResponse",
    "Message",
    "ModelBackend",
    "ModelType",
    "ProviderConfig",
    "Usage",
    "user_message",
    "OllamaProvider",
    "OpenAIProvider",
    "ProviderRegistry",
]
