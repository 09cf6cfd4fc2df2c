"""Model backend capability: request/response types and the abstract backend."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ModelType(str, Enum):
    OPENAI = "openai"
    AZURE = "azure"
    BAIDU = "baidu"
    CLAUDE = "claude"
    LOCAL = "local"


@dataclass
class ProviderConfig:
    """Configuration for a provider."""

    provider_id: str
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model: str = "gpt-3.5-turbo"
    timeout: float = 30.0
    max_retries: int = 3
    temperature: float = 0.7
    max_tokens: int = 1000
    enabled: bool = True


@dataclass
class Message:
    role: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class Usage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class ChatRequest:
    """Chat request. ``None`` sampling parameters mean "backend default"."""

    model: str
    messages: List[Message]
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None
    stream: bool = False


@dataclass
class Completion:
    index: int
    role: str
    content: str
    finish_reason: Optional[str] = None


@dataclass
class ChatResponse:
    completions: List[Completion] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)
    id: Optional[str] = None
    model: Optional[str] = None
    created: Optional[int] = None

    @property
    def content(self) -> Optional[str]:
        """Content of the first completion, if any."""
        if not self.completions:
            return None
        return self.completions[0].content


@dataclass
class CompletionRequest:
    model: str
    prompt: str
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None
    stop: List[str] = field(default_factory=list)


@dataclass
class CompletionChoice:
    index: int
    text: str
    finish_reason: Optional[str] = None
    logprobs: Any = None


@dataclass
class CompletionResponse:
    choices: List[CompletionChoice] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)
    id: Optional[str] = None
    model: Optional[str] = None
    created: Optional[int] = None


def user_message(content: str) -> List[Message]:
    """Single-message conversation with the user role."""
    return [Message(role="user", content=content)]


class ModelBackend(ABC):
    """Abstract base class for LLM providers."""

    def __init__(self, config: ProviderConfig):
        self.config = config

    @property
    @abstractmethod
    def model_type(self) -> ModelType:
        pass

    @abstractmethod
    async def chat(self, request: ChatRequest) -> ChatResponse:
        """
        Send a chat request.

        Args:
            request: Model, role/content messages and sampling parameters

        Returns:
            ChatResponse with completions and token usage

        Raises:
            BackendError: On any backend failure (message carries the original error)
        """
        pass

    @abstractmethod
    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Send a plain text completion request."""
        pass

    def set_config(self, config: ProviderConfig) -> None:
        self.config = config

    def validate_key(self) -> bool:
        """
        Validate that the API key is configured.

        Returns:
            True if valid, False otherwise
        """
        return self.config.api_key is not None and len(self.config.api_key) > 0
