"""Built-in steps: retrieval, prompt building, template rendering and model calls.

String steps pass non-string input through unchanged.
"""

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

from ..errors import RunCancelledError
from ..prompt import QA_PREFIX, PromptEngine
from ..providers.base import ChatRequest, ModelBackend, user_message
from ..rag import DEFAULT_LIMIT, RAGEngine
from .base import Step
from .context import MODEL, RETRIEVAL_LIMIT, TEMPLATE_VARIABLES, RunContext

logger = logging.getLogger(__name__)

NO_REPLY_MESSAGE = "抱歉，没有获得有效回复。"


class RetrieveStep(Step):
    """
    Replace a query string with the RAG engine's augmented query.

    On a retrieval miss the query passes through unchanged, or becomes the
    engine's fixed no-documents message when ``passthrough_on_miss`` is False.
    """

    def __init__(
        self,
        rag_engine: RAGEngine,
        limit: int = DEFAULT_LIMIT,
        passthrough_on_miss: bool = True,
    ):
        self.rag_engine = rag_engine
        self.limit = limit
        self.passthrough_on_miss = passthrough_on_miss

    @property
    def name(self) -> str:
        return "Retrieve"

    async def execute(self, context: RunContext, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        context.raise_if_cancelled()
        limit = context.get(RETRIEVAL_LIMIT, self.limit)
        if not self.passthrough_on_miss:
            return await self.rag_engine.query(value, limit)
        augmented = await self.rag_engine.augment(value, limit)
        return value if augmented is None else augmented


class BuildPromptStep(Step):
    """Prefix a string with the fixed question-answer instruction."""

    @property
    def name(self) -> str:
        return "BuildPrompt"

    async def execute(self, context: RunContext, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        return f"{QA_PREFIX}{value}"


class RenderTemplateStep(Step):
    """
    Render a named template with the input bound to ``variable``.

    Bindings are merged in order: static ``bindings``, then the run's
    TEMPLATE_VARIABLES, then the input value.
    """

    def __init__(
        self,
        engine: PromptEngine,
        template_name: str,
        variable: str = "question",
        bindings: Optional[Mapping[str, Any]] = None,
    ):
        self.engine = engine
        self.template_name = template_name
        self.variable = variable
        self.bindings = dict(bindings or {})

    @property
    def name(self) -> str:
        return f"RenderTemplate[{self.template_name}]"

    async def execute(self, context: RunContext, value: Any) -> Any:
        data: Dict[str, Any] = dict(self.bindings)
        data.update(context.get(TEMPLATE_VARIABLES) or {})
        data[self.variable] = value
        return self.engine.render(self.template_name, data)


class ChatStep(Step):
    """Send a string as a single user message and return the first completion's content."""

    def __init__(
        self,
        backend: ModelBackend,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        top_p: Optional[float] = None,
    ):
        self.backend = backend
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.top_p = top_p

    @property
    def name(self) -> str:
        return "Chat"

    async def execute(self, context: RunContext, value: Any) -> Any:
        if not isinstance(value, str):
            return value

        context.raise_if_cancelled()

        config = self.backend.config
        request = ChatRequest(
            model=context.get(MODEL) or self.model or config.model,
            messages=user_message(value),
            temperature=self.temperature if self.temperature is not None else config.temperature,
            max_tokens=self.max_tokens if self.max_tokens is not None else config.max_tokens,
            top_p=self.top_p,
        )

        remaining = context.remaining()
        try:
            response = await asyncio.wait_for(self.backend.chat(request), timeout=remaining)
        except asyncio.TimeoutError as e:
            raise RunCancelledError("context deadline exceeded") from e

        content = response.content
        if content is None:
            logger.warning(f"Backend returned no completions for model {request.model}")
            return NO_REPLY_MESSAGE
        return content
