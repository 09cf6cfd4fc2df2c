"""Chat service: the two request flows built on the engines."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..chain import (
    MODEL,
    BuildPromptStep,
    Chain,
    ChatStep,
    RetrieveStep,
    RunContext,
)
from ..chain.steps import NO_REPLY_MESSAGE
from ..errors import RunCancelledError
from ..prompt import PromptEngine
from ..providers.base import ChatRequest, ModelBackend, user_message
from ..rag import DEFAULT_LIMIT, RAGEngine

logger = logging.getLogger(__name__)


@dataclass
class ChatResult:
    query: str
    answer: str
    template: str
    model: str
    token_usage: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "answer": self.answer,
            "template": self.template,
            "model": self.model,
            "token_usage": self.token_usage,
        }


class ChatService:
    """
    Service class for chat operations.

    Simple mode: render a template with the query bound to ``question``, send
    it to the backend, report token usage.
    Chain mode: retrieve -> build prompt -> chat, assembled as a Chain per call.
    """

    def __init__(
        self,
        prompt_engine: PromptEngine,
        rag_engine: RAGEngine,
        backend: ModelBackend,
        request_timeout: float = 30.0,
        retrieval_limit: int = DEFAULT_LIMIT,
    ):
        self.prompt_engine = prompt_engine
        self.rag_engine = rag_engine
        self.backend = backend
        self.request_timeout = request_timeout
        self.retrieval_limit = retrieval_limit

    def _model(self, model: Optional[str]) -> str:
        return model or self.backend.config.model

    async def run_simple(
        self,
        query: str,
        template: str = "qa",
        model: Optional[str] = None,
        variables: Optional[Mapping[str, Any]] = None,
    ) -> ChatResult:
        """
        Render ``template`` and query the backend.

        Raises:
            NotFoundError: Unknown template
            TemplateRenderError: Template needs a variable that was not supplied
            BackendError: Backend call failed
            RunCancelledError: Request timeout elapsed
        """
        template = template or "qa"
        model = self._model(model)

        data: Dict[str, Any] = {"question": query}
        data.update(variables or {})
        prompt = self.prompt_engine.render(template, data)

        config = self.backend.config
        request = ChatRequest(
            model=model,
            messages=user_message(prompt),
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )

        try:
            response = await asyncio.wait_for(
                self.backend.chat(request), timeout=self.request_timeout
            )
        except asyncio.TimeoutError as e:
            raise RunCancelledError("context deadline exceeded") from e

        if response.content is None:
            logger.warning(f"No completions returned by {model}")
            return ChatResult(query=query, answer=NO_REPLY_MESSAGE, template=template, model=model)

        return ChatResult(
            query=query,
            answer=response.content,
            template=template,
            model=model,
            token_usage=response.usage.total_tokens,
        )

    def build_chain(self, model: Optional[str] = None, limit: Optional[int] = None) -> Chain:
        return Chain(
            [
                RetrieveStep(self.rag_engine, limit or self.retrieval_limit),
                BuildPromptStep(),
                ChatStep(self.backend, model=model),
            ]
        )

    async def run_chain(
        self,
        query: str,
        model: Optional[str] = None,
        limit: Optional[int] = None,
        template: str = "qa",
    ) -> ChatResult:
        """
        Run the retrieve -> build prompt -> chat chain.

        Raises:
            StepExecutionError: A step failed (index of the step attached)
        """
        model = self._model(model)
        chain = self.build_chain(model, limit)
        context = RunContext.with_timeout(self.request_timeout).set(MODEL, model)

        answer = await chain.run_string(context, query)
        return ChatResult(query=query, answer=answer, template=template, model=model)
