"""Application state and FastAPI dependency injection utilities.

Engines are constructed once per process by ``build_app_state`` and stored on
``app.state.llm_tools``; route handlers reach them through ``Depends``.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, Request, status

from .config import Settings
from .prompt import PromptEngine, default_prompt_engine
from .providers import ModelBackend, OpenAIProvider, ProviderConfig, ProviderRegistry
from .rag import RAGEngine, SimpleRetriever
from .services.chat_service import ChatService

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Process-wide engines shared read-mostly by all requests."""

    settings: Settings
    prompt_engine: PromptEngine
    retriever: SimpleRetriever
    rag_engine: RAGEngine
    backend: ModelBackend
    chat_service: ChatService


def build_backend(settings: Settings) -> ProviderRegistry:
    """
    Provider registry with the OpenAI provider from settings, plus anything
    defined in the providers YAML file when it exists.
    """
    registry = ProviderRegistry(default_provider="openai")
    registry.register(
        "openai",
        OpenAIProvider(
            ProviderConfig(
                provider_id="openai",
                api_key=settings.openai_api_key or None,
                base_url=settings.openai_base_url,
                model=settings.openai_model,
                timeout=settings.request_timeout,
                temperature=settings.openai_temperature,
                max_tokens=settings.openai_max_tokens,
            )
        ),
    )

    if settings.providers_config and os.path.exists(settings.providers_config):
        # YAML entries replace the settings-based provider of the same id
        registry.load_providers(settings.providers_config)
    else:
        logger.debug(f"No providers file at {settings.providers_config}")

    # The registry's own config mirrors the default provider for callers reading defaults
    default = registry.get_provider(registry.default_provider)
    if default is not None:
        registry.set_config(default.config)
    return registry


def build_app_state(
    settings: Settings,
    backend: Optional[ModelBackend] = None,
    rank_by_score: bool = False,
) -> AppState:
    """Construct every engine for one process."""
    prompt_engine = default_prompt_engine()
    retriever = SimpleRetriever(rank_by_score=rank_by_score)
    rag_engine = RAGEngine(retriever)
    backend = backend or build_backend(settings)

    chat_service = ChatService(
        prompt_engine=prompt_engine,
        rag_engine=rag_engine,
        backend=backend,
        request_timeout=settings.request_timeout,
        retrieval_limit=settings.rag_max_results,
    )

    return AppState(
        settings=settings,
        prompt_engine=prompt_engine,
        retriever=retriever,
        rag_engine=rag_engine,
        backend=backend,
        chat_service=chat_service,
    )


def get_app_state(request: Request) -> AppState:
    """
    FastAPI dependency for the application's engines.

    Raises:
        HTTPException: 503 Service Unavailable if the app was built without state
    """
    state = getattr(request.app.state, "llm_tools", None)
    if state is None:
        logger.error("Application state is not initialized")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Application state not initialized",
        )
    return state
