"""Pytest configuration and shared fixtures for llm_tools tests.

This module provides:
- Environment isolation between tests
- Fresh engine instances (prompt engine, retriever, RAG engine)
- A scripted fake model backend
"""

import os
import sys
from pathlib import Path
from typing import Dict

import pytest

# Add project root to Python path to allow imports from llm_tools and cli
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from llm_tools.config import Settings  # noqa: E402
from llm_tools.prompt import PromptEngine, default_prompt_engine  # noqa: E402
from llm_tools.rag import RAGEngine, SimpleRetriever  # noqa: E402

from tests.fixtures.helpers import FakeBackend  # noqa: E402


# ==================== Environment Fixtures ====================

@pytest.fixture(scope="function", autouse=True)
def isolate_environment():
    """Restore environment variables after every test."""
    original_env = os.environ.copy()

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def mock_env_vars(monkeypatch) -> Dict[str, str]:
    """Provide a complete, valid environment.

    Returns:
        Dict of environment variables that were set
    """
    env_vars = {
        "OPENAI_API_KEY": "test-openai-key",
        "OPENAI_BASE_URL": "http://localhost:9999/v1",
        "OPENAI_MODEL": "gpt-4o-mini",
        "OPENAI_TEMPERATURE": "0.2",
        "OPENAI_MAX_TOKENS": "256",
        "SERVER_PORT": "9090",
        "LOG_LEVEL": "ERROR",
        "RAG_MAX_RESULTS": "3",
        "REQUEST_TIMEOUT_SECONDS": "5",
    }

    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)

    return env_vars


@pytest.fixture
def settings() -> Settings:
    """Valid settings without touching the environment."""
    return Settings(
        openai_api_key="test-openai-key",
        log_level="error",
        request_timeout=5.0,
        providers_config="",
    )


# ==================== Engine Fixtures ====================

@pytest.fixture
def prompt_engine() -> PromptEngine:
    """Prompt engine with the four built-in templates."""
    return default_prompt_engine()


@pytest.fixture
def empty_prompt_engine() -> PromptEngine:
    return PromptEngine()


@pytest.fixture
def retriever() -> SimpleRetriever:
    return SimpleRetriever()


@pytest.fixture
def rag_engine(retriever) -> RAGEngine:
    return RAGEngine(retriever)


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend(reply="mock answer")
