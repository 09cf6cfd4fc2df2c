"""FastAPI application for llm_tools."""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import chat, health, rag, templates
from .config import Settings, load_settings
from .dependencies import AppState, build_app_state
from .logging_setup import setup_logging
from .rag.samples import seed_sample_documents

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    state: Optional[AppState] = None,
    seed_samples: bool = True,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use (loaded from the environment when omitted)
        state: Pre-built engines (built from settings when omitted)
        seed_samples: Add the sample documents on startup

    Returns:
        FastAPI app with engines on ``app.state.llm_tools``
    """
    settings = settings or (state.settings if state else load_settings())
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title="LLM Tools API", version=__version__)
    app.state.llm_tools = state or build_app_state(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(chat.router)
    app.include_router(templates.router)
    app.include_router(rag.router)
    app.include_router(health.router)

    @app.on_event("startup")
    async def startup_event():
        if seed_samples:
            stored = await seed_sample_documents(app.state.llm_tools.retriever)
            logger.info(f"Seeded {stored} sample document(s)")
        logger.info(
            f"LLM Tools API ready with {len(app.state.llm_tools.prompt_engine)} template(s)"
        )

    return app
