"""Named prompt templates with ``{{.variable}}`` placeholders."""

from .engine import PromptEngine, Template, extract_variables
from .defaults import (
    DEFAULT_TEMPLATES,
    QA_PREFIX,
    default_prompt_engine,
    register_defaults,
)

__all__ = [
    "PromptEngine",
    "Template",
    "extract_variables",
    "DEFAULT_TEMPLATES",
    "QA_PREFIX",
    "default_prompt_engine",
    "register_defaults",
]
