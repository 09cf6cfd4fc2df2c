"""Composable step chains.

A Chain runs its steps in append order, feeding each step's output to the next.
Steps receive a RunContext carrying the deadline, cancellation token and
request-scoped values.
"""

from .base import Chain, FunctionStep, Step, as_step
from .context import (
    MODEL,
    RETRIEVAL_LIMIT,
    TEMPLATE_VARIABLES,
    CancellationToken,
    ContextKey,
    RunContext,
)
from .steps import (
    NO_REPLY_MESSAGE,
    BuildPromptStep,
    ChatStep,
    RenderTemplateStep,
    RetrieveStep,
)

__all__ = [
    "Chain",
    "FunctionStep",
    "Step",
    "as_step",
    "MODEL",
    "RETRIEVAL_LIMIT",
    "TEMPLATE_VARIABLES",
    "CancellationToken",
    "ContextKey",
    "RunContext",
    "NO_REPLY_MESSAGE",
    "BuildPromptStep",
    "ChatStep",
    "RenderTemplateStep",
    "RetrieveStep",
]
