"""Error taxonomy shared by every llm_tools component.

Wrappers always chain the underlying exception (``raise ... from exc``) and keep
its message in their own text, so callers can tell *where* something failed from
*what* failed.
"""

from typing import Optional


class LLMToolsError(Exception):
    """Base class for all llm_tools errors."""


class InvalidArgumentError(LLMToolsError, ValueError):
    """A write operation was missing a required field."""


class NotFoundError(LLMToolsError, LookupError):
    """Lookup by name or id missed."""

    def __init__(self, kind: str, key: str):
        super().__init__(f"{kind} '{key}' not found")
        self.kind = kind
        self.key = key


class TemplateRenderError(LLMToolsError):
    """Template substitution failed (syntax error or unresolved variable)."""

    def __init__(self, message: str, template_name: Optional[str] = None):
        super().__init__(message)
        self.template_name = template_name


class RetrievalError(LLMToolsError):
    """A retriever failed while serving a query."""


class BackendError(LLMToolsError):
    """Opaque failure from a model backend."""


class RunCancelledError(LLMToolsError):
    """The run's deadline passed or its cancellation token was triggered."""


class ConfigurationError(LLMToolsError):
    """Settings failed validation."""


class StepExecutionError(LLMToolsError):
    """A chain step failed. Carries the zero-based step index and the original error."""

    def __init__(self, step_index: int, step_name: str, cause: BaseException):
        super().__init__(f"step {step_index} ({step_name}) failed: {cause}")
        self.step_index = step_index
        self.step_name = step_name
        self.cause = cause
