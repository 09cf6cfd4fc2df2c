"""Run context carried through every step of a chain run."""

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..errors import RunCancelledError


@dataclass
class ContextKey:
    """Type-safe context key identifier."""

    name: str

    def __str__(self) -> str:
        return self.name


# Keys read by the built-in steps
TEMPLATE_VARIABLES = ContextKey("template_variables")
MODEL = ContextKey("model")
RETRIEVAL_LIMIT = ContextKey("retrieval_limit")


class CancellationToken:
    """Thread-safe one-way cancellation flag shared by a context and its copies."""

    def __init__(self):
        self._event = threading.Event()
        self.reason: Optional[str] = None

    def cancel(self, reason: str = "run cancelled") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class RunContext:
    """
    Immutable context handed to each step.

    Carries request-scoped values, a deadline and a cancellation token. ``set``
    and friends return new instances that share the deadline and the token, so
    cancelling any copy cancels the run. Steps are expected to call
    ``raise_if_cancelled()`` before outbound calls; the chain never interrupts a
    step on its own.
    """

    _data: Dict[str, Any] = field(default_factory=dict)
    _metadata: Dict[str, Any] = field(default_factory=dict)
    deadline: Optional[float] = None
    token: CancellationToken = field(default_factory=CancellationToken)

    @classmethod
    def background(cls) -> "RunContext":
        """Context with no deadline."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "RunContext":
        """Context whose deadline is ``seconds`` from now."""
        return cls(deadline=time.monotonic() + seconds)

    def _copy(self, data: Dict[str, Any], metadata: Dict[str, Any]) -> "RunContext":
        return RunContext(_data=data, _metadata=metadata, deadline=self.deadline, token=self.token)

    def get(self, key: ContextKey, default: Any = None) -> Any:
        """Get value from context."""
        return self._data.get(str(key), default)

    def set(self, key: ContextKey, value: Any) -> "RunContext":
        """Return a new context with the key set."""
        new_data = self._data.copy()
        new_data[str(key)] = value
        return self._copy(new_data, self._metadata.copy())

    def update(self, **kwargs: Any) -> "RunContext":
        """Return a new context with multiple keys set."""
        new_data = self._data.copy()
        new_data.update(kwargs)
        return self._copy(new_data, self._metadata.copy())

    def has(self, key: ContextKey) -> bool:
        return str(key) in self._data

    def keys(self) -> list[str]:
        return list(self._data.keys())

    def get_metadata(self, key: str, default: Any = None) -> Any:
        return self._metadata.get(key, default)

    def set_metadata(self, key: str, value: Any) -> "RunContext":
        new_metadata = self._metadata.copy()
        new_metadata[key] = value
        return self._copy(self._data.copy(), new_metadata)

    def cancel(self, reason: str = "run cancelled") -> None:
        self.token.cancel(reason)

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled or self.expired

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline (never negative), or None without one."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def raise_if_cancelled(self) -> None:
        """
        Raises:
            RunCancelledError: If the token was cancelled or the deadline passed
        """
        if self.token.cancelled:
            raise RunCancelledError(self.token.reason or "run cancelled")
        if self.expired:
            raise RunCancelledError("context deadline exceeded")
