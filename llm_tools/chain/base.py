"""Chain executor: ordered steps threaded over a single value."""

import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, List, Optional, Union

from ..errors import StepExecutionError
from .context import RunContext
from .locks import ReadWriteLock

logger = logging.getLogger(__name__)

StepFunc = Callable[[RunContext, Any], Union[Any, Awaitable[Any]]]


class Step(ABC):
    """Base class for chain steps. Receives the previous step's output, returns the next input."""

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    async def execute(self, context: RunContext, value: Any) -> Any:
        """
        Transform value.

        Raise to fail the run; the chain wraps the error with this step's index.
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class FunctionStep(Step):
    """Adapts a plain or async callable ``fn(context, value)`` to a Step."""

    def __init__(self, fn: StepFunc, name: Optional[str] = None):
        self.fn = fn
        self._name = name or getattr(fn, "__name__", type(fn).__name__)

    @property
    def name(self) -> str:
        return self._name

    async def execute(self, context: RunContext, value: Any) -> Any:
        result = self.fn(context, value)
        if inspect.isawaitable(result):
            result = await result
        return result


def as_step(step: Union[Step, StepFunc]) -> Step:
    if isinstance(step, Step):
        return step
    if callable(step):
        return FunctionStep(step)
    raise TypeError(f"step must be a Step or callable, got {type(step).__name__}")


class Chain:
    """
    Ordered list of steps run strictly left to right.

    ``add_step`` and ``clear`` swap in a new step list under the write lock;
    ``run`` and ``step_count`` read the current list under the read lock. The
    lock is never held across ``await``: a run executes the list it read at
    start, so a mutation never shows up halfway through a run. Safe to share
    between threads, each running its own event loop.
    """

    def __init__(self, steps: Optional[List[Union[Step, StepFunc]]] = None):
        self._steps: List[Step] = [as_step(step) for step in (steps or [])]
        self._lock = ReadWriteLock()

    async def add_step(self, step: Union[Step, StepFunc]) -> "Chain":
        """Append a step (a Step instance or a callable taking (context, value))."""
        step = as_step(step)
        with self._lock.write():
            self._steps = self._steps + [step]
        return self

    async def clear(self) -> None:
        """Remove every step."""
        with self._lock.write():
            self._steps = []

    async def step_count(self) -> int:
        with self._lock.read():
            return len(self._steps)

    async def run(self, context: Optional[RunContext], value: Any) -> Any:
        """
        Thread value through every step.

        Args:
            context: Run context (deadline, cancellation, request values)
            value: Input to the first step

        Returns:
            Output of the last step (the input itself for an empty chain)

        Raises:
            StepExecutionError: First failing step, with its zero-based index;
                the original error is available as ``cause`` / ``__cause__``
        """
        context = context or RunContext.background()

        with self._lock.read():
            steps = self._steps

        result = value
        for index, step in enumerate(steps):
            try:
                result = await step.execute(context, result)
            except Exception as e:
                logger.warning(f"Chain step {index} ({step.name}) failed: {e}")
                raise StepExecutionError(index, step.name, e) from e
        return result

    async def run_string(self, context: Optional[RunContext], text: str) -> str:
        """Run with a string input; a non-string final value is converted with str()."""
        result = await self.run(context, text)
        if isinstance(result, str):
            return result
        return str(result)

    def __repr__(self) -> str:
        return f"Chain(steps={[step.name for step in self._steps]})"
