"""Fire-and-forget execution of collaborator side effects.

Ledger mutations hand persistence writes, reminder scheduling and calendar
sync to a dispatcher. Failures are logged, recorded and passed to an optional
callback; they are never raised back into the mutating call.
"""

import logging
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from payguard.domain.errors import CollaboratorError

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[str, Exception], None]


class Dispatcher(ABC):
    """Base dispatcher that runs a task and reports its failure."""

    def __init__(self, on_error: Optional[ErrorCallback] = None):
        self.on_error = on_error
        self.failures: list[Exception] = []

    @abstractmethod
    def submit(self, description: str, func: Callable, *args) -> None:
        """Run ``func(*args)``, reporting any failure under ``description``."""
        pass

    def shutdown(self, wait: bool = True) -> None:
        pass

    def _run(self, description: str, func: Callable, *args) -> None:
        try:
            func(*args)
        except CollaboratorError as e:
            logger.warning("%s failed: %s", description, e)
            self._report(description, e)
        except Exception as e:
            logger.exception("%s failed unexpectedly", description)
            self._report(description, e)

    def _report(self, description: str, error: Exception) -> None:
        self.failures.append(error)
        if self.on_error is not None:
            self.on_error(description, error)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown(wait=True)


class InlineDispatcher(Dispatcher):
    """Runs each task immediately in the calling thread."""

    def submit(self, description: str, func: Callable, *args) -> None:
        self._run(description, func, *args)


class BackgroundDispatcher(Dispatcher):
    """Runs tasks in order on a single worker thread."""

    def __init__(self, on_error: Optional[ErrorCallback] = None):
        super().__init__(on_error)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="payguard-side-effects")
        self._last: Optional[Future] = None

    def submit(self, description: str, func: Callable, *args) -> None:
        self._last = self._executor.submit(self._run, description, func, *args)

    def drain(self) -> None:
        """Block until every task submitted so far has finished."""
        # Single worker, so the most recent task finishes last
        if self._last is not None:
            self._last.result()

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
