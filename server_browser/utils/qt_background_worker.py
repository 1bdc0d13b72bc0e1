"""Qt background worker for running tasks off the UI thread.

Results cross back to the thread that owns the helper through queued
signal connections, so slots connected to the helper run in the
helper's thread, never in the worker thread.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, TypeVar

from PySide6.QtCore import QObject, QThread, Signal, Slot

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Threads released by their helper while the task is still running.
# Kept here until they finish so Qt never destroys a running thread.
_detached: list[tuple[QThread, QObject]] = []


def _prune_detached() -> None:
    _detached[:] = [(thread, worker) for thread, worker in _detached if not thread.isFinished()]


def wait_for_background_tasks(msecs: int = 5000) -> bool:
    """Wait for released tasks to finish, e.g. before the process exits.

    Args:
        msecs: Maximum time to wait for each thread in milliseconds

    Returns:
        True if no background thread is still running
    """
    for thread, _worker in list(_detached):
        thread.wait(msecs)
    _prune_detached()
    return not _detached


class BackgroundWorker(QObject, Generic[T]):
    """Runs a single task function inside a QThread."""

    finished = Signal(object)  # Result of type T
    error = Signal(str)  # Error message

    def __init__(self, task_func: Callable[..., T], *args: Any, **kwargs: Any) -> None:
        """Initialize worker with a task function.

        Args:
            task_func: Function to execute in background thread
            *args: Positional arguments for task_func
            **kwargs: Keyword arguments for task_func
        """
        super().__init__()
        self._task_func = task_func
        self._args = args
        self._kwargs = kwargs
        self._cancelled = False
        self._done = False

    @property
    def is_done(self) -> bool:
        """Check if the task function has returned or raised."""
        return self._done

    @Slot()
    def run(self) -> None:
        """Run the task and emit its result unless cancelled."""
        try:
            result = self._task_func(*self._args, **self._kwargs)
        except Exception as e:
            self._done = True
            logger.exception("Background task %s failed", getattr(self._task_func, "__name__", self._task_func))
            if not self._cancelled:
                self.error.emit(str(e))
            return

        self._done = True
        if not self._cancelled:
            self.finished.emit(result)

    def cancel(self) -> None:
        """Suppress the result signals.

        A task that is already running is not interrupted.
        """
        self._cancelled = True


class BackgroundHelper(QObject, Generic[T]):
    """Runs one background task at a time and re-emits its outcome.

    Example usage:
        >>> helper = BackgroundHelper()
        >>> helper.finished.connect(self.on_result)
        >>> helper.error.connect(self.on_error)
        >>> helper.run_task(my_function, arg1, arg2)
    """

    finished = Signal(object)  # Result of type T
    error = Signal(str)

    def __init__(self) -> None:
        """Initialize helper."""
        super().__init__()
        self.thread: QThread | None = None
        self.worker: BackgroundWorker[T] | None = None

    def run_task(self, task_func: Callable[..., T], *args: Any, **kwargs: Any) -> bool:
        """Start a task unless one is already running.

        Args:
            task_func: Function to execute in background thread
            *args: Positional arguments for task_func
            **kwargs: Keyword arguments for task_func

        Returns:
            True if the task was started, False if another task is in progress
        """
        if self.is_running:
            return False
        # Release a finished task whose cleanup slot has not run yet
        self.stop_task()

        self.worker = BackgroundWorker(task_func, *args, **kwargs)
        self.thread = QThread()
        self.worker.moveToThread(self.thread)

        self.thread.started.connect(self.worker.run)
        self.worker.finished.connect(self.finished)
        self.worker.finished.connect(self._on_finished)
        self.worker.error.connect(self.error)
        self.worker.error.connect(self._on_error)

        self.thread.start()
        return True

    def stop_task(self) -> None:
        """Cancel the current task and release its thread.

        Does not block: a task that is still running keeps its thread
        until it returns, and its result is dropped.
        """
        _prune_detached()

        if self.worker:
            self.worker.cancel()

        if self.thread:
            self.thread.quit()
            if not self.thread.isFinished():
                if self.worker is not None and not self.worker.is_done:
                    logger.debug("Releasing background task that is still running")
                _detached.append((self.thread, self.worker))
            self.thread = None

        self.worker = None

    @Slot(object)
    def _on_finished(self, result: T) -> None:
        if self.sender() is self.worker:
            self.stop_task()

    @Slot(str)
    def _on_error(self, error: str) -> None:
        if self.sender() is self.worker:
            self.stop_task()

    @property
    def is_running(self) -> bool:
        """Check if a task is currently in progress."""
        return self.worker is not None and not self.worker.is_done
