"""Background execution for API requests.

Requests must never block the GUI thread.  A *dispatcher* takes a ticket, a
zero-argument task and two callbacks; it runs the task somewhere and later
invokes exactly one of the callbacks with the ticket and the outcome.  The
callbacks are always invoked on the thread that owns them.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

from PySide6.QtCore import QObject, QThread, Signal, Slot

logger = logging.getLogger(__name__)

Task = Callable[[], Any]
CompletedCallback = Callable[[int, Any], None]
FailedCallback = Callable[[int, object], None]


class Dispatcher(Protocol):
    def __call__(
        self,
        ticket: int,
        task: Task,
        on_completed: CompletedCallback,
        on_failed: FailedCallback,
    ) -> None: ...


class RequestWorker(QThread):
    """Run one request task off the GUI thread."""

    completed = Signal(int, object)
    failed = Signal(int, object)

    def __init__(self, ticket: int, task: Task, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._ticket = ticket
        self._task = task

    def run(self) -> None:  # type: ignore[override]
        try:
            result = self._task()
        except Exception as exc:
            self.failed.emit(self._ticket, exc)
        else:
            self.completed.emit(self._ticket, result)


# Workers are unparented so that a receiver being destroyed never tears down
# a running thread; they are released once finished.
_ACTIVE_WORKERS: set[RequestWorker] = set()


class _WorkerReleaser(QObject):
    """Lives in the GUI thread so ``finished`` is queued back onto it."""

    @Slot()
    def release(self) -> None:
        worker = self.sender()
        if not isinstance(worker, RequestWorker):
            return
        worker.wait()
        _ACTIVE_WORKERS.discard(worker)
        worker.deleteLater()


_releaser: _WorkerReleaser | None = None


def _worker_releaser() -> _WorkerReleaser:
    global _releaser
    if _releaser is None:
        _releaser = _WorkerReleaser()
    return _releaser


def dispatch_threaded(
    ticket: int,
    task: Task,
    on_completed: CompletedCallback,
    on_failed: FailedCallback,
) -> None:
    """Run ``task`` on a worker thread.

    ``on_completed``/``on_failed`` should be slots of a ``QObject`` living in
    the GUI thread so that the connection is queued back onto it.
    """
    worker = RequestWorker(ticket, task)
    worker.completed.connect(on_completed)
    worker.failed.connect(on_failed)
    worker.finished.connect(_worker_releaser().release)
    _ACTIVE_WORKERS.add(worker)
    worker.start()


def dispatch_inline(
    ticket: int,
    task: Task,
    on_completed: CompletedCallback,
    on_failed: FailedCallback,
) -> None:
    """Run ``task`` synchronously on the calling thread."""
    try:
        result = task()
    except Exception as exc:
        on_failed(ticket, exc)
    else:
        on_completed(ticket, result)


def active_worker_count() -> int:
    return len(_ACTIVE_WORKERS)


def wait_for_workers(timeout_ms: int = 5000) -> None:
    """Block until running workers finish; used at application shutdown."""
    for worker in list(_ACTIVE_WORKERS):
        if not worker.wait(timeout_ms):
            logger.warning("request worker still running after %sms", timeout_ms)


__all__ = [
    "Dispatcher",
    "RequestWorker",
    "active_worker_count",
    "dispatch_inline",
    "dispatch_threaded",
    "wait_for_workers",
]
