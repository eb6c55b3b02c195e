"""Request state holders used by every CRUD page.

:class:`ApiResource` tracks a read query (``loading -> data | error``) and
:class:`Mutation` tracks a write (``idle -> pending -> data | error``).  Both
expose plain attributes plus a ``stateChanged`` signal, so widgets simply
re-read the state whenever it fires.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import Future
from typing import Any, Callable, Optional

from PySide6.QtCore import QObject, Signal, Slot

from .api_client import ApiClient, ApiError, QueryParams
from .workers import Dispatcher, dispatch_threaded

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch data"
MUTATION_FAILED_MESSAGE = "Operation failed"

_UNSET: Any = object()


def error_message(exc: object, fallback: str) -> str:
    if isinstance(exc, ApiError) and exc.message:
        return exc.message
    return fallback


class ApiResource(QObject):
    """Cached result of ``GET path?query`` that refetches when its inputs change.

    Each fetch is tagged with a generation ticket and only the most recently
    issued ticket may write state; a slow response for an old page or search
    term is dropped instead of overwriting the newer one.  A failed fetch
    keeps the previous ``data`` so an already rendered table stays visible.
    """

    stateChanged = Signal()
    loaded = Signal(object)
    failed = Signal(str)

    def __init__(
        self,
        client: ApiClient,
        path: Optional[str],
        query: QueryParams | None = None,
        *,
        initial_data: Any = None,
        enabled: bool = True,
        auto_fetch: bool = True,
        dispatch: Dispatcher | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._client = client
        self._path = path
        self._query: dict[str, Any] = dict(query or {})
        self._enabled = enabled
        self._dispatch: Dispatcher = dispatch or dispatch_threaded

        self.data: Any = initial_data
        self.loading = False
        self.error: Optional[str] = None

        self._generation = 0
        self._disposed = False
        self._signature = self._dependency_signature()

        if auto_fetch:
            self.refetch()

    # ------------------------------------------------------------------ inputs
    @property
    def path(self) -> Optional[str]:
        return self._path

    @property
    def query(self) -> dict[str, Any]:
        return dict(self._query)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def is_active(self) -> bool:
        return self._enabled and bool(self._path) and not self._disposed

    def _dependency_signature(self) -> tuple[Optional[str], str, bool]:
        return (self._path, json.dumps(self._query, sort_keys=True, default=str), self._enabled)

    def update(self, *, path: Any = _UNSET, query: Any = _UNSET, enabled: Any = _UNSET) -> bool:
        """Change any of path/query/enabled; refetch if the combination changed.

        Returns ``True`` when a new fetch cycle was started or an in-flight
        one was abandoned.
        """
        if path is not _UNSET:
            self._path = path
        if query is not _UNSET:
            self._query = dict(query or {})
        if enabled is not _UNSET:
            self._enabled = bool(enabled)

        signature = self._dependency_signature()
        if signature == self._signature:
            return False
        self._signature = signature
        self.refetch()
        return True

    # ------------------------------------------------------------------ actions
    def refetch(self) -> None:
        if self._disposed:
            return
        self._generation += 1
        ticket = self._generation

        if not self.is_active:
            if self.loading:
                self.loading = False
                self.stateChanged.emit()
            return

        self.loading = True
        self.error = None
        self.stateChanged.emit()

        client, path, query = self._client, self._path, dict(self._query)
        logger.debug("fetch #%s %s %s", ticket, path, query)
        self._dispatch(ticket, lambda: client.get(path, query=query), self._on_completed, self._on_failed)

    def set_data(self, value: Any) -> None:
        """Replace the cached data, e.g. to merge a mutation result locally.

        ``value`` may be a callable receiving the previous data.
        """
        self.data = value(self.data) if callable(value) else value
        self.stateChanged.emit()

    def dispose(self) -> None:
        """Stop tracking; any in-flight response will be ignored."""
        self._disposed = True
        self._generation += 1
        self.loading = False

    # ------------------------------------------------------------------ settlement
    def _is_current(self, ticket: int) -> bool:
        if self._disposed or ticket != self._generation:
            logger.debug("discarding stale response #%s (current #%s)", ticket, self._generation)
            return False
        return True

    @Slot(int, object)
    def _on_completed(self, ticket: int, result: Any) -> None:
        if not self._is_current(ticket):
            return
        self.data = result
        self.error = None
        self.loading = False
        self.stateChanged.emit()
        self.loaded.emit(result)

    @Slot(int, object)
    def _on_failed(self, ticket: int, exc: object) -> None:
        if not self._is_current(ticket):
            return
        message = error_message(exc, FETCH_FAILED_MESSAGE)
        logger.warning("fetch %s failed: %s", self._path, message)
        self.error = message
        self.loading = False
        self.stateChanged.emit()
        self.failed.emit(message)


class Mutation(QObject):
    """Wraps a write operation ``fn(variables)``.

    :meth:`mutate` never raises: it returns a future resolving to the result,
    or to ``None`` when ``fn`` failed.  Only one call may be outstanding; a
    second ``mutate`` while ``loading`` is ignored, which protects against
    double submission from rapid clicks.
    """

    stateChanged = Signal()
    succeeded = Signal(object, object)
    failed = Signal(str, object)

    def __init__(
        self,
        fn: Callable[[Any], Any],
        *,
        dispatch: Dispatcher | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._fn = fn
        self._dispatch: Dispatcher = dispatch or dispatch_threaded

        self.data: Any = None
        self.loading = False
        self.error: Optional[str] = None

        self._generation = 0
        self._pending: dict[int, tuple[Future, Any]] = {}

    def mutate(self, variables: Any = None) -> Future:
        future: Future = Future()
        if self.loading:
            logger.warning("ignoring mutate() while a previous call is still pending")
            future.set_result(None)
            return future

        self._generation += 1
        ticket = self._generation
        self._pending[ticket] = (future, variables)

        self.loading = True
        self.error = None
        self.stateChanged.emit()

        fn = self._fn
        self._dispatch(ticket, lambda: fn(variables), self._on_completed, self._on_failed)
        return future

    def reset(self) -> None:
        """Clear data/error/loading; an outstanding call no longer updates state."""
        self._generation += 1
        self.data = None
        self.error = None
        self.loading = False
        self.stateChanged.emit()

    @Slot(int, object)
    def _on_completed(self, ticket: int, result: Any) -> None:
        future, variables = self._pending.pop(ticket, (None, None))
        if ticket == self._generation:
            self.data = result
            self.error = None
            self.loading = False
            self.stateChanged.emit()
            self.succeeded.emit(result, variables)
        if future is not None:
            future.set_result(result)

    @Slot(int, object)
    def _on_failed(self, ticket: int, exc: object) -> None:
        future, variables = self._pending.pop(ticket, (None, None))
        message = error_message(exc, MUTATION_FAILED_MESSAGE)
        if ticket == self._generation:
            logger.warning("mutation failed: %s", message)
            self.error = message
            self.loading = False
            self.stateChanged.emit()
            self.failed.emit(message, variables)
        if future is not None:
            future.set_result(None)


__all__ = [
    "ApiResource",
    "FETCH_FAILED_MESSAGE",
    "MUTATION_FAILED_MESSAGE",
    "Mutation",
    "error_message",
]
