"""Session context holding the bearer token used by the API client."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QSettings, Signal

from utils.app_signals import app_signals

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth/token"


class SessionContext(QObject):
    """Owns the auth token for the lifetime of a login.

    The token is set after login, read by :class:`services.api_client.ApiClient`
    on every request and cleared at logout.  It is persisted in ``QSettings``
    so a restarted client keeps its session.
    """

    tokenChanged = Signal(object)

    def __init__(self, settings: QSettings | None = None, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._settings = settings if settings is not None else QSettings()
        stored = self._settings.value(TOKEN_KEY, None)
        self._token: str | None = str(stored) if stored else None

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def set_token(self, token: str | None) -> None:
        token = (token or "").strip() or None
        if token == self._token:
            return
        self._token = token
        if token is None:
            self._settings.remove(TOKEN_KEY)
        else:
            self._settings.setValue(TOKEN_KEY, token)
        self._settings.sync()
        logger.debug("[session] token %s", "set" if token else "cleared")
        self.tokenChanged.emit(token)
        app_signals.sessionChanged.emit(token)

    def clear(self) -> None:
        self.set_token(None)


__all__ = ["SessionContext", "TOKEN_KEY"]
