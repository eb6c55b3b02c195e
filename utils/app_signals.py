from __future__ import annotations

from PySide6.QtCore import QObject, Signal


class AppSignals(QObject):
    """Global Qt signals for app-wide events.

    Pages and the host shell can subscribe to these to react to session
    changes without holding a reference to the emitter.
    """

    # Emitted when the bearer token is set (token string) or cleared (None)
    sessionChanged = Signal(object)
    # Emitted when the backend rejects a request with 401; provides the path
    unauthorized = Signal(str)


# Global singleton instance
app_signals = AppSignals()


__all__ = ["app_signals", "AppSignals"]
