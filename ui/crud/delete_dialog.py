"""Confirmation dialog for a single destructive action."""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QDialog, QHBoxLayout, QLabel, QPushButton, QStyle, QVBoxLayout, QWidget

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Delete Item"


def description_text(item_name: Optional[str] = None, description: Optional[str] = None) -> str:
    if description is not None:
        return description
    if item_name:
        return f'Are you sure you want to delete "{item_name}"? This action cannot be undone.'
    return "Are you sure you want to delete this item? This action cannot be undone."


class DeleteDialog(QDialog):
    """Asks before deleting; the owner performs the delete on :attr:`confirmed`.

    While :meth:`set_loading` is on both buttons are disabled and Escape or
    the window close button are ignored, so a pending delete cannot be
    confirmed twice or abandoned half way.
    """

    confirmed = Signal()
    closed = Signal()

    def __init__(self, title: str = DEFAULT_TITLE, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setMinimumWidth(380)
        self._loading = False

        layout = QVBoxLayout(self)
        layout.setSpacing(12)

        icon = QLabel()
        icon.setPixmap(self.style().standardIcon(QStyle.StandardPixmap.SP_MessageBoxWarning).pixmap(36, 36))
        icon.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(icon)

        self.title_label = QLabel(title)
        self.title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.title_label.setStyleSheet("font-size: 16px; font-weight: 600;")
        layout.addWidget(self.title_label)

        self.description_label = QLabel(description_text())
        self.description_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.description_label.setWordWrap(True)
        layout.addWidget(self.description_label)

        self.error_label = QLabel("")
        self.error_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.error_label.setWordWrap(True)
        self.error_label.setStyleSheet("color: #d32f2f;")
        self.error_label.hide()
        layout.addWidget(self.error_label)

        buttons = QHBoxLayout()
        self.cancel_button = QPushButton("Cancel")
        self.cancel_button.clicked.connect(self.reject)
        buttons.addWidget(self.cancel_button)
        self.delete_button = QPushButton("Delete")
        self.delete_button.setStyleSheet("QPushButton { background: #d32f2f; color: white; padding: 6px 12px; }")
        self.delete_button.clicked.connect(self._on_delete_clicked)
        buttons.addWidget(self.delete_button)
        layout.addLayout(buttons)

    @property
    def is_loading(self) -> bool:
        return self._loading

    def open_for(
        self,
        item_name: Optional[str] = None,
        description: Optional[str] = None,
        title: Optional[str] = None,
    ) -> None:
        if title is not None:
            self.setWindowTitle(title)
            self.title_label.setText(title)
        self.description_label.setText(description_text(item_name, description))
        self.set_error(None)
        self.set_loading(False)
        self.open()

    def set_loading(self, loading: bool) -> None:
        self._loading = bool(loading)
        self.cancel_button.setEnabled(not self._loading)
        self.delete_button.setEnabled(not self._loading)
        self.delete_button.setText("Deleting..." if self._loading else "Delete")

    def set_error(self, message: Optional[str]) -> None:
        self.error_label.setText(message or "")
        self.error_label.setVisible(bool(message))

    def _on_delete_clicked(self) -> None:
        if self._loading:
            return
        self.confirmed.emit()

    def reject(self) -> None:  # type: ignore[override]
        if self._loading:
            logger.debug("ignoring close while delete is pending")
            return
        super().reject()
        self.closed.emit()


__all__ = ["DEFAULT_TITLE", "DeleteDialog", "description_text"]
