from __future__ import annotations

from pathlib import Path
from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QKeySequence, QPixmap, QShortcut
from PySide6.QtWidgets import (
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QStyle,
    QVBoxLayout,
    QWidget,
)

IMAGE_SUFFIXES = ("*.png", "*.jpg", "*.jpeg", "*.gif", "*.bmp", "*.webp")
THUMBNAIL_SIZE = 48


class SearchLineEdit(QLineEdit):
    """Search box that grabs focus on the platform Find shortcut."""

    def __init__(self, placeholder: str = "Search...", parent=None):
        super().__init__(parent)
        self.setPlaceholderText(placeholder)
        self.setClearButtonEnabled(True)
        self.setMinimumWidth(250)
        self._shortcut: QShortcut | None = None
        self.setShortcut(QKeySequence(QKeySequence.StandardKey.Find))

    def setShortcut(self, seq: QKeySequence) -> None:
        if self._shortcut is not None:
            self._shortcut.setKey(seq)
            return
        self._shortcut = QShortcut(seq, self)
        self._shortcut.setContext(Qt.ShortcutContext.WindowShortcut)
        self._shortcut.activated.connect(self._focus_and_select)

    def _focus_and_select(self) -> None:
        self.setFocus(Qt.FocusReason.ShortcutFocusReason)
        self.selectAll()


def file_dialog_filter(accept: Optional[str]) -> str:
    """Translate an ``accept`` pattern (``image/*``, ``.pdf,.docx``) to a Qt filter."""
    if not accept:
        return "All files (*)"
    patterns: list[str] = []
    for token in (part.strip() for part in accept.split(",")):
        if not token:
            continue
        if token.startswith("image/"):
            patterns.extend(IMAGE_SUFFIXES)
        elif token.startswith("."):
            patterns.append(f"*{token}")
    if not patterns:
        return "All files (*)"
    return f"Files ({' '.join(dict.fromkeys(patterns))})"


def format_size(num_bytes: int) -> str:
    return f"{num_bytes / 1024:.1f} KB"


class FilePicker(QFrame):
    """Drop-zone style chooser holding a single local file.

    The picker only remembers the chosen path; uploading it is up to whoever
    receives the form values.
    """

    fileChanged = Signal(object)

    def __init__(self, accept: Optional[str] = None, helper_text: Optional[str] = None, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("filePicker")
        self.setFrameShape(QFrame.Shape.StyledPanel)
        self.setStyleSheet("#filePicker { border: 2px dashed palette(Mid); border-radius: 8px; }")
        self._accept = accept
        self._path: Optional[Path] = None

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(6)

        row = QHBoxLayout()
        self.preview_label = QLabel()
        self.preview_label.setFixedSize(THUMBNAIL_SIZE, THUMBNAIL_SIZE)
        self.preview_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        row.addWidget(self.preview_label)

        info = QVBoxLayout()
        self.name_label = QLabel("Click to upload")
        self.size_label = QLabel(helper_text or "")
        self.size_label.setStyleSheet("color: palette(Mid); font-size: 11px;")
        info.addWidget(self.name_label)
        info.addWidget(self.size_label)
        row.addLayout(info, stretch=1)
        layout.addLayout(row)

        buttons = QHBoxLayout()
        self.browse_button = QPushButton("Choose file…")
        self.browse_button.clicked.connect(self._browse)
        buttons.addWidget(self.browse_button)
        self.remove_button = QPushButton("Remove file")
        self.remove_button.setFlat(True)
        self.remove_button.clicked.connect(lambda: self.set_file(None))
        buttons.addWidget(self.remove_button)
        buttons.addStretch(1)
        layout.addLayout(buttons)

        self._helper_text = helper_text or ""
        self._refresh()

    def file(self) -> Optional[Path]:
        return self._path

    def set_file(self, path: Optional[Path | str]) -> None:
        new_path = Path(path) if path else None
        if new_path == self._path:
            return
        self._path = new_path
        self._refresh()
        self.fileChanged.emit(new_path)

    def _browse(self) -> None:  # pragma: no cover - requires GUI interaction
        filename, _ = QFileDialog.getOpenFileName(self, "Choose file", "", file_dialog_filter(self._accept))
        if filename:
            self.set_file(filename)

    def _refresh(self) -> None:
        path = self._path
        self.remove_button.setVisible(path is not None)
        if path is None:
            self.name_label.setText("Click to upload")
            self.size_label.setText(self._helper_text)
            self.preview_label.setPixmap(self.style().standardIcon(QStyle.StandardPixmap.SP_ArrowUp).pixmap(32, 32))
            return

        self.name_label.setText(path.name)
        self.size_label.setText(format_size(path.stat().st_size) if path.exists() else "")
        pixmap = QPixmap()
        if self._accept and "image" in self._accept:
            pixmap = QPixmap(str(path))
        if not pixmap.isNull():
            self.preview_label.setPixmap(
                pixmap.scaled(
                    THUMBNAIL_SIZE,
                    THUMBNAIL_SIZE,
                    Qt.AspectRatioMode.KeepAspectRatioByExpanding,
                    Qt.TransformationMode.SmoothTransformation,
                )
            )
        else:
            self.preview_label.setPixmap(self.style().standardIcon(QStyle.StandardPixmap.SP_FileIcon).pixmap(32, 32))


__all__ = ["FilePicker", "SearchLineEdit", "file_dialog_filter", "format_size"]
