"""Schema driven create/edit/view dialog.

The dialog renders one editor per :class:`FormField`, keeps a
:class:`FormState` in sync with the widgets and emits :attr:`submitted`
with the value bag once client side validation passes.  It never performs
I/O; the owner decides when to close it and may report an asynchronous
failure back through :meth:`set_error`.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from PySide6.QtCore import QEvent, QObject, Qt, Signal
from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFrame,
    QGridLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from .editors import FieldEditor, editor_for
from .fields import FieldType, FormField, FormMode, check_unique_names
from .form_state import FormState

logger = logging.getLogger(__name__)

DIALOG_WIDTHS = {"sm": 420, "md": 560, "lg": 760, "xl": 960}
ERROR_STYLE = "color: #d32f2f; font-size: 11px;"
HELPER_STYLE = "color: palette(Mid); font-size: 11px;"


class _FieldRow:
    """Widgets belonging to one field."""

    def __init__(self, form_field: FormField, editor: FieldEditor, widget: QWidget, error_label: QLabel) -> None:
        self.field = form_field
        self.editor = editor
        self.widget = widget
        self.error_label = error_label


class FormDialog(QDialog):
    submitted = Signal(object)
    closed = Signal()

    def __init__(
        self,
        title: str,
        fields: Sequence[FormField],
        *,
        description: Optional[str] = None,
        submit_label: str = "Save",
        mode: FormMode | str = FormMode.CREATE,
        size: str = "md",
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        check_unique_names(fields)
        if size not in DIALOG_WIDTHS:
            raise ValueError(f"Unknown dialog size: {size!r}")
        self.setWindowTitle(title)
        self.setMinimumWidth(DIALOG_WIDTHS[size])
        self._fields = list(fields)
        self._mode = FormMode(mode)
        self._submit_label = submit_label
        self._state = FormState()
        self._rows: dict[str, _FieldRow] = {}
        self._loading = False
        self._populating = False

        self._build_ui(title, description)
        self._apply_mode()

    # ----- construction ------------------------------------------------------
    def _build_ui(self, title: str, description: Optional[str]) -> None:
        layout = QVBoxLayout(self)

        self.title_label = QLabel(title)
        self.title_label.setStyleSheet("font-size: 16px; font-weight: 600;")
        layout.addWidget(self.title_label)

        self.description_label = QLabel(description or "")
        self.description_label.setWordWrap(True)
        self.description_label.setStyleSheet(HELPER_STYLE)
        self.description_label.setVisible(bool(description))
        layout.addWidget(self.description_label)

        self.error_banner = QLabel("")
        self.error_banner.setObjectName("formErrorBanner")
        self.error_banner.setWordWrap(True)
        self.error_banner.setStyleSheet(
            "#formErrorBanner { background: #fdecea; color: #b71c1c; border: 1px solid #f5c6cb;"
            " border-radius: 6px; padding: 8px; }"
        )
        self.error_banner.hide()
        layout.addWidget(self.error_banner)

        body = QWidget()
        grid = QGridLayout(body)
        grid.setHorizontalSpacing(16)
        grid.setVerticalSpacing(10)
        grid.setColumnStretch(0, 1)
        grid.setColumnStretch(1, 1)

        row, col = 0, 0
        for form_field in self._fields:
            if form_field.col_span == 2 and col == 1:
                row, col = row + 1, 0
            grid.addWidget(self._build_field(form_field), row, col, 1, form_field.col_span)
            col += form_field.col_span
            if col >= 2:
                row, col = row + 1, 0
        grid.setRowStretch(row + 1, 1)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.Shape.NoFrame)
        scroll.setWidget(body)
        layout.addWidget(scroll, stretch=1)

        self.button_box = QDialogButtonBox(Qt.Orientation.Horizontal, self)
        self.cancel_button = QPushButton("Cancel")
        self.submit_button = QPushButton(self._submit_label)
        self.submit_button.setDefault(True)
        self.button_box.addButton(self.cancel_button, QDialogButtonBox.ButtonRole.RejectRole)
        self.button_box.addButton(self.submit_button, QDialogButtonBox.ButtonRole.AcceptRole)
        self.button_box.accepted.connect(self.accept)
        self.button_box.rejected.connect(self.reject)
        layout.addWidget(self.button_box)

    def _build_field(self, form_field: FormField) -> QWidget:
        container = QWidget()
        box = QVBoxLayout(container)
        box.setContentsMargins(0, 0, 0, 0)
        box.setSpacing(4)

        label = QLabel()
        label.setTextFormat(Qt.TextFormat.RichText)
        text = form_field.label
        if form_field.required:
            text += ' <span style="color:#d32f2f">*</span>'
        label.setText(text)
        box.addWidget(label)

        editor = editor_for(form_field)
        widget = editor.create(form_field, container)
        widget.setObjectName(f"field_{form_field.name}")
        widget.installEventFilter(self)
        editor.connect(widget, lambda value, name=form_field.name: self._on_widget_changed(name, value))
        label.setBuddy(widget)
        box.addWidget(widget)

        # Checkbox helper text is rendered inline beside the box.
        if form_field.helper_text and form_field.type not in (FieldType.CHECKBOX, FieldType.FILE):
            helper = QLabel(form_field.helper_text)
            helper.setWordWrap(True)
            helper.setStyleSheet(HELPER_STYLE)
            box.addWidget(helper)

        error_label = QLabel("")
        error_label.setStyleSheet(ERROR_STYLE)
        error_label.setWordWrap(True)
        error_label.hide()
        box.addWidget(error_label)

        self._rows[form_field.name] = _FieldRow(form_field, editor, widget, error_label)
        return container

    # ----- public API ----------------------------------------------------------
    @property
    def mode(self) -> FormMode:
        return self._mode

    @property
    def fields(self) -> list[FormField]:
        return list(self._fields)

    @property
    def is_loading(self) -> bool:
        return self._loading

    def values(self) -> dict[str, Any]:
        return dict(self._state.values)

    def errors(self) -> dict[str, str]:
        return dict(self._state.errors)

    def touched(self) -> set[str]:
        return set(self._state.touched)

    def field_widget(self, name: str) -> QWidget:
        return self._rows[name].widget

    def field_error_text(self, name: str) -> str:
        label = self._rows[name].error_label
        return label.text() if not label.isHidden() else ""

    def set_title(self, title: str) -> None:
        self.setWindowTitle(title)
        self.title_label.setText(title)

    def set_submit_label(self, label: str) -> None:
        self._submit_label = label
        self.submit_button.setText(label)

    def open_form(self, initial_values: Mapping[str, Any] | None = None, mode: FormMode | str | None = None) -> None:
        """Reset the form from ``initial_values`` and show the dialog."""
        if mode is not None:
            self._mode = FormMode(mode)
        self._state = FormState.initial(self._fields, initial_values)
        self._populating = True
        try:
            for row in self._rows.values():
                row.editor.write(row.widget, self._state.values.get(row.field.name))
        finally:
            self._populating = False
        self._loading = False
        self.set_error(None)
        self._apply_mode()
        self._refresh_errors()
        logger.debug("form %r opened in %s mode", self.windowTitle(), self._mode.value)
        self.open()

    def handle_change(self, name: str, value: Any) -> None:
        self._state.change(name, value)
        self._refresh_error(name)

    def handle_blur(self, name: str) -> None:
        row = self._rows.get(name)
        if row is None or self._mode is FormMode.VIEW:
            return
        self._state.blur(row.field)
        self._refresh_error(name)

    def submit(self) -> bool:
        """Validate and emit :attr:`submitted`; ``True`` when emitted.

        In view mode this only closes the dialog.
        """
        if self._mode is FormMode.VIEW:
            self.reject()
            return False
        if self._loading:
            return False
        valid = self._state.validate(self._fields)
        self._refresh_errors()
        if not valid:
            logger.debug("form %r blocked by %d validation error(s)", self.windowTitle(), len(self._state.errors))
            return False
        self.submitted.emit(self.values())
        return True

    def accept(self) -> None:  # type: ignore[override]
        self.submit()

    def reject(self) -> None:  # type: ignore[override]
        super().reject()
        self.closed.emit()

    def set_loading(self, loading: bool) -> None:
        self._loading = bool(loading)
        self._apply_mode()

    def set_error(self, message: Optional[str]) -> None:
        self.error_banner.setText(message or "")
        self.error_banner.setVisible(bool(message))

    # ----- internals -----------------------------------------------------------
    def _on_widget_changed(self, name: str, value: Any) -> None:
        if self._populating:
            return
        self.handle_change(name, value)

    def _apply_mode(self) -> None:
        view = self._mode is FormMode.VIEW
        for row in self._rows.values():
            row.editor.set_read_only(row.widget, view or self._loading or row.field.disabled)
        self.submit_button.setVisible(not view)
        self.submit_button.setEnabled(not self._loading)
        # Enter clicks the visible default button, which closes a view form.
        self.submit_button.setDefault(not view)
        self.cancel_button.setDefault(view)
        self.cancel_button.setText("Close" if view else "Cancel")
        self.cancel_button.setEnabled(not self._loading)

    def _refresh_error(self, name: str) -> None:
        row = self._rows.get(name)
        if row is None:
            return
        message = self._state.visible_error(name)
        row.error_label.setText(message or "")
        row.error_label.setVisible(bool(message))

    def _refresh_errors(self) -> None:
        for name in self._rows:
            self._refresh_error(name)

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # type: ignore[override]
        if event.type() == QEvent.Type.FocusOut:
            name = watched.objectName()
            if name.startswith("field_"):
                self.handle_blur(name[len("field_"):])
        return super().eventFilter(watched, event)


__all__ = ["DIALOG_WIDTHS", "FormDialog"]
