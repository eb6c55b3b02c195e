"""Per-kind editing strategies for form fields.

Every :class:`FieldType` maps to one :class:`FieldEditor`.  An editor knows
how to build its input widget, move values in and out of it, coerce raw
input, decide whether a value counts as missing and apply the format rules
a browser would enforce for that input type.  :func:`editor_for` is the only
place that branches on the field type.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Callable, Optional

from PySide6.QtCore import QDate, QDateTime, QLocale, Qt
from PySide6.QtGui import QDoubleValidator
from PySide6.QtWidgets import (
    QAbstractItemView,
    QCheckBox,
    QComboBox,
    QDateEdit,
    QDateTimeEdit,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPlainTextEdit,
    QWidget,
)

from .fields import FieldType, FormField
from .widgets import FilePicker

ChangeCallback = Callable[[Any], None]

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
DATE_FORMAT = "yyyy-MM-dd"
DATETIME_FORMAT = "yyyy-MM-dd'T'HH:mm"
# Date editors cannot be blank; the minimum date stands in for "no value".
# Year 100 is the earliest date a QDateTimeEdit accepts and sits far below any
# stored date, so every real date (1900-01-01 included) keeps its value.
EMPTY_DATE = QDate(100, 1, 1)


def _format_number(value: float) -> str:
    return f"{value:g}"


class FieldEditor:
    """Base strategy: a plain single-line text input."""

    def create(self, field: FormField, parent: QWidget | None = None) -> QWidget:
        widget = QLineEdit(parent)
        if field.placeholder:
            widget.setPlaceholderText(field.placeholder)
        return widget

    def write(self, widget: QWidget, value: Any) -> None:
        widget.setText("" if value is None else str(value))

    def read(self, widget: QWidget) -> Any:
        return self.parse_input(widget.text())

    def connect(self, widget: QWidget, callback: ChangeCallback) -> None:
        widget.textChanged.connect(lambda raw: callback(self.parse_input(raw)))

    def parse_input(self, raw: Any) -> Any:
        return raw

    def is_missing(self, value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, str):
            return value == ""
        if isinstance(value, (list, tuple)):
            return len(value) == 0
        return False

    def check(self, field: FormField, value: Any) -> Optional[str]:
        """Format error for a present value, or ``None``."""
        return None

    def set_read_only(self, widget: QWidget, read_only: bool) -> None:
        widget.setEnabled(not read_only)


class TextEditor(FieldEditor):
    pass


class PasswordEditor(TextEditor):
    def create(self, field: FormField, parent: QWidget | None = None) -> QWidget:
        widget = super().create(field, parent)
        widget.setEchoMode(QLineEdit.EchoMode.Password)
        return widget


class EmailEditor(TextEditor):
    def check(self, field: FormField, value: Any) -> Optional[str]:
        if self.is_missing(value):
            return None
        if not EMAIL_RE.match(str(value).strip()):
            return f"{field.label} must be a valid email address"
        return None


class UrlEditor(TextEditor):
    def check(self, field: FormField, value: Any) -> Optional[str]:
        if self.is_missing(value):
            return None
        text = str(value).strip()
        if not re.match(r"^[a-zA-Z][a-zA-Z0-9+.-]*://\S+$", text):
            return f"{field.label} must be a valid URL"
        return None


class NumberEditor(FieldEditor):
    """Numeric input; empty text is ``None``, never ``""`` or NaN."""

    def create(self, field: FormField, parent: QWidget | None = None) -> QWidget:
        widget = super().create(field, parent)
        validator = QDoubleValidator(widget)
        # Stored values use "." decimals whatever the desktop locale is.
        validator.setLocale(QLocale.c())
        validator.setNotation(QDoubleValidator.Notation.StandardNotation)
        if field.min is not None:
            validator.setBottom(float(field.min))
        if field.max is not None:
            validator.setTop(float(field.max))
        widget.setValidator(validator)
        widget.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        return widget

    def write(self, widget: QWidget, value: Any) -> None:
        if value is None or value == "":
            widget.setText("")
        elif isinstance(value, float):
            widget.setText(_format_number(value))
        else:
            widget.setText(str(value))

    def parse_input(self, raw: Any) -> Any:
        text = str(raw if raw is not None else "").strip()
        if text == "":
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            # Partial input such as "-" or "1e" while typing.
            return None

    def check(self, field: FormField, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            value = self.parse_input(value)
            if value is None:
                return f"{field.label} must be a number"
        if field.min is not None and value < field.min:
            return f"{field.label} must be at least {_format_number(field.min)}"
        if field.max is not None and value > field.max:
            return f"{field.label} must be at most {_format_number(field.max)}"
        return None


class DateEditor(FieldEditor):
    """Calendar date stored as ``YYYY-MM-DD``; blank is ``""``."""

    def create(self, field: FormField, parent: QWidget | None = None) -> QWidget:
        widget = QDateEdit(parent)
        widget.setCalendarPopup(True)
        widget.setDisplayFormat(DATE_FORMAT)
        widget.setMinimumDate(EMPTY_DATE)
        widget.setSpecialValueText(" ")
        widget.setDate(EMPTY_DATE)
        return widget

    def write(self, widget: QWidget, value: Any) -> None:
        date = QDate.fromString(str(value)[:10], Qt.DateFormat.ISODate) if value else QDate()
        widget.setDate(date if date.isValid() else EMPTY_DATE)

    def read(self, widget: QWidget) -> Any:
        return self.parse_input(widget.date())

    def connect(self, widget: QWidget, callback: ChangeCallback) -> None:
        widget.dateChanged.connect(lambda date: callback(self.parse_input(date)))

    def parse_input(self, raw: Any) -> Any:
        if not isinstance(raw, QDate) or not raw.isValid() or raw == EMPTY_DATE:
            return ""
        return raw.toString(Qt.DateFormat.ISODate)


class DateTimeEditor(FieldEditor):
    """Local date and time stored as ``YYYY-MM-DDTHH:MM``."""

    def create(self, field: FormField, parent: QWidget | None = None) -> QWidget:
        widget = QDateTimeEdit(parent)
        widget.setCalendarPopup(True)
        widget.setDisplayFormat("yyyy-MM-dd HH:mm")
        widget.setMinimumDate(EMPTY_DATE)
        widget.setSpecialValueText(" ")
        widget.setDateTime(EMPTY_DATE.startOfDay())
        return widget

    def write(self, widget: QWidget, value: Any) -> None:
        parsed = QDateTime.fromString(str(value), Qt.DateFormat.ISODate) if value else QDateTime()
        widget.setDateTime(parsed if parsed.isValid() else EMPTY_DATE.startOfDay())

    def read(self, widget: QWidget) -> Any:
        return self.parse_input(widget.dateTime())

    def connect(self, widget: QWidget, callback: ChangeCallback) -> None:
        widget.dateTimeChanged.connect(lambda value: callback(self.parse_input(value)))

    def parse_input(self, raw: Any) -> Any:
        if not isinstance(raw, QDateTime) or not raw.isValid() or raw.date() == EMPTY_DATE:
            return ""
        return raw.toString(DATETIME_FORMAT)


class TextAreaEditor(FieldEditor):
    def create(self, field: FormField, parent: QWidget | None = None) -> QWidget:
        widget = QPlainTextEdit(parent)
        if field.placeholder:
            widget.setPlaceholderText(field.placeholder)
        line_height = widget.fontMetrics().lineSpacing()
        widget.setFixedHeight(line_height * max(1, field.rows) + 14)
        widget.setTabChangesFocus(True)
        return widget

    def write(self, widget: QWidget, value: Any) -> None:
        widget.setPlainText("" if value is None else str(value))

    def read(self, widget: QWidget) -> Any:
        return widget.toPlainText()

    def connect(self, widget: QWidget, callback: ChangeCallback) -> None:
        widget.textChanged.connect(lambda: callback(widget.toPlainText()))


class SelectEditor(FieldEditor):
    """Single choice; the leading placeholder entry means ``""``."""

    def create(self, field: FormField, parent: QWidget | None = None) -> QWidget:
        widget = QComboBox(parent)
        widget.addItem(field.placeholder or "Select...", "")
        for option in field.options:
            widget.addItem(option.label, option.value)
        return widget

    def write(self, widget: QWidget, value: Any) -> None:
        index = widget.findData("" if value is None else str(value))
        widget.setCurrentIndex(index if index >= 0 else 0)

    def read(self, widget: QWidget) -> Any:
        return widget.currentData() or ""

    def connect(self, widget: QWidget, callback: ChangeCallback) -> None:
        widget.currentIndexChanged.connect(lambda _index: callback(widget.currentData() or ""))


class MultiSelectEditor(FieldEditor):
    """Several choices held as a list of option values in option order."""

    def create(self, field: FormField, parent: QWidget | None = None) -> QWidget:
        widget = QListWidget(parent)
        widget.setSelectionMode(QAbstractItemView.SelectionMode.MultiSelection)
        for option in field.options:
            item = QListWidgetItem(option.label)
            item.setData(Qt.ItemDataRole.UserRole, option.value)
            widget.addItem(item)
        row_height = widget.sizeHintForRow(0) if widget.count() else 20
        widget.setFixedHeight(min(6, max(3, widget.count())) * row_height + 6)
        return widget

    def write(self, widget: QWidget, value: Any) -> None:
        wanted = {str(v) for v in value} if isinstance(value, (list, tuple, set)) else set()
        for row in range(widget.count()):
            item = widget.item(row)
            item.setSelected(str(item.data(Qt.ItemDataRole.UserRole)) in wanted)

    def read(self, widget: QWidget) -> Any:
        return [
            widget.item(row).data(Qt.ItemDataRole.UserRole)
            for row in range(widget.count())
            if widget.item(row).isSelected()
        ]

    def connect(self, widget: QWidget, callback: ChangeCallback) -> None:
        widget.itemSelectionChanged.connect(lambda: callback(self.read(widget)))


class CheckboxEditor(FieldEditor):
    def create(self, field: FormField, parent: QWidget | None = None) -> QWidget:
        return QCheckBox(field.helper_text or "", parent)

    def write(self, widget: QWidget, value: Any) -> None:
        widget.setChecked(bool(value))

    def read(self, widget: QWidget) -> Any:
        return widget.isChecked()

    def connect(self, widget: QWidget, callback: ChangeCallback) -> None:
        widget.toggled.connect(lambda checked: callback(bool(checked)))


class FileEditor(FieldEditor):
    """Holds a local :class:`~pathlib.Path`; nothing is uploaded here."""

    def create(self, field: FormField, parent: QWidget | None = None) -> QWidget:
        return FilePicker(accept=field.accept, helper_text=field.helper_text, parent=parent)

    def write(self, widget: QWidget, value: Any) -> None:
        widget.blockSignals(True)
        try:
            widget.set_file(value if isinstance(value, (str, Path)) and value else None)
        finally:
            widget.blockSignals(False)

    def read(self, widget: QWidget) -> Any:
        return widget.file()

    def connect(self, widget: QWidget, callback: ChangeCallback) -> None:
        widget.fileChanged.connect(callback)

    def set_read_only(self, widget: QWidget, read_only: bool) -> None:
        widget.browse_button.setEnabled(not read_only)
        widget.remove_button.setEnabled(not read_only)


_TEXT = TextEditor()
_EDITORS: dict[FieldType, FieldEditor] = {
    FieldType.TEXT: _TEXT,
    FieldType.TEL: _TEXT,
    FieldType.EMAIL: EmailEditor(),
    FieldType.URL: UrlEditor(),
    FieldType.PASSWORD: PasswordEditor(),
    FieldType.NUMBER: NumberEditor(),
    FieldType.DATE: DateEditor(),
    FieldType.DATETIME: DateTimeEditor(),
    FieldType.TEXTAREA: TextAreaEditor(),
    FieldType.CHECKBOX: CheckboxEditor(),
    FieldType.FILE: FileEditor(),
}
_SELECT = SelectEditor()
_MULTI_SELECT = MultiSelectEditor()


def editor_for(field: FormField) -> FieldEditor:
    if field.type is FieldType.SELECT:
        return _MULTI_SELECT if field.multiple else _SELECT
    return _EDITORS[field.type]


__all__ = [
    "CheckboxEditor",
    "DateEditor",
    "DateTimeEditor",
    "EmailEditor",
    "FieldEditor",
    "FileEditor",
    "MultiSelectEditor",
    "NumberEditor",
    "PasswordEditor",
    "SelectEditor",
    "TextAreaEditor",
    "TextEditor",
    "UrlEditor",
    "editor_for",
]
