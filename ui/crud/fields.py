"""Field descriptors consumed by :class:`ui.crud.form_dialog.FormDialog`."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, NamedTuple, Optional, Sequence


class FieldType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    EMAIL = "email"
    PASSWORD = "password"
    DATE = "date"
    DATETIME = "datetime"
    TEL = "tel"
    URL = "url"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    FILE = "file"

    @classmethod
    def _missing_(cls, value: object) -> "FieldType | None":
        if value == "datetime-local":
            return cls.DATETIME
        return None


class FormMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"
    VIEW = "view"


class SelectOption(NamedTuple):
    value: str
    label: str


Validator = Callable[[Any], Optional[str]]


@dataclass
class FormField:
    name: str
    label: str
    type: FieldType = FieldType.TEXT
    placeholder: Optional[str] = None
    required: bool = False
    disabled: bool = False
    options: Sequence[SelectOption] = ()
    multiple: bool = False
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    rows: int = 3
    accept: Optional[str] = None
    helper_text: Optional[str] = None
    col_span: int = 1
    default_value: Any = None
    validation: Optional[Validator] = None

    def __post_init__(self) -> None:
        self.type = FieldType(self.type)
        self.options = tuple(SelectOption(*opt) for opt in self.options)
        if self.col_span not in (1, 2):
            raise ValueError(f"col_span must be 1 or 2, got {self.col_span!r}")


def check_unique_names(fields: Sequence[FormField]) -> None:
    seen: set[str] = set()
    for f in fields:
        if f.name in seen:
            raise ValueError(f"Duplicate form field name: {f.name}")
        seen.add(f.name)


__all__ = [
    "FieldType",
    "FormField",
    "FormMode",
    "SelectOption",
    "Validator",
    "check_unique_names",
]
