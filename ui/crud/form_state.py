"""Values, errors and touched flags of an open form."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

from .editors import editor_for
from .fields import FormField


def field_error(form_field: FormField, value: Any, *, include_required: bool = True) -> Optional[str]:
    """First error for ``value``: required, then format, then custom validation."""
    editor = editor_for(form_field)
    if editor.is_missing(value):
        if include_required and form_field.required:
            return f"{form_field.label} is required"
    else:
        message = editor.check(form_field, value)
        if message:
            return message
    if form_field.validation is not None:
        return form_field.validation(value) or None
    return None


@dataclass
class FormState:
    values: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)
    touched: set[str] = field(default_factory=set)

    @classmethod
    def initial(cls, fields: Sequence[FormField], initial_values: Mapping[str, Any] | None = None) -> "FormState":
        values = {f.name: f.default_value for f in fields if f.default_value is not None}
        values.update(initial_values or {})
        return cls(values=values)

    def change(self, name: str, value: Any) -> None:
        self.values[name] = value
        self.errors.pop(name, None)

    def blur(self, form_field: FormField) -> Optional[str]:
        """Mark touched and run the non-required checks for one field."""
        self.touched.add(form_field.name)
        message = field_error(form_field, self.values.get(form_field.name), include_required=False)
        if message:
            self.errors[form_field.name] = message
        return message

    def validate(self, fields: Sequence[FormField]) -> bool:
        errors: dict[str, str] = {}
        for f in fields:
            message = field_error(f, self.values.get(f.name))
            if message:
                errors[f.name] = message
        self.errors = errors
        self.touched.update(f.name for f in fields)
        return not errors

    def visible_error(self, name: str) -> Optional[str]:
        return self.errors.get(name) if name in self.touched else None


__all__ = ["FormState", "field_error"]
