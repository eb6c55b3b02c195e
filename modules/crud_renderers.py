"""Small cell renderers shared by the page definitions."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

from ui.crud import SelectOption
from ui.crud.columns import PLACEHOLDER


def option_label(options: Sequence[SelectOption], default: str) -> Callable[[Any, Mapping[str, Any]], str]:
    """Render a stored option value as its human label."""
    labels = {option.value: option.label for option in options}

    def render(value: Any, _row: Mapping[str, Any]) -> str:
        if value in (None, ""):
            return default
        return labels.get(str(value), labels.get(str(value).lower(), str(value)))

    return render


def money(value: Any, _row: Mapping[str, Any]) -> str:
    if not value:
        return PLACEHOLDER
    try:
        return f"${float(value):.2f}"
    except (TypeError, ValueError):
        return str(value)


__all__ = ["money", "option_label"]
