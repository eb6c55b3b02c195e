"""Column descriptors and the pure helpers behind :class:`DataTable`."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from PySide6.QtCore import Qt

PLACEHOLDER = "-"
PAGE_SIZE_OPTIONS: tuple[int, ...] = (10, 25, 50, 100)

Row = Mapping[str, Any]
CellRenderer = Callable[[Any, Row], Any]


@dataclass(frozen=True)
class Column:
    """How one value of a row is shown in the grid.

    ``key`` may be a dotted path (``"client.name"``) into nested rows.  When
    ``render`` is given its return value is shown as-is; otherwise the raw
    value is shown, with ``None`` as :data:`PLACEHOLDER`.
    """

    key: str
    header: str
    width: Optional[int] = None
    render: Optional[CellRenderer] = None
    sortable: bool = False
    alignment: Qt.AlignmentFlag = Qt.AlignmentFlag.AlignVCenter | Qt.AlignmentFlag.AlignLeft


def resolve_path(row: Any, key: str) -> Any:
    """Follow a dotted ``key`` through nested mappings; missing parts give ``None``."""
    value: Any = row
    for part in key.split("."):
        if isinstance(value, Mapping) and part in value:
            value = value[part]
        else:
            return None
    return value


def display_value(column: Column, row: Row) -> Any:
    value = resolve_path(row, column.key)
    if column.render is not None:
        return column.render(value, row)
    if value is None:
        return PLACEHOLDER
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class PageWindow:
    page: int
    page_size: int
    total: int
    total_pages: int
    start: int
    end: int

    @property
    def visible(self) -> bool:
        """The pagination bar only appears when there is more than one page."""
        return self.total > self.page_size

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def summary(self) -> str:
        return f"Showing {self.start} to {self.end} of {self.total} results"

    def page_label(self) -> str:
        return f"Page {self.page} of {self.total_pages}"


def page_window(page: int, page_size: int, total: int) -> PageWindow:
    """Compute the 1-indexed ``start``/``end`` and page count for a page."""
    page_size = max(1, int(page_size))
    total = max(0, int(total))
    total_pages = math.ceil(total / page_size)
    start = (page - 1) * page_size + 1
    end = min(page * page_size, total)
    return PageWindow(page, page_size, total, total_pages, start, end)


__all__ = [
    "CellRenderer",
    "Column",
    "PAGE_SIZE_OPTIONS",
    "PLACEHOLDER",
    "PageWindow",
    "Row",
    "display_value",
    "page_window",
    "resolve_path",
]
