from __future__ import annotations

import pytest

from ui.crud.columns import PLACEHOLDER, Column, display_value, page_window, resolve_path


def test_resolve_path_follows_nested_keys():
    row = {"client": {"name": "Acme", "site": {"city": "Lahore"}}, "id": 1}
    assert resolve_path(row, "id") == 1
    assert resolve_path(row, "client.site.city") == "Lahore"
    assert resolve_path(row, "client.missing") is None
    assert resolve_path(row, "id.deeper") is None


def test_display_value_placeholder_and_raw():
    col = Column("plate", "Plate")
    assert display_value(col, {"plate": None}) == PLACEHOLDER
    assert display_value(col, {}) == PLACEHOLDER
    assert display_value(col, {"plate": "ABC-1"}) == "ABC-1"
    assert display_value(col, {"plate": 0}) == "0"
    assert display_value(col, {"plate": False}) == "false"


def test_render_is_sole_authority():
    col = Column("status", "Status", render=lambda value, row: f"<{value}:{row['id']}>")
    assert display_value(col, {"status": None, "id": 4}) == "<None:4>"
    assert display_value(col, {"status": "active", "id": 5}) == "<active:5>"


@pytest.mark.parametrize(
    ("page", "size", "total", "pages", "start", "end", "prev", "nxt"),
    [
        (1, 20, 95, 5, 1, 20, False, True),
        (5, 20, 95, 5, 81, 95, True, False),
        (3, 10, 30, 3, 21, 30, True, False),
        (1, 10, 0, 0, 1, 0, False, False),
    ],
)
def test_page_window(page, size, total, pages, start, end, prev, nxt):
    window = page_window(page, size, total)
    assert window.total_pages == pages
    assert (window.start, window.end) == (start, end)
    assert window.has_previous is prev
    assert window.has_next is nxt


def test_page_window_labels_and_visibility():
    window = page_window(2, 10, 25)
    assert window.summary() == "Showing 11 to 20 of 25 results"
    assert window.page_label() == "Page 2 of 3"
    assert window.visible
    assert not page_window(1, 10, 10).visible
