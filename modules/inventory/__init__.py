"""General inventory list page."""

from __future__ import annotations

from typing import Any

from PySide6.QtWidgets import QWidget

from modules.crud_page import CrudPage
from services.api_client import ApiClient

from .page import INVENTORY_PAGE, ITEM_COLUMNS, ITEM_FIELDS, is_low_stock
from .schemas import GeneralItemPayload


def create_inventory_page(client: ApiClient, parent: QWidget | None = None, **kwargs: Any) -> CrudPage:
    return CrudPage(INVENTORY_PAGE, client, parent=parent, **kwargs)


__all__ = [
    "INVENTORY_PAGE",
    "ITEM_COLUMNS",
    "ITEM_FIELDS",
    "GeneralItemPayload",
    "create_inventory_page",
    "is_low_stock",
]
