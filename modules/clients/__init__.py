"""Client management list page."""

from __future__ import annotations

from typing import Any

from PySide6.QtWidgets import QWidget

from modules.crud_page import CrudPage
from services.api_client import ApiClient

from .page import CLIENT_COLUMNS, CLIENT_FIELDS, CLIENTS_PAGE
from .schemas import ClientPayload


def create_clients_page(client: ApiClient, parent: QWidget | None = None, **kwargs: Any) -> CrudPage:
    return CrudPage(CLIENTS_PAGE, client, parent=parent, **kwargs)


__all__ = [
    "CLIENTS_PAGE",
    "CLIENT_COLUMNS",
    "CLIENT_FIELDS",
    "ClientPayload",
    "create_clients_page",
]
