"""Fleet vehicles list page."""

from __future__ import annotations

from typing import Any

from PySide6.QtWidgets import QWidget

from modules.crud_page import CrudPage
from services.api_client import ApiClient

from .page import VEHICLE_COLUMNS, VEHICLE_FIELDS, VEHICLES_PAGE
from .schemas import VehiclePayload


def create_vehicles_page(client: ApiClient, parent: QWidget | None = None, **kwargs: Any) -> CrudPage:
    return CrudPage(VEHICLES_PAGE, client, parent=parent, **kwargs)


__all__ = [
    "VEHICLES_PAGE",
    "VEHICLE_COLUMNS",
    "VEHICLE_FIELDS",
    "VehiclePayload",
    "create_vehicles_page",
]
