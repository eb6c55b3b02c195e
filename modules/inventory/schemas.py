"""Pydantic schemas for general inventory payloads."""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import Field

from modules.crud_page import FormPayload

Quantity = Union[int, float]
ItemStatus = Literal["active", "inactive", "discontinued"]


class GeneralItemPayload(FormPayload):
    item_code: str
    name: str
    category: str
    unit_name: str
    quantity_on_hand: Quantity = Field(ge=0)
    min_quantity: Optional[Quantity] = Field(default=None, ge=0)
    max_quantity: Optional[Quantity] = Field(default=None, ge=0)
    unit_cost: Optional[float] = Field(default=None, ge=0)
    storage_location: Optional[str] = None
    status: ItemStatus
    description: Optional[str] = None
