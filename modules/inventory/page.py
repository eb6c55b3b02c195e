from __future__ import annotations

from typing import Any, Mapping

from modules.crud_page import PageDefinition
from modules.crud_renderers import money, option_label
from ui.crud import Column, FieldType, FormField, SelectOption

from .schemas import GeneralItemPayload

CATEGORIES = (
    SelectOption("uniform", "Uniforms"),
    SelectOption("equipment", "Equipment"),
    SelectOption("office", "Office Supplies"),
    SelectOption("safety", "Safety Gear"),
    SelectOption("tools", "Tools"),
    SelectOption("consumables", "Consumables"),
    SelectOption("other", "Other"),
)

UNITS = (
    SelectOption("pcs", "Pieces"),
    SelectOption("sets", "Sets"),
    SelectOption("pairs", "Pairs"),
    SelectOption("boxes", "Boxes"),
    SelectOption("kg", "Kilograms"),
    SelectOption("liters", "Liters"),
    SelectOption("meters", "Meters"),
)

ITEM_STATUSES = (
    SelectOption("active", "Active"),
    SelectOption("inactive", "Inactive"),
    SelectOption("discontinued", "Discontinued"),
)


def is_low_stock(row: Mapping[str, Any]) -> bool:
    try:
        qty = float(row.get("quantity_on_hand") or 0)
        minimum = float(row.get("min_quantity") or 0)
    except (TypeError, ValueError):
        return False
    return minimum > 0 and qty <= minimum


def render_quantity(value: Any, row: Mapping[str, Any]) -> str:
    try:
        qty = float(value or 0)
    except (TypeError, ValueError):
        qty = 0.0
    text = f"{qty:g} {row.get('unit_name') or ''}".strip()
    return f"{text} (low)" if is_low_stock(row) else text


ITEM_COLUMNS = (
    Column("item_code", "Code", width=100),
    Column("name", "Item Name", sortable=True),
    Column("category", "Category", render=option_label(CATEGORIES, "-")),
    Column("quantity_on_hand", "Qty", width=80, render=render_quantity),
    Column("min_quantity", "Min", width=60),
    Column("storage_location", "Location"),
    Column("unit_cost", "Unit Cost", width=90, render=money),
    Column("status", "Status", width=100, render=option_label(ITEM_STATUSES, "Active")),
)

ITEM_FIELDS = (
    FormField("item_code", "Item Code", required=True, placeholder="e.g., GEN-001"),
    FormField("name", "Item Name", required=True, placeholder="Enter item name"),
    FormField("category", "Category", FieldType.SELECT, required=True, options=CATEGORIES),
    FormField("unit_name", "Unit", FieldType.SELECT, required=True, options=UNITS),
    FormField("quantity_on_hand", "Quantity", FieldType.NUMBER, required=True, min=0),
    FormField("min_quantity", "Min Quantity", FieldType.NUMBER, min=0, helper_text="Alert when below"),
    FormField("max_quantity", "Max Quantity", FieldType.NUMBER, min=0),
    FormField("unit_cost", "Unit Cost ($)", FieldType.NUMBER, min=0, step=0.01),
    FormField("storage_location", "Storage Location", placeholder="e.g., Warehouse A, Shelf 3"),
    FormField("status", "Status", FieldType.SELECT, required=True, options=ITEM_STATUSES),
    FormField("description", "Description", FieldType.TEXTAREA, col_span=2, rows=2),
)

INVENTORY_PAGE = PageDefinition(
    title="General Inventory",
    description="Track stock levels of general items.",
    entity="Item",
    endpoint="/api/general-inventory/items",
    item_key="item_code",
    columns=ITEM_COLUMNS,
    fields=ITEM_FIELDS,
    name_field="name",
    search_placeholder="Search items...",
    empty_message="No items found. Add your first item to get started.",
    create_defaults={"status": "active", "unit_name": "pcs", "quantity_on_hand": 0},
    payload_model=GeneralItemPayload,
    dialog_size="lg",
)
