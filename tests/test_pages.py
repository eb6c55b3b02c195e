from __future__ import annotations

import pytest
from pydantic import ValidationError

from modules.clients import CLIENTS_PAGE, ClientPayload
from modules.crud_page import validation_message
from modules.crud_renderers import money, option_label
from modules.inventory import INVENTORY_PAGE
from modules.inventory.page import CATEGORIES, is_low_stock, render_quantity
from modules.inventory.schemas import GeneralItemPayload
from modules.vehicles import VEHICLES_PAGE
from modules.vehicles.schemas import VehiclePayload
from ui.crud import FieldType
from ui.crud.fields import check_unique_names

PAGES = [VEHICLES_PAGE, CLIENTS_PAGE, INVENTORY_PAGE]


@pytest.mark.parametrize("definition", PAGES, ids=lambda d: d.entity)
def test_definitions_are_consistent(definition):
    check_unique_names(definition.fields)
    names = {f.name for f in definition.fields}
    assert definition.name_field in names
    assert set(definition.create_defaults) <= names
    for f in definition.fields:
        if f.type is FieldType.SELECT:
            assert f.options, f.name


def test_option_label_and_money():
    render = option_label(CATEGORIES, "-")
    assert render("safety", {}) == "Safety Gear"
    assert render("SAFETY", {}) == "Safety Gear"
    assert render("", {}) == "-"
    assert render("misc", {}) == "misc"

    assert money(12.5, {}) == "$12.50"
    assert money(None, {}) == "-"
    assert money("n/a", {}) == "n/a"


@pytest.mark.parametrize(
    ("row", "low"),
    [
        ({"quantity_on_hand": 3, "min_quantity": 5}, True),
        ({"quantity_on_hand": 5, "min_quantity": 5}, True),
        ({"quantity_on_hand": 8, "min_quantity": 5}, False),
        ({"quantity_on_hand": 0, "min_quantity": None}, False),
        ({"quantity_on_hand": "x", "min_quantity": 2}, False),
    ],
)
def test_is_low_stock(row, low):
    assert is_low_stock(row) is low


def test_render_quantity():
    assert render_quantity(12, {"quantity_on_hand": 12, "unit_name": "pcs"}) == "12 pcs"
    assert render_quantity(2, {"quantity_on_hand": 2, "min_quantity": 4, "unit_name": "pairs"}) == "2 pairs (low)"
    assert render_quantity(None, {}) == "0"


def _vehicle(**overrides):
    data = {
        "vehicle_id": "VH-001",
        "vehicle_type": "van",
        "category": "company",
        "make_model": "Toyota Hiace",
        "license_plate": "LEA-1234",
        "chassis_number": "",
        "year": 2021,
        "status": "active",
        "compliance": "pending",
        "government_permit": "valid",
    }
    data.update(overrides)
    return data


def test_vehicle_payload_normalises_blanks():
    payload = VehiclePayload.model_validate(_vehicle()).model_dump(mode="json")
    assert payload["chassis_number"] is None
    assert payload["asset_tag"] is None
    assert payload["year"] == 2021


def test_vehicle_payload_rejects_out_of_range_year():
    with pytest.raises(ValidationError) as info:
        VehiclePayload.model_validate(_vehicle(year=1985))
    assert validation_message(info.value).startswith("year:")


def test_client_payload_requires_name():
    with pytest.raises(ValidationError):
        ClientPayload.model_validate(
            {"client_code": "CL-1", "client_name": "   ", "client_type": "Corporate", "status": "active"}
        )


def test_inventory_payload_keeps_numbers():
    payload = GeneralItemPayload.model_validate(
        {
            "item_code": "GEN-001",
            "name": "Safety vest",
            "category": "safety",
            "unit_name": "pcs",
            "quantity_on_hand": 12,
            "unit_cost": 4.5,
            "min_quantity": None,
            "status": "active",
        }
    ).model_dump(mode="json")
    assert payload["quantity_on_hand"] == 12
    assert payload["unit_cost"] == 4.5
    assert payload["min_quantity"] is None

    with pytest.raises(ValidationError):
        GeneralItemPayload.model_validate({**payload, "quantity_on_hand": -1})
