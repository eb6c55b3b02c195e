from __future__ import annotations

from modules.crud_page import PageDefinition
from modules.crud_renderers import option_label
from ui.crud import Column, FieldType, FormField, SelectOption

from .schemas import VehiclePayload

VEHICLE_TYPES = (
    SelectOption("sedan", "Sedan"),
    SelectOption("suv", "SUV"),
    SelectOption("pickup", "Pickup Truck"),
    SelectOption("van", "Van"),
    SelectOption("bus", "Bus"),
    SelectOption("motorcycle", "Motorcycle"),
    SelectOption("truck", "Truck"),
    SelectOption("other", "Other"),
)

VEHICLE_CATEGORIES = (
    SelectOption("company", "Company Owned"),
    SelectOption("leased", "Leased"),
    SelectOption("rented", "Rented"),
    SelectOption("personal", "Personal"),
)

VEHICLE_STATUSES = (
    SelectOption("active", "Active"),
    SelectOption("maintenance", "Under Maintenance"),
    SelectOption("inactive", "Inactive"),
    SelectOption("disposed", "Disposed"),
)

COMPLIANCE_STATUSES = (
    SelectOption("compliant", "Compliant"),
    SelectOption("pending", "Pending"),
    SelectOption("expired", "Expired"),
)

PERMIT_STATUSES = (
    SelectOption("valid", "Valid"),
    SelectOption("expired", "Expired"),
    SelectOption("not_required", "Not Required"),
)

VEHICLE_COLUMNS = (
    Column("vehicle_id", "Vehicle ID", width=120),
    Column("vehicle_type", "Type"),
    Column("category", "Category"),
    Column("make_model", "Make/Model"),
    Column("license_plate", "License Plate"),
    Column("year", "Year", width=80),
    Column("status", "Status", render=option_label(VEHICLE_STATUSES, "Unknown")),
    Column("compliance", "Compliance", render=option_label(COMPLIANCE_STATUSES, "Pending")),
)

VEHICLE_FIELDS = (
    FormField("vehicle_id", "Vehicle ID", required=True, placeholder="e.g., VH-001"),
    FormField("vehicle_type", "Vehicle Type", FieldType.SELECT, required=True, options=VEHICLE_TYPES),
    FormField("category", "Category", FieldType.SELECT, required=True, options=VEHICLE_CATEGORIES),
    FormField("make_model", "Make/Model", required=True, placeholder="e.g., Toyota Corolla"),
    FormField("license_plate", "License Plate", required=True, placeholder="e.g., ABC-1234"),
    FormField("chassis_number", "Chassis Number", placeholder="Optional"),
    FormField("asset_tag", "Asset Tag", placeholder="Optional"),
    FormField("year", "Year", FieldType.NUMBER, required=True, min=1990, max=2030, placeholder="e.g., 2023"),
    FormField("status", "Status", FieldType.SELECT, required=True, options=VEHICLE_STATUSES),
    FormField("compliance", "Compliance", FieldType.SELECT, required=True, options=COMPLIANCE_STATUSES),
    FormField("government_permit", "Government Permit", FieldType.SELECT, required=True, options=PERMIT_STATUSES),
)

# The vehicles endpoint answers with a bare array, so its total is the row count.
VEHICLES_PAGE = PageDefinition(
    title="Vehicles",
    description="Manage your fleet vehicles.",
    entity="Vehicle",
    endpoint="/api/vehicles",
    columns=VEHICLE_COLUMNS,
    fields=VEHICLE_FIELDS,
    name_field="vehicle_id",
    search_placeholder="Search vehicles...",
    empty_message="No vehicles found. Add your first vehicle to get started.",
    create_defaults={"status": "active", "compliance": "pending", "government_permit": "valid"},
    payload_model=VehiclePayload,
    dialog_size="lg",
)
