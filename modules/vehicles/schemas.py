"""Pydantic schemas for fleet vehicle payloads."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field

from modules.crud_page import FormPayload

VehicleType = Literal["sedan", "suv", "pickup", "van", "bus", "motorcycle", "truck", "other"]
VehicleCategory = Literal["company", "leased", "rented", "personal"]
VehicleStatus = Literal["active", "maintenance", "inactive", "disposed"]
ComplianceStatus = Literal["compliant", "pending", "expired"]
PermitStatus = Literal["valid", "expired", "not_required"]


class VehiclePayload(FormPayload):
    vehicle_id: str
    vehicle_type: VehicleType
    category: VehicleCategory
    make_model: str
    license_plate: str
    chassis_number: Optional[str] = None
    asset_tag: Optional[str] = None
    year: int = Field(ge=1990, le=2030)
    status: VehicleStatus
    compliance: ComplianceStatus
    government_permit: PermitStatus
