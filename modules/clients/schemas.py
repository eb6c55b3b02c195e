"""Pydantic schemas for client management payloads."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import field_validator

from modules.crud_page import FormPayload

ClientType = Literal["Corporate", "Individual", "Government"]
ClientStatus = Literal["active", "inactive", "prospect", "suspended"]


class ClientPayload(FormPayload):
    client_code: str
    client_name: str
    client_type: ClientType
    industry_type: Optional[str] = None
    status: ClientStatus
    location: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    registration_number: Optional[str] = None
    vat_gst_number: Optional[str] = None
    website: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("client_code", "client_name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Field is required")
        return value.strip()
