from __future__ import annotations

from modules.crud_page import PageDefinition
from modules.crud_renderers import option_label
from ui.crud import Column, FieldType, FormField, SelectOption

from .schemas import ClientPayload

INDUSTRIES = (
    SelectOption("security", "Security Services"),
    SelectOption("manufacturing", "Manufacturing"),
    SelectOption("retail", "Retail"),
    SelectOption("healthcare", "Healthcare"),
    SelectOption("education", "Education"),
    SelectOption("government", "Government"),
    SelectOption("hospitality", "Hospitality"),
    SelectOption("real_estate", "Real Estate"),
    SelectOption("banking", "Banking & Finance"),
    SelectOption("other", "Other"),
)

CLIENT_STATUSES = (
    SelectOption("active", "Active"),
    SelectOption("inactive", "Inactive"),
    SelectOption("prospect", "Prospect"),
    SelectOption("suspended", "Suspended"),
)

CLIENT_TYPES = (
    SelectOption("Corporate", "Corporate"),
    SelectOption("Individual", "Individual"),
    SelectOption("Government", "Government"),
)

CLIENT_COLUMNS = (
    Column("client_code", "Code", width=100),
    Column("client_name", "Client Name", sortable=True),
    Column("client_type", "Type"),
    Column("industry_type", "Industry", render=option_label(INDUSTRIES, "-")),
    Column("email", "Email"),
    Column("phone", "Phone"),
    Column("status", "Status", render=option_label(CLIENT_STATUSES, "Active")),
)

CLIENT_FIELDS = (
    FormField("client_code", "Client Code", required=True, placeholder="e.g., CL-001"),
    FormField("client_name", "Client Name", required=True, placeholder="Enter client name"),
    FormField("client_type", "Client Type", FieldType.SELECT, required=True, options=CLIENT_TYPES),
    FormField("industry_type", "Industry", FieldType.SELECT, options=INDUSTRIES),
    FormField("status", "Status", FieldType.SELECT, required=True, options=CLIENT_STATUSES),
    FormField("location", "Location", placeholder="City/Region"),
    FormField("address", "Address", placeholder="Street address", col_span=2),
    FormField("email", "Contact Email", FieldType.EMAIL, placeholder="email@example.com"),
    FormField("phone", "Contact Phone", FieldType.TEL, placeholder="+1234567890"),
    FormField("registration_number", "Registration Number", placeholder="Company registration"),
    FormField("vat_gst_number", "VAT/GST Number", placeholder="Tax ID"),
    FormField("website", "Website", FieldType.URL, placeholder="https://example.com"),
    FormField("notes", "Notes", FieldType.TEXTAREA, col_span=2, rows=3),
)

CLIENTS_PAGE = PageDefinition(
    title="Client Management",
    description="Manage clients, their sites and contracts.",
    entity="Client",
    endpoint="/api/clients",
    columns=CLIENT_COLUMNS,
    fields=CLIENT_FIELDS,
    name_field="client_name",
    search_placeholder="Search clients...",
    empty_message="No clients found. Add your first client to get started.",
    create_defaults={"status": "active", "client_type": "Corporate"},
    payload_model=ClientPayload,
    dialog_size="lg",
)
