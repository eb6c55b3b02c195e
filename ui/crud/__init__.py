"""Generic CRUD widgets shared by every list page.

Pages describe their records with :class:`Column` and :class:`FormField`
descriptors and compose :class:`DataTable`, :class:`FormDialog` and
:class:`DeleteDialog`.  None of these widgets know about a specific entity
or perform network I/O.
"""

from .columns import PAGE_SIZE_OPTIONS, Column, PageWindow, display_value, page_window, resolve_path
from .data_table import CrudTableModel, DataTable, PaginationControls, RowAction
from .delete_dialog import DeleteDialog
from .fields import FieldType, FormField, FormMode, SelectOption
from .form_dialog import FormDialog
from .form_state import FormState, field_error

__all__ = [
    "PAGE_SIZE_OPTIONS",
    "Column",
    "CrudTableModel",
    "DataTable",
    "DeleteDialog",
    "FieldType",
    "FormDialog",
    "FormField",
    "FormMode",
    "FormState",
    "PageWindow",
    "PaginationControls",
    "RowAction",
    "SelectOption",
    "display_value",
    "field_error",
    "page_window",
    "resolve_path",
]
