"""List page wiring shared by every CRUD screen.

A :class:`PageDefinition` declares what a screen shows (endpoint, columns,
form fields, payload model) and :class:`CrudPage` does the rest: it owns
paging, search and selection state, keeps an :class:`ApiResource` for the
list query and drives the table and both dialogs from three mutations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

from pydantic import BaseModel, ValidationError, field_validator
from PySide6.QtCore import QSettings
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget

from services.api_client import ApiClient
from services.crud_api import LIST_KEYS, CrudApi, extract_page
from services.resources import ApiResource, Mutation
from services.workers import Dispatcher
from ui.crud import (
    PAGE_SIZE_OPTIONS,
    Column,
    DataTable,
    DeleteDialog,
    FieldType,
    FormDialog,
    FormField,
    FormMode,
    RowAction,
    page_window,
    resolve_path,
)

logger = logging.getLogger(__name__)


class FormPayload(BaseModel):
    """Base for request bodies built from form values.

    Blank strings coming from untouched inputs are sent as ``null``.
    """

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


def validation_message(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid form values"


def _sort_key(value: Any) -> tuple[int, float, str]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, float(value), "")
    return (1, 0.0, str(value).lower())


@dataclass(frozen=True)
class PageDefinition:
    title: str
    entity: str
    endpoint: str
    columns: Sequence[Column]
    fields: Sequence[FormField]
    description: str = ""
    key_field: str = "id"
    item_key: Optional[str] = None
    name_field: Optional[str] = None
    search_placeholder: str = "Search..."
    empty_message: str = "No data found."
    create_defaults: Mapping[str, Any] = field(default_factory=dict)
    payload_model: Optional[type[BaseModel]] = None
    dialog_size: str = "md"
    list_keys: Sequence[str] = LIST_KEYS
    selectable: bool = True
    settings_key: Optional[str] = None

    @property
    def path_key(self) -> str:
        """Row field addressing one record in ``PUT``/``DELETE`` paths."""
        return self.item_key or self.key_field

    @property
    def page_size_key(self) -> str:
        key = self.settings_key or self.endpoint.strip("/").replace("/", "_")
        return f"{key}/page_size"


class CrudPage(QWidget):
    """Paginated, searchable list with create/edit/view/delete dialogs."""

    def __init__(
        self,
        definition: PageDefinition,
        client: ApiClient,
        *,
        settings: QSettings | None = None,
        dispatch: Dispatcher | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.definition = definition
        self.api = CrudApi(client, definition.endpoint)
        self._settings = settings if settings is not None else QSettings()

        self._page = 1
        self._page_size = self._load_page_size()
        self._search = ""
        self._selected: list[dict[str, Any]] = []
        self._current_row: Optional[dict[str, Any]] = None
        self._form_mode = FormMode.CREATE
        self._pending_delete: list[dict[str, Any]] = []
        self._sort: Optional[tuple[str, str]] = None

        self._build_ui()

        self.create_mutation = Mutation(self.api.create, dispatch=dispatch, parent=self)
        self.update_mutation = Mutation(
            lambda variables: self.api.update(variables["id"], variables["data"]),
            dispatch=dispatch,
            parent=self,
        )
        self.delete_mutation = Mutation(self._delete_many, dispatch=dispatch, parent=self)
        self._connect_mutations()

        self.resource = ApiResource(
            client,
            definition.endpoint,
            self._list_query(),
            dispatch=dispatch,
            auto_fetch=False,
            parent=self,
        )
        self.resource.stateChanged.connect(self._render)
        self.resource.refetch()

    # ----- UI -------------------------------------------------------------------
    def _build_ui(self) -> None:
        d = self.definition
        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)

        self.title_label = QLabel(d.title)
        self.title_label.setStyleSheet("font-size: 20px; font-weight: 700;")
        layout.addWidget(self.title_label)
        if d.description:
            subtitle = QLabel(d.description)
            subtitle.setStyleSheet("color: palette(Mid);")
            layout.addWidget(subtitle)

        self.table = DataTable(
            d.columns,
            key_field=d.key_field,
            actions=RowAction.VIEW | RowAction.EDIT | RowAction.DELETE,
            selectable=d.selectable,
            searchable=True,
            search_placeholder=d.search_placeholder,
            addable=True,
            add_label=f"Add {d.entity}",
            empty_message=d.empty_message,
            parent=self,
        )
        layout.addWidget(self.table, stretch=1)

        self.form_dialog = FormDialog(
            f"Add {d.entity}",
            d.fields,
            submit_label=f"Create {d.entity}",
            size=d.dialog_size,
            parent=self,
        )
        self.delete_dialog = DeleteDialog(f"Delete {d.entity}", parent=self)

        self.table.addRequested.connect(self.open_create)
        self.table.viewRequested.connect(self.open_view)
        self.table.editRequested.connect(self.open_edit)
        self.table.deleteRequested.connect(self.confirm_delete)
        self.table.bulkDeleteRequested.connect(self.confirm_bulk_delete)
        self.table.searchChanged.connect(self.set_search)
        self.table.pageRequested.connect(self.set_page)
        self.table.pageSizeChanged.connect(self.set_page_size)
        self.table.selectionChanged.connect(self._on_selection_changed)
        self.table.retryRequested.connect(self.refresh)
        self.table.sortRequested.connect(self.set_sort)

        self.form_dialog.submitted.connect(self._on_form_submitted)
        self.form_dialog.closed.connect(self._on_form_closed)
        self.delete_dialog.confirmed.connect(self._on_delete_confirmed)
        self.delete_dialog.closed.connect(self._on_delete_closed)

    def _connect_mutations(self) -> None:
        for mutation in (self.create_mutation, self.update_mutation):
            mutation.stateChanged.connect(self._sync_form_loading)
            mutation.succeeded.connect(self._on_saved)
            mutation.failed.connect(lambda message, _variables: self.form_dialog.set_error(message))
        self.delete_mutation.stateChanged.connect(
            lambda: self.delete_dialog.set_loading(self.delete_mutation.loading)
        )
        self.delete_mutation.succeeded.connect(self._on_deleted)
        self.delete_mutation.failed.connect(lambda message, _variables: self.delete_dialog.set_error(message))

    # ----- list state -------------------------------------------------------------
    @property
    def page(self) -> int:
        return self._page

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def search(self) -> str:
        return self._search

    @property
    def selected_rows(self) -> list[dict[str, Any]]:
        return list(self._selected)

    def _list_query(self) -> dict[str, Any]:
        return {
            "skip": (self._page - 1) * self._page_size,
            "limit": self._page_size,
            "search": self._search or None,
        }

    def _reload(self) -> None:
        self.resource.update(query=self._list_query())
        self._render()

    def refresh(self) -> None:
        self.resource.refetch()

    def set_page(self, page: int) -> None:
        page = max(1, int(page))
        if page == self._page:
            return
        self._page = page
        self._clear_selection()
        self._reload()

    def set_page_size(self, size: int) -> None:
        size = int(size)
        if size == self._page_size:
            return
        self._page_size = size
        self._page = 1
        self._settings.setValue(self.definition.page_size_key, size)
        self._clear_selection()
        self._reload()

    def set_search(self, text: str) -> None:
        text = text.strip()
        if text == self._search:
            return
        self._search = text
        self._page = 1
        self._clear_selection()
        self._reload()

    def _load_page_size(self) -> int:
        value = self._settings.value(self.definition.page_size_key, PAGE_SIZE_OPTIONS[0])
        try:
            size = int(value)
        except (TypeError, ValueError):
            return PAGE_SIZE_OPTIONS[0]
        return size if size in PAGE_SIZE_OPTIONS else PAGE_SIZE_OPTIONS[0]

    def _clear_selection(self) -> None:
        if self._selected:
            self._selected = []
            self.table.set_selected_rows([])

    def _on_selection_changed(self, rows: list) -> None:
        self._selected = list(rows)
        self.table.set_selected_rows(self._selected)

    def set_sort(self, key: str, order: str) -> None:
        """Order the rows of the current page; the list endpoints take no sort."""
        self._sort = (key, order)
        self._render()

    def _sorted(self, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if self._sort is None:
            return rows
        key, order = self._sort
        present = [r for r in rows if resolve_path(r, key) is not None]
        missing = [r for r in rows if resolve_path(r, key) is None]
        present.sort(key=lambda r: _sort_key(resolve_path(r, key)), reverse=order == "desc")
        return present + missing

    def _render(self) -> None:
        rows, total = extract_page(self.resource.data, self.definition.list_keys)
        window = page_window(self._page, self._page_size, total)
        settled = not self.resource.loading and not self.resource.error
        if settled and not rows and self._page > max(1, window.total_pages):
            # The current page emptied out, e.g. after deleting its last row.
            self._page = max(1, window.total_pages)
            self.resource.update(query=self._list_query())
            return
        self.table.set_search_value(self._search)
        self.table.set_rows(self._sorted(rows))
        self.table.set_loading(self.resource.loading)
        self.table.set_error(self.resource.error)
        self.table.set_pagination(page=self._page, page_size=self._page_size, total=total)

    # ----- dialogs ----------------------------------------------------------------------
    def _open_form(self, mode: FormMode, row: Optional[Mapping[str, Any]]) -> None:
        d = self.definition
        self._form_mode = mode
        self._current_row = dict(row) if row is not None else None
        titles = {
            FormMode.CREATE: f"Add {d.entity}",
            FormMode.EDIT: f"Edit {d.entity}",
            FormMode.VIEW: f"{d.entity} Details",
        }
        self.form_dialog.set_title(titles[mode])
        self.form_dialog.set_submit_label(f"Create {d.entity}" if mode is FormMode.CREATE else f"Update {d.entity}")
        self.create_mutation.reset()
        self.update_mutation.reset()
        initial = dict(row) if row is not None else dict(d.create_defaults)
        self.form_dialog.open_form(initial, mode=mode)

    def open_create(self) -> None:
        self._open_form(FormMode.CREATE, None)

    def open_edit(self, row: Mapping[str, Any]) -> None:
        self._open_form(FormMode.EDIT, row)

    def open_view(self, row: Mapping[str, Any]) -> None:
        self._open_form(FormMode.VIEW, row)

    def confirm_delete(self, row: Mapping[str, Any]) -> None:
        self._pending_delete = [dict(row)]
        name_field = self.definition.name_field
        item_name = row.get(name_field) if name_field else None
        self.delete_mutation.reset()
        self.delete_dialog.open_for(item_name=str(item_name) if item_name not in (None, "") else None)

    def confirm_bulk_delete(self, rows: Sequence[Mapping[str, Any]]) -> None:
        if not rows:
            return
        if len(rows) == 1:
            self.confirm_delete(rows[0])
            return
        self._pending_delete = [dict(r) for r in rows]
        self.delete_mutation.reset()
        self.delete_dialog.open_for(
            description=f"Are you sure you want to delete {len(rows)} items? This action cannot be undone."
        )

    def payload(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """Request body for ``values``; raises ``ValidationError`` when invalid.

        Only declared, non-file fields are sent.
        """
        names = {f.name for f in self.definition.fields if f.type is not FieldType.FILE}
        data = {name: value for name, value in values.items() if name in names}
        model = self.definition.payload_model
        if model is None:
            return data
        return model.model_validate(data).model_dump(mode="json")

    def _on_form_submitted(self, values: dict) -> None:
        self.form_dialog.set_error(None)
        try:
            body = self.payload(values)
        except ValidationError as exc:
            self.form_dialog.set_error(validation_message(exc))
            return
        if self._form_mode is FormMode.CREATE:
            self.create_mutation.mutate(body)
        elif self._form_mode is FormMode.EDIT and self._current_row is not None:
            key = self._current_row.get(self.definition.path_key)
            self.update_mutation.mutate({"id": key, "data": body})

    def _sync_form_loading(self) -> None:
        self.form_dialog.set_loading(self.create_mutation.loading or self.update_mutation.loading)

    def _on_saved(self, _result: Any, _variables: Any) -> None:
        logger.info("%s saved", self.definition.entity)
        self.form_dialog.reject()
        self.resource.refetch()

    def _on_form_closed(self) -> None:
        self._current_row = None

    def _delete_many(self, rows: Sequence[Mapping[str, Any]]) -> int:
        path_key = self.definition.path_key
        for row in rows:
            self.api.delete(row[path_key])
        return len(rows)

    def _on_delete_confirmed(self) -> None:
        if self._pending_delete:
            self.delete_mutation.mutate(list(self._pending_delete))

    def _on_deleted(self, count: Any, rows: Any) -> None:
        logger.info("deleted %s %s row(s)", count, self.definition.entity)
        key_field = self.definition.key_field
        removed = {r.get(key_field) for r in rows or ()}
        self._selected = [r for r in self._selected if r.get(key_field) not in removed]
        self.table.set_selected_rows(self._selected)
        self.delete_dialog.reject()
        self.resource.refetch()

    def _on_delete_closed(self) -> None:
        self._pending_delete = []


__all__ = ["CrudPage", "FormPayload", "PageDefinition", "validation_message"]
