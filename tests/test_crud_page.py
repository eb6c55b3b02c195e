from __future__ import annotations

import json

import httpx
import pytest

from modules.clients import CLIENTS_PAGE, create_clients_page
from modules.crud_page import CrudPage, PageDefinition
from modules.inventory import INVENTORY_PAGE, create_inventory_page
from modules.vehicles import VEHICLES_PAGE, create_vehicles_page
from services.workers import dispatch_inline
from ui.crud import Column, FormField

ENDPOINT = "/api/clients"


def _client_row(n: int) -> dict:
    return {
        "id": n,
        "client_code": f"CL-{n:03d}",
        "client_name": f"Client {n}",
        "client_type": "Corporate",
        "status": "active",
    }


class ClientsBackend:
    """In-memory clients collection behind the recording transport."""

    def __init__(self, backend, count: int = 3) -> None:
        self.backend = backend
        self.store = [_client_row(n) for n in range(1, count + 1)]
        self.fail_list_with: httpx.Response | None = None
        backend.route("GET", ENDPOINT, self._list)
        backend.route("POST", ENDPOINT, self._create)
        for row in list(self.store):
            self._route_item(row["id"])

    def _route_item(self, key: int) -> None:
        self.backend.route("PUT", f"{ENDPOINT}/{key}", self._update)
        self.backend.route("DELETE", f"{ENDPOINT}/{key}", self._delete)

    def _list(self, request: httpx.Request) -> httpx.Response:
        if self.fail_list_with is not None:
            return self.fail_list_with
        skip = int(request.url.params.get("skip", 0))
        limit = int(request.url.params.get("limit", 100))
        search = request.url.params.get("search", "").lower()
        rows = [r for r in self.store if search in r["client_name"].lower()]
        return httpx.Response(200, json={"clients": rows[skip : skip + limit], "total": len(rows)})

    def _create(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        row = {**body, "id": max((r["id"] for r in self.store), default=0) + 1}
        self.store.append(row)
        self._route_item(row["id"])
        return httpx.Response(201, json=row)

    def _update(self, request: httpx.Request) -> httpx.Response:
        key = int(request.url.path.rsplit("/", 1)[-1])
        body = json.loads(request.content)
        for row in self.store:
            if row["id"] == key:
                row.update(body)
                return httpx.Response(200, json=row)
        return httpx.Response(404, json={"detail": "Client not found"})

    def _delete(self, request: httpx.Request) -> httpx.Response:
        key = int(request.url.path.rsplit("/", 1)[-1])
        self.store = [r for r in self.store if r["id"] != key]
        return httpx.Response(204)

    def list_params(self) -> list[dict]:
        return [dict(r.url.params) for r in self.backend.requests if r.method == "GET"]


@pytest.fixture
def clients(backend):
    return ClientsBackend(backend)


@pytest.fixture
def make_page(qt_app, make_client, settings):
    pages: list[CrudPage] = []

    def _make(definition: PageDefinition = CLIENTS_PAGE) -> CrudPage:
        page = CrudPage(definition, make_client(), settings=settings, dispatch=dispatch_inline)
        pages.append(page)
        return page

    yield _make
    for page in pages:
        page.deleteLater()


def test_initial_fetch_renders_rows(clients, make_page):
    page = make_page()

    assert clients.list_params() == [{"skip": "0", "limit": "10"}]
    assert [r["client_name"] for r in page.table.rows()] == ["Client 1", "Client 2", "Client 3"]
    assert page.table.current_state() == page.table.STATE_TABLE
    assert page.table.add_button.text() == "Add Client"
    assert page.table.search_edit.placeholderText() == "Search clients..."


def test_factory_builds_clients_page(clients, make_client, settings, qt_app):
    page = create_clients_page(make_client(), settings=settings, dispatch=dispatch_inline)
    assert page.title_label.text() == "Client Management"
    assert len(page.table.rows()) == 3
    page.deleteLater()


@pytest.mark.parametrize(
    ("factory", "definition"),
    [(create_vehicles_page, VEHICLES_PAGE), (create_inventory_page, INVENTORY_PAGE)],
    ids=["vehicles", "inventory"],
)
def test_factories_bind_their_definition(factory, definition, backend, make_client, settings, qt_app):
    backend.route("GET", definition.endpoint, httpx.Response(200, json=[]))
    page = factory(make_client(), settings=settings, dispatch=dispatch_inline)
    assert isinstance(page, CrudPage)
    assert page.definition is definition
    assert page.title_label.text() == definition.title
    assert backend.requests[0].url.path == definition.endpoint
    page.deleteLater()


def test_paging_and_search_update_query(backend, make_page):
    clients = ClientsBackend(backend, count=25)
    page = make_page()

    page.table.pagination.next_button.click()
    assert page.page == 2
    assert clients.list_params()[-1] == {"skip": "10", "limit": "10"}
    assert page.table.pagination.status_label.text() == "Showing 11 to 20 of 25 results"

    page.table.search_edit.setText("  client 2 ")
    assert page.page == 1
    assert page.search == "client 2"
    assert clients.list_params()[-1] == {"skip": "0", "limit": "10", "search": "client 2"}


def test_page_size_is_persisted(clients, make_page, settings):
    page = make_page()
    page.set_page(2)
    page.set_page_size(25)

    assert page.page == 1
    assert clients.list_params()[-1] == {"skip": "0", "limit": "25"}
    assert int(settings.value(CLIENTS_PAGE.page_size_key)) == 25
    assert CLIENTS_PAGE.page_size_key == "api_clients/page_size"

    again = make_page()
    assert again.page_size == 25


def test_invalid_stored_page_size_falls_back(clients, make_page, settings):
    settings.setValue(CLIENTS_PAGE.page_size_key, "lots")
    assert make_page().page_size == 10


def test_fetch_error_shows_banner_and_retry(clients, make_page):
    clients.fail_list_with = httpx.Response(500, json={"detail": "Database unavailable"})
    page = make_page()
    assert page.table.error_label.text() == "Database unavailable"
    assert not page.table.error_banner.isHidden()

    clients.fail_list_with = None
    page.table.retry_button.click()
    assert page.table.error_banner.isHidden()
    assert len(page.table.rows()) == 3


def test_create_posts_validated_payload(clients, backend, make_page):
    page = make_page()
    page.table.add_button.click()

    dialog = page.form_dialog
    assert dialog.windowTitle() == "Add Client"
    assert dialog.submit_button.text() == "Create Client"
    assert dialog.values()["status"] == "active"

    dialog.field_widget("client_code").setText("CL-900")
    dialog.field_widget("client_name").setText("  Northwind  ")
    assert dialog.submit() is True

    post = next(r for r in backend.requests if r.method == "POST")
    body = json.loads(post.content)
    assert body["client_code"] == "CL-900"
    assert body["client_name"] == "Northwind"
    assert body["client_type"] == "Corporate"
    assert body["email"] is None
    assert not dialog.isVisible()
    assert backend.requests[-1].method == "GET"
    assert len(page.table.rows()) == 4


def test_create_failure_keeps_dialog_open(clients, backend, make_page):
    backend.route("POST", ENDPOINT, httpx.Response(400, json={"detail": "Client code already exists"}))
    page = make_page()
    page.open_create()
    page.form_dialog.field_widget("client_code").setText("CL-001")
    page.form_dialog.field_widget("client_name").setText("Dup")
    page.form_dialog.submit()

    assert page.form_dialog.isVisible()
    assert page.form_dialog.error_banner.text() == "Client code already exists"
    assert not page.form_dialog.is_loading
    page.form_dialog.reject()


def test_edit_puts_to_item_path(clients, backend, make_page):
    page = make_page()
    row = page.table.rows()[1]
    page.table.editRequested.emit(row)

    dialog = page.form_dialog
    assert dialog.windowTitle() == "Edit Client"
    assert dialog.submit_button.text() == "Update Client"
    assert dialog.field_widget("client_name").text() == "Client 2"

    dialog.field_widget("client_name").setText("Client Two")
    dialog.submit()

    put = next(r for r in backend.requests if r.method == "PUT")
    assert put.url.path == f"{ENDPOINT}/2"
    assert json.loads(put.content)["client_name"] == "Client Two"
    assert "id" not in json.loads(put.content)
    assert page.table.rows()[1]["client_name"] == "Client Two"


def test_view_opens_read_only(clients, backend, make_page):
    page = make_page()
    page.open_view(page.table.rows()[0])
    assert page.form_dialog.windowTitle() == "Client Details"
    assert page.form_dialog.submit_button.isHidden()
    page.form_dialog.submit()
    assert not page.form_dialog.isVisible()
    assert all(r.method == "GET" for r in backend.requests)


def test_payload_validation_error_is_reported(clients, backend, make_page):
    page = make_page()
    row = dict(page.table.rows()[0], client_type="Partner")
    page.open_edit(row)
    page.form_dialog.submit()

    assert page.form_dialog.error_banner.text().startswith("client_type:")
    assert page.form_dialog.isVisible()
    assert not any(r.method == "PUT" for r in backend.requests)
    page.form_dialog.reject()


def test_payload_without_model_keeps_declared_fields(clients, make_page):
    plain = PageDefinition(
        title="Notes",
        entity="Note",
        endpoint=ENDPOINT,
        columns=[Column("client_name", "Name")],
        fields=[FormField("client_name", "Name")],
    )
    page = make_page(plain)
    assert page.payload({"client_name": "A", "id": 4, "extra": True}) == {"client_name": "A"}


def test_delete_single_row(clients, backend, make_page):
    page = make_page()
    page.confirm_delete(page.table.rows()[0])

    dialog = page.delete_dialog
    assert dialog.windowTitle() == "Delete Client"
    assert '"Client 1"' in dialog.description_label.text()

    dialog.delete_button.click()
    assert any(r.method == "DELETE" and r.url.path == f"{ENDPOINT}/1" for r in backend.requests)
    assert not dialog.isVisible()
    assert [r["id"] for r in page.table.rows()] == [2, 3]


def test_delete_failure_shows_error(clients, backend, make_page):
    backend.route("DELETE", f"{ENDPOINT}/2", httpx.Response(409, json={"detail": "Client has active contracts"}))
    page = make_page()
    page.confirm_delete(page.table.rows()[1])
    page.delete_dialog.delete_button.click()

    assert page.delete_dialog.isVisible()
    assert page.delete_dialog.error_label.text() == "Client has active contracts"
    assert not page.delete_dialog.is_loading
    page.delete_dialog.reject()


def test_bulk_delete_removes_selection(clients, backend, make_page):
    page = make_page()
    rows = page.table.rows()
    page.table.selectionChanged.emit(rows[:2])
    assert page.table.bulk_delete_button.text() == "Delete (2)"

    page.table.bulk_delete_button.click()
    assert "2 items" in page.delete_dialog.description_label.text()
    page.delete_dialog.delete_button.click()

    deleted = [r.url.path for r in backend.requests if r.method == "DELETE"]
    assert deleted == [f"{ENDPOINT}/1", f"{ENDPOINT}/2"]
    assert page.selected_rows == []
    assert [r["id"] for r in page.table.rows()] == [3]


def test_single_selected_row_uses_item_name(clients, make_page):
    page = make_page()
    page.confirm_bulk_delete([page.table.rows()[2]])
    assert '"Client 3"' in page.delete_dialog.description_label.text()
    page.delete_dialog.reject()


def test_deleting_last_row_on_page_steps_back(backend, make_page):
    clients = ClientsBackend(backend, count=11)
    page = make_page()
    page.set_page(2)
    assert [r["id"] for r in page.table.rows()] == [11]

    page.confirm_delete(page.table.rows()[0])
    page.delete_dialog.delete_button.click()

    assert page.page == 1
    assert clients.list_params()[-1] == {"skip": "0", "limit": "10"}
    assert len(page.table.rows()) == 10


def test_page_change_clears_selection(backend, make_page):
    ClientsBackend(backend, count=15)
    page = make_page()
    page.table.selectionChanged.emit(page.table.rows()[:3])
    assert len(page.selected_rows) == 3

    page.set_page(2)
    assert page.selected_rows == []


def test_sort_orders_current_page(clients, make_page):
    clients.store[0]["client_name"] = "Zulu"
    clients.store[1]["client_name"] = "alpha"
    page = make_page()

    page.set_sort("client_name", "asc")
    assert [r["client_name"] for r in page.table.rows()] == ["alpha", "Client 3", "Zulu"]
    page.set_sort("client_name", "desc")
    assert [r["client_name"] for r in page.table.rows()] == ["Zulu", "Client 3", "alpha"]


def test_bare_array_response_renders_rows(backend, make_page):
    backend.route("GET", ENDPOINT, httpx.Response(200, json=[_client_row(1), _client_row(2)]))
    page = make_page()

    assert [r["client_name"] for r in page.table.rows()] == ["Client 1", "Client 2"]
    assert page.table.pagination.status_label.text() == "Showing 1 to 2 of 2 results"


def _inventory_row() -> dict:
    return {
        "id": 7,
        "item_code": "GEN-001",
        "name": "Safety vest",
        "category": "safety",
        "unit_name": "pcs",
        "quantity_on_hand": 12,
        "status": "active",
    }


def test_inventory_edit_and_delete_address_item_code(backend, make_page):
    items = "/api/general-inventory/items"
    backend.route("GET", items, httpx.Response(200, json={"items": [_inventory_row()], "total": 1}))
    backend.route("PUT", f"{items}/GEN-001", lambda request: httpx.Response(200, json=json.loads(request.content)))
    backend.route("DELETE", f"{items}/GEN-001", httpx.Response(204))
    page = make_page(INVENTORY_PAGE)
    assert INVENTORY_PAGE.path_key == "item_code"

    page.open_edit(page.table.rows()[0])
    page.form_dialog.field_widget("name").setText("Hi-vis vest")
    page.form_dialog.submit()

    put = next(r for r in backend.requests if r.method == "PUT")
    assert put.url.path == f"{items}/GEN-001"
    assert json.loads(put.content)["name"] == "Hi-vis vest"

    page.confirm_delete(page.table.rows()[0])
    page.delete_dialog.delete_button.click()
    deleted = [r.url.path for r in backend.requests if r.method == "DELETE"]
    assert deleted == [f"{items}/GEN-001"]
