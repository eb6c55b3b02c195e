"""Endpoint helpers shared by the CRUD pages."""

from __future__ import annotations

from typing import Any, Sequence

from .api_client import ApiClient, QueryParams

# List endpoints wrap their rows under one of these keys next to ``total``.
LIST_KEYS: tuple[str, ...] = ("items", "employees", "vehicles", "clients")


def extract_page(payload: Any, keys: Sequence[str] = LIST_KEYS) -> tuple[list[dict[str, Any]], int]:
    """Return ``(rows, total)`` from a list response.

    Some endpoints return a bare array, others an envelope such as
    ``{"items": [...], "total": 95}``.
    """
    if payload is None:
        return [], 0
    if isinstance(payload, list):
        return list(payload), len(payload)
    if isinstance(payload, dict):
        rows: list[dict[str, Any]] = []
        for key in keys:
            value = payload.get(key)
            if isinstance(value, list):
                rows = list(value)
                break
        total = payload.get("total")
        try:
            total_count = int(total) if total is not None else len(rows)
        except (TypeError, ValueError):
            total_count = len(rows)
        return rows, total_count
    return [], 0


class CrudApi:
    """REST verbs for one resource collection rooted at ``base_path``."""

    def __init__(self, client: ApiClient, base_path: str) -> None:
        self.client = client
        self.base_path = base_path.rstrip("/")

    def item_path(self, item_id: int | str) -> str:
        return f"{self.base_path}/{item_id}"

    def get_all(self, query: QueryParams | None = None) -> Any:
        return self.client.get(self.base_path, query=query)

    def get_one(self, item_id: int | str) -> Any:
        return self.client.get(self.item_path(item_id))

    def create(self, data: dict[str, Any]) -> Any:
        return self.client.post(self.base_path, data)

    def update(self, item_id: int | str, data: dict[str, Any]) -> Any:
        return self.client.put(self.item_path(item_id), data)

    def delete(self, item_id: int | str) -> Any:
        return self.client.delete(self.item_path(item_id))


def create_crud_api(client: ApiClient, base_path: str) -> CrudApi:
    return CrudApi(client, base_path)


__all__ = ["CrudApi", "LIST_KEYS", "create_crud_api", "extract_page"]
