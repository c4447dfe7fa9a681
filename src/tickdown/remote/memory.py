# src/tickdown/remote/memory.py

from __future__ import annotations

from typing import Any
from uuid import uuid4

from ..core.errors import RemoteStoreError
from ..core.ports import TaskRecord


class InMemoryRemoteStore:
    """
    Dict-backed remote store used for offline demo runs and tests.

    Behaves like a document collection:
    - ids are opaque and assigned on create
    - list() returns documents in insertion order
    - update()/delete() of a missing document fail with status_code=404
    """

    def __init__(self, records: list[TaskRecord] | None = None) -> None:
        self._docs: dict[str, dict[str, Any]] = {}
        for record in records or []:
            doc = dict(record)
            doc_id = str(doc.pop("id", "") or uuid4().hex)
            self._docs[doc_id] = doc

    def create(self, fields: dict[str, Any]) -> str:
        doc_id = uuid4().hex
        self._docs[doc_id] = dict(fields)
        return doc_id

    def list(self) -> list[TaskRecord]:
        return [{"id": doc_id, **doc} for doc_id, doc in self._docs.items()]

    def update(self, task_id: str, fields: dict[str, Any]) -> None:
        doc = self._docs.get(task_id)
        if doc is None:
            raise RemoteStoreError(f"No document to update: {task_id}", status_code=404)
        doc.update(fields)

    def delete(self, task_id: str) -> None:
        if self._docs.pop(task_id, None) is None:
            raise RemoteStoreError(f"No document to delete: {task_id}", status_code=404)
