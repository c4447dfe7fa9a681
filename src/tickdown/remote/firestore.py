# src/tickdown/remote/firestore.py

from __future__ import annotations

"""
Firestore REST adapter (v1 documents API) implementing RemoteTaskStore.

Only the four document operations the store needs are used:
create (POST), list (GET, following nextPageToken), update (PATCH with an
update mask) and delete (DELETE). No retries: failures surface as
RemoteStoreError and the caller decides what to do.
"""

import logging
from typing import Any

import httpx

from ..core.errors import RemoteStoreError
from ..core.ports import TaskRecord

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://firestore.googleapis.com/v1"
DEFAULT_PAGE_SIZE = 300


def encode_value(value: Any) -> dict[str, Any]:
    # bool first: bool is a subclass of int
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    return {"stringValue": str(value)}


def decode_value(value: dict[str, Any]) -> Any:
    if "stringValue" in value:
        return value["stringValue"]
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "timestampValue" in value:
        return str(value["timestampValue"])
    return None


def encode_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {"fields": {k: encode_value(v) for k, v in fields.items()}}


def decode_document(doc: dict[str, Any]) -> TaskRecord:
    name = str(doc.get("name") or "")
    record: TaskRecord = {"id": name.rsplit("/", 1)[-1] if name else ""}
    for key, raw in (doc.get("fields") or {}).items():
        if isinstance(raw, dict):
            record[key] = decode_value(raw)
    return record


class FirestoreRemoteStore:
    """
    Minimal Firestore client for a single collection.

    Thread-safety:
    - one httpx.Client per instance; calls are made from the intent thread only
    """

    def __init__(
        self,
        *,
        project_id: str,
        collection: str = "tasks",
        database: str = "(default)",
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        page_size: int = DEFAULT_PAGE_SIZE,
        client: httpx.Client | None = None,
    ) -> None:
        if not project_id or not project_id.strip():
            raise ValueError("Firestore project_id is required")
        if not collection or not collection.strip():
            raise ValueError("Firestore collection is required")

        self._collection_url = (
            f"{base_url.rstrip('/')}/projects/{project_id.strip()}"
            f"/databases/{database}/documents/{collection.strip()}"
        )
        self._api_key = (api_key or "").strip() or None
        self._page_size = max(1, int(page_size))
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(timeout, connect=min(5.0, timeout))
        )
        logger.info("FirestoreRemoteStore ready collection_url=%s", self._collection_url)

    @property
    def collection_url(self) -> str:
        return self._collection_url

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> FirestoreRemoteStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ---- low-level helpers ----

    def _doc_url(self, task_id: str) -> str:
        if not task_id:
            raise RemoteStoreError("Document id is required")
        return f"{self._collection_url}/{task_id}"

    def _params(self, extra: list[tuple[str, str]] | None = None) -> list[tuple[str, str]]:
        params = list(extra or [])
        if self._api_key:
            params.append(("key", self._api_key))
        return params

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise RemoteStoreError(f"Firestore {method} network error: {e}") from e

        if response.status_code >= 400:
            detail = response.text.strip()[:300]
            raise RemoteStoreError(
                f"Firestore {method} failed: HTTP {response.status_code} {detail}".rstrip(),
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            raise RemoteStoreError("Firestore returned invalid JSON") from e
        return data if isinstance(data, dict) else {}

    # ---- RemoteTaskStore ----

    def create(self, fields: dict[str, Any]) -> str:
        response = self._request(
            "POST",
            self._collection_url,
            params=self._params(),
            json=encode_fields(fields),
        )
        record = decode_document(self._json(response))
        if not record["id"]:
            raise RemoteStoreError("Firestore create returned no document name")
        logger.debug("Firestore created id=%s", record["id"])
        return str(record["id"])

    def list(self) -> list[TaskRecord]:
        out: list[TaskRecord] = []
        page_token: str | None = None
        while True:
            extra = [("pageSize", str(self._page_size))]
            if page_token:
                extra.append(("pageToken", page_token))
            response = self._request("GET", self._collection_url, params=self._params(extra))
            data = self._json(response)
            for doc in data.get("documents") or []:
                if isinstance(doc, dict):
                    out.append(decode_document(doc))
            page_token = data.get("nextPageToken") or None
            if not page_token:
                break
        logger.debug("Firestore listed %d documents", len(out))
        return out

    def update(self, task_id: str, fields: dict[str, Any]) -> None:
        extra = [("updateMask.fieldPaths", name) for name in fields]
        extra.append(("currentDocument.exists", "true"))
        self._request(
            "PATCH",
            self._doc_url(task_id),
            params=self._params(extra),
            json=encode_fields(fields),
        )

    def delete(self, task_id: str) -> None:
        self._request("DELETE", self._doc_url(task_id), params=self._params())
