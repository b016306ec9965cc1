"""Elasticsearch driver — Persists ORM models as documents in one index.

Each ORM model maps to a document type (its *bucket*) inside a single
configured index.  The store assigns document identifiers; the driver keeps
the model's primary-key field in sync with them, writing the identifier
into every record it returns.

Writes are issued with ``refresh=true`` and ``consistency=quorum`` so that a
record is visible to the next read through this driver and acknowledged by
a majority of replicas before the call returns.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from osmos_elastic.drivers.base.driver import StorageDriver
from osmos_elastic.drivers.base.exceptions import (
    DriverError,
    InvalidArgument,
    MissingPrimaryKey,
    NotFound,
    StoreError,
)
from osmos_elastic.drivers.elasticsearch.client import DocumentStoreClient, OpenSearchClient, StoreHealth
from osmos_elastic.models.document import Document, Model, Page
from osmos_elastic.models.identifier import Identifier, as_identifier

if TYPE_CHECKING:
    from osmos_elastic.config.settings import DriverSettings

logger = logging.getLogger(__name__)

# The search API needs an explicit size; find() asks for everything up to this.
FIND_SIZE_CEILING = 9999999

WRITE_OPTIONS: dict[str, Any] = {"refresh": True, "consistency": "quorum"}


def _is_not_found(error: Exception) -> bool:
    status = getattr(error, "status_code", None) or getattr(error, "status", None)
    return status == 404


class DocumentStoreDriver(StorageDriver):
    """ORM storage driver for an Elasticsearch-compatible document store.

    Args:
        client: A ``DocumentStoreClient``; connection details are its concern.
        index: Name of the index holding every bucket served by this driver.
    """

    def __init__(self, client: DocumentStoreClient, index: str) -> None:
        self._client = client
        self._index = index

    @classmethod
    def from_settings(cls, settings: DriverSettings) -> DocumentStoreDriver:
        """Build a driver and its ``OpenSearchClient`` from settings."""
        store = settings.store
        client = OpenSearchClient(
            hosts=store.hosts or None,
            username=store.username,
            password=store.password,
            verify_certs=store.verify_certs,
            **store.extra,
        )
        return cls(client, store.index)

    @property
    def client(self) -> DocumentStoreClient:
        return self._client

    @property
    def index(self) -> str:
        return self._index

    async def initialize(self) -> None:
        initialize = getattr(self._client, "initialize", None)
        if initialize is not None:
            await initialize()

    async def shutdown(self) -> None:
        shutdown = getattr(self._client, "shutdown", None)
        if shutdown is not None:
            await shutdown()

    async def health_check(self) -> StoreHealth:
        check = getattr(self._client, "health_check", None)
        if check is None:
            return StoreHealth(status="unhealthy", message="Client does not report health")
        return await check()

    # ── Index lifecycle ──────────────────────────────────────────────────

    async def create_indices(self, model: Model, data: Mapping[str, Any]) -> None:
        """Create the index, defaulting the document type to the model's bucket."""
        if not isinstance(data, Mapping):
            raise InvalidArgument("`data` needs to be a mapping.")

        if any(not isinstance(k, str) for k in data):
            raise InvalidArgument("`data` keys must be strings.")

        payload = dict(data)
        payload.setdefault("type", model.bucket)
        payload.setdefault("body", {})
        payload["index"] = self._index

        await self._call("create_indices", self._client.create_index, payload)
        logger.info("Created index %s for bucket %s", self._index, payload["type"])

    # ── Reads ────────────────────────────────────────────────────────────

    async def get(self, model: Model, key: Identifier | Mapping[str, Any] | str | int) -> dict[str, Any]:
        doc_id = as_identifier(key).resolve()
        result = await self._call(
            "get",
            self._client.get,
            {"index": self._index, "type": model.bucket, "id": doc_id},
            not_found=f"Record '{doc_id}' not found in {self._index}/{model.bucket}.",
        )
        if result.get("found") is False:
            raise NotFound(f"Record '{doc_id}' not found in {self._index}/{model.bucket}.")
        return self._to_record(model, result)

    async def find_one(self, model: Model, spec: Mapping[str, Any]) -> dict[str, Any] | None:
        body = dict(spec)
        body["size"] = 1
        response = await self._search(model, body)
        records = self._hits_to_records(model, response)
        return records[0] if records else None

    async def find(self, model: Model, spec: Mapping[str, Any]) -> list[dict[str, Any]]:
        body = dict(spec)
        body["size"] = FIND_SIZE_CEILING
        response = await self._search(model, body)
        return self._hits_to_records(model, response)

    async def find_limit(self, model: Model, spec: Mapping[str, Any], start: int, limit: int) -> Page:
        body = dict(spec)
        body["from"] = start
        body["size"] = limit
        response = await self._search(model, body)
        total = response.get("hits", {}).get("total", 0)
        if isinstance(total, Mapping):
            total = total.get("value", 0)
        return Page(docs=self._hits_to_records(model, response), count=total, start=start, limit=limit)

    # ── Writes ───────────────────────────────────────────────────────────

    async def post(self, document: Document, data: Mapping[str, Any]) -> Document:
        payload: dict[str, Any] = {
            "index": self._index,
            "type": document.model.bucket,
            "body": dict(data),
            **WRITE_OPTIONS,
        }
        if document.primary_key:
            payload["id"] = str(document.primary_key)

        result = await self._call("post", self._client.index, payload)
        doc_id = str(result["_id"])
        logger.debug("Indexed %s/%s/%s", self._index, document.model.bucket, doc_id)
        return document.with_primary_key(doc_id)

    async def put(
        self,
        document: Document,
        set: Mapping[str, Any],
        unset: Mapping[str, Any] | list[str],
    ) -> Document:
        key_field = document.model.primary_key
        if not (key_field and document.primary_key):
            raise MissingPrimaryKey("You cannot put a document without a primary key.")

        diff: dict[str, Any] = dict(set)
        for field in unset:
            diff[field] = None

        if not document.is_persisted:
            return await self.post(document, diff)

        if diff.get(key_field):
            target = str(document.original_data[key_field])
        else:
            target = str(document.primary_key)

        await self._call(
            "put",
            self._client.update,
            {
                "index": self._index,
                "type": document.model.bucket,
                "id": target,
                "body": {"doc": diff},
                **WRITE_OPTIONS,
            },
        )
        logger.debug("Updated %s/%s/%s fields=%s", self._index, document.model.bucket, target, sorted(diff))
        return document

    async def delete(self, model: Model, key: Identifier | Mapping[str, Any] | str | int) -> None:
        doc_id = as_identifier(key).resolve()
        await self._call(
            "delete",
            self._client.delete,
            {"index": self._index, "type": model.bucket, "id": doc_id, "refresh": True},
            not_found=f"Record '{doc_id}' not found in {self._index}/{model.bucket}.",
        )
        logger.debug("Deleted %s/%s/%s", self._index, model.bucket, doc_id)

    # ── Helpers ──────────────────────────────────────────────────────────

    async def _search(self, model: Model, body: dict[str, Any]) -> dict[str, Any]:
        request = {"index": self._index, "type": model.bucket, "body": body}
        return await self._call("search", self._client.search, request)

    async def _call(
        self, operation: str, method: Any, request: dict[str, Any], not_found: str | None = None
    ) -> dict[str, Any]:
        """Issue one client request, translating its failures."""
        try:
            return await method(**request)
        except DriverError:
            raise
        except Exception as e:
            if not_found is not None and _is_not_found(e):
                raise NotFound(not_found) from e
            logger.warning("Document store %s failed: %s", operation, e)
            raise StoreError(f"Document store {operation} failed: {e}") from e

    @staticmethod
    def _to_record(model: Model, hit: Mapping[str, Any]) -> dict[str, Any]:
        record = dict(hit.get("_source") or {})
        if model.primary_key:
            record[model.primary_key] = hit["_id"]
        return record

    def _hits_to_records(self, model: Model, response: Mapping[str, Any]) -> list[dict[str, Any]]:
        hits = response.get("hits", {}).get("hits", [])
        return [self._to_record(model, hit) for hit in hits]
