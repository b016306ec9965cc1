"""Document-store client — Typed document API over ``opensearch-py``.

The driver speaks in request envelopes (``index``, ``type``, ``id``,
``body``, ``refresh``, ``consistency``).  This client maps each envelope onto
the typed REST endpoints (``/{index}/{type}/{id}``) and issues it through the
``AsyncOpenSearch`` transport, which owns connection pooling, retries and
timeouts.

Install the dependency::

    pip install opensearch-py
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import Any, Protocol
from urllib.parse import quote

from pydantic import BaseModel, Field

from osmos_elastic.drivers.base.exceptions import ConfigurationError, StoreError

logger = logging.getLogger(__name__)


class StoreHealth(BaseModel):
    """Health status of the document store."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    message: str | None = Field(default=None, description="Additional health message")


class DocumentStoreClient(Protocol):
    """What the driver needs from a document-store client."""

    async def create_index(self, *, index: str, type: str, body: dict[str, Any], **params: Any) -> dict[str, Any]: ...

    async def get(self, *, index: str, type: str, id: str) -> dict[str, Any]: ...

    async def index(
        self,
        *,
        index: str,
        type: str,
        body: dict[str, Any],
        id: str | None = None,
        refresh: bool | None = None,
        consistency: str | None = None,
    ) -> dict[str, Any]: ...

    async def update(
        self,
        *,
        index: str,
        type: str,
        id: str,
        body: dict[str, Any],
        refresh: bool | None = None,
        consistency: str | None = None,
    ) -> dict[str, Any]: ...

    async def delete(self, *, index: str, type: str, id: str, refresh: bool | None = None) -> dict[str, Any]: ...

    async def search(self, *, index: str, type: str, body: dict[str, Any]) -> dict[str, Any]: ...


def _make_path(*parts: str) -> str:
    return "/" + "/".join(quote(str(p), safe="") for p in parts)


def _query_params(**params: Any) -> dict[str, str]:
    """Render write options as URL query parameters, dropping unset ones."""
    rendered: dict[str, str] = {}
    for name, value in params.items():
        if value is None:
            continue
        rendered[name] = ("true" if value else "false") if isinstance(value, bool) else str(value)
    return rendered


class OpenSearchClient:
    """``DocumentStoreClient`` backed by ``opensearchpy.AsyncOpenSearch``.

    Args:
        hosts: List of node URLs.
        username: Optional HTTP basic-auth username.
        password: Optional HTTP basic-auth password.
        verify_certs: Whether to verify TLS certificates.
        **kwargs: Additional keyword arguments forwarded to ``AsyncOpenSearch``.
    """

    def __init__(
        self,
        hosts: list[str] | None = None,
        username: str | None = None,
        password: str | None = None,
        verify_certs: bool = True,
        **kwargs: Any,
    ) -> None:
        self._hosts = hosts or ["http://localhost:9200"]
        self._username = username
        self._password = password
        self._verify_certs = verify_certs
        self._extra_kwargs = kwargs
        self._client: Any = None

    async def initialize(self) -> None:
        """Create and verify the ``AsyncOpenSearch`` client."""
        try:
            from opensearchpy import AsyncOpenSearch
        except ImportError as e:
            raise ConfigurationError("opensearch-py package is required.  Install with: pip install opensearch-py") from e

        client_kwargs: dict[str, Any] = {
            "hosts": self._hosts,
            "verify_certs": self._verify_certs,
            "ssl_show_warn": False,
        }
        if self._username and self._password:
            client_kwargs["http_auth"] = (self._username, self._password)

        client_kwargs.update(self._extra_kwargs)

        try:
            self._client = AsyncOpenSearch(**client_kwargs)
            info = await self._client.info()
            version = info.get("version", {}).get("number", "unknown")
            cluster = info.get("cluster_name", "unknown")
            logger.info("Connected to document store cluster: %s (v%s)", cluster, version)
        except Exception as e:
            raise StoreError(f"Failed to connect to document store: {e}") from e

    async def shutdown(self) -> None:
        """Close the underlying client."""
        if self._client:
            await self._client.close()
            self._client = None

    # ── Document API ─────────────────────────────────────────────────────

    async def create_index(self, *, index: str, type: str, body: dict[str, Any], **params: Any) -> dict[str, Any]:
        """Create ``index``; a bare body is taken as the mapping for ``type``."""
        if body and "mappings" not in body and "settings" not in body:
            body = {"mappings": {type: body}}
        return await self._perform("PUT", _make_path(index), params=_query_params(**params), body=body or None)

    async def get(self, *, index: str, type: str, id: str) -> dict[str, Any]:
        return await self._perform("GET", _make_path(index, type, id))

    async def index(
        self,
        *,
        index: str,
        type: str,
        body: dict[str, Any],
        id: str | None = None,
        refresh: bool | None = None,
        consistency: str | None = None,
    ) -> dict[str, Any]:
        params = _query_params(refresh=refresh, consistency=consistency)
        if id is None:
            return await self._perform("POST", _make_path(index, type), params=params, body=body)
        return await self._perform("PUT", _make_path(index, type, id), params=params, body=body)

    async def update(
        self,
        *,
        index: str,
        type: str,
        id: str,
        body: dict[str, Any],
        refresh: bool | None = None,
        consistency: str | None = None,
    ) -> dict[str, Any]:
        params = _query_params(refresh=refresh, consistency=consistency)
        return await self._perform("POST", _make_path(index, type, id, "_update"), params=params, body=body)

    async def delete(self, *, index: str, type: str, id: str, refresh: bool | None = None) -> dict[str, Any]:
        return await self._perform("DELETE", _make_path(index, type, id), params=_query_params(refresh=refresh))

    async def search(self, *, index: str, type: str, body: dict[str, Any]) -> dict[str, Any]:
        return await self._perform("POST", _make_path(index, type, "_search"), body=body)

    async def _perform(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if not self._client:
            raise StoreError("Document store client not initialized.")
        logger.debug("%s %s params=%s", method, path, params)
        return await self._client.transport.perform_request(method, path, params=params or None, body=body)

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> StoreHealth:
        """Check cluster health."""
        if not self._client:
            return StoreHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            health = await self._client.cluster.health()
            latency_ms = int((time.monotonic() - start) * 1000)

            status_map = {"green": "healthy", "yellow": "degraded", "red": "unhealthy"}

            return StoreHealth(
                status=status_map.get(health.get("status", "red"), "unhealthy"),
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"Cluster: {health.get('cluster_name')}, Nodes: {health.get('number_of_nodes')}",
            )
        except Exception as e:
            return StoreHealth(status="unhealthy", message=str(e))
