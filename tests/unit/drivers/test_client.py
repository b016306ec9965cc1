"""Tests for the opensearch-py backed document-store client."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from osmos_elastic.drivers.base.exceptions import ConfigurationError, StoreError
from osmos_elastic.drivers.elasticsearch.client import OpenSearchClient

# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture
def os_client() -> MagicMock:
    """Stand-in for ``AsyncOpenSearch``."""
    mock = MagicMock()
    mock.transport.perform_request = AsyncMock(return_value={"_id": "doc-1", "result": "created"})
    mock.close = AsyncMock()
    return mock


@pytest.fixture
def client(os_client: MagicMock) -> OpenSearchClient:
    c = OpenSearchClient(hosts=["http://localhost:9200"])
    c._client = os_client
    return c


def _request(os_client: MagicMock) -> tuple:
    call = os_client.transport.perform_request.call_args
    return call.args[0], call.args[1], call.kwargs.get("params"), call.kwargs.get("body")


# ── Properties ───────────────────────────────────────────────────────────────


class TestClientProperties:
    def test_default_hosts(self) -> None:
        assert OpenSearchClient()._hosts == ["http://localhost:9200"]

    def test_custom_values(self) -> None:
        c = OpenSearchClient(hosts=["https://es:9200"], username="u", password="p", timeout=5)
        assert c._hosts == ["https://es:9200"]
        assert c._extra_kwargs == {"timeout": 5}


# ── Initialization ───────────────────────────────────────────────────────────


class TestClientInitialization:
    async def test_initialize_missing_package_raises(self) -> None:
        c = OpenSearchClient()
        with patch.dict("sys.modules", {"opensearchpy": None}), pytest.raises(ConfigurationError):
            await c.initialize()

    async def test_initialize_connects(self) -> None:
        instance = MagicMock()
        instance.info = AsyncMock(return_value={"cluster_name": "test", "version": {"number": "2.11.0"}})
        with patch("opensearchpy.AsyncOpenSearch", return_value=instance) as factory:
            c = OpenSearchClient(hosts=["http://es:9200"], username="elastic", password="secret")
            await c.initialize()

        kwargs = factory.call_args.kwargs
        assert kwargs["hosts"] == ["http://es:9200"]
        assert kwargs["http_auth"] == ("elastic", "secret")
        assert c._client is instance

    async def test_initialize_failure_is_store_error(self) -> None:
        instance = MagicMock()
        instance.info = AsyncMock(side_effect=RuntimeError("Connection refused"))
        with patch("opensearchpy.AsyncOpenSearch", return_value=instance):
            with pytest.raises(StoreError, match="Connection refused"):
                await OpenSearchClient().initialize()

    async def test_shutdown_closes_client(self, client: OpenSearchClient, os_client: MagicMock) -> None:
        await client.shutdown()
        os_client.close.assert_called_once()
        assert client._client is None

    async def test_request_before_initialize_raises(self) -> None:
        with pytest.raises(StoreError, match="not initialized"):
            await OpenSearchClient().get(index="i", type="t", id="1")


# ── Document API ─────────────────────────────────────────────────────────────


class TestClientRequests:
    async def test_create_index_wraps_bare_mapping(self, client: OpenSearchClient, os_client: MagicMock) -> None:
        properties = {"properties": {"title": {"type": "text"}}}
        await client.create_index(index="catalog", type="article", body=properties)
        assert _request(os_client) == ("PUT", "/catalog", None, {"mappings": {"article": properties}})

    async def test_create_index_passes_full_body(self, client: OpenSearchClient, os_client: MagicMock) -> None:
        body = {"settings": {"number_of_shards": 1}}
        await client.create_index(index="catalog", type="article", body=body, timeout="30s")
        assert _request(os_client) == ("PUT", "/catalog", {"timeout": "30s"}, body)

    async def test_create_index_empty_body(self, client: OpenSearchClient, os_client: MagicMock) -> None:
        await client.create_index(index="catalog", type="article", body={})
        assert _request(os_client) == ("PUT", "/catalog", None, None)

    async def test_get(self, client: OpenSearchClient, os_client: MagicMock) -> None:
        await client.get(index="catalog", type="article", id="a/b")
        assert _request(os_client) == ("GET", "/catalog/article/a%2Fb", None, None)

    async def test_index_without_id(self, client: OpenSearchClient, os_client: MagicMock) -> None:
        result = await client.index(index="catalog", type="article", body={"t": 1}, refresh=True, consistency="quorum")
        assert _request(os_client) == (
            "POST",
            "/catalog/article",
            {"refresh": "true", "consistency": "quorum"},
            {"t": 1},
        )
        assert result["_id"] == "doc-1"

    async def test_index_with_id(self, client: OpenSearchClient, os_client: MagicMock) -> None:
        await client.index(index="catalog", type="article", body={}, id="doc-1", refresh=True)
        assert _request(os_client)[:3] == ("PUT", "/catalog/article/doc-1", {"refresh": "true"})

    async def test_update(self, client: OpenSearchClient, os_client: MagicMock) -> None:
        await client.update(index="catalog", type="article", id="doc-1", body={"doc": {"t": None}}, consistency="quorum")
        assert _request(os_client) == (
            "POST",
            "/catalog/article/doc-1/_update",
            {"consistency": "quorum"},
            {"doc": {"t": None}},
        )

    async def test_delete(self, client: OpenSearchClient, os_client: MagicMock) -> None:
        await client.delete(index="catalog", type="article", id="42", refresh=True)
        assert _request(os_client) == ("DELETE", "/catalog/article/42", {"refresh": "true"}, None)

    async def test_search(self, client: OpenSearchClient, os_client: MagicMock) -> None:
        await client.search(index="catalog", type="article", body={"size": 1})
        assert _request(os_client) == ("POST", "/catalog/article/_search", None, {"size": 1})

    async def test_transport_errors_propagate(self, client: OpenSearchClient, os_client: MagicMock) -> None:
        from opensearchpy.exceptions import NotFoundError

        os_client.transport.perform_request.side_effect = NotFoundError(404, "not_found", {})
        with pytest.raises(NotFoundError):
            await client.get(index="catalog", type="article", id="nope")


# ── Health ───────────────────────────────────────────────────────────────────


class TestClientHealth:
    async def test_health_not_initialized(self) -> None:
        health = await OpenSearchClient().health_check()
        assert health.status == "unhealthy"

    async def test_health_degraded(self, client: OpenSearchClient, os_client: MagicMock) -> None:
        os_client.cluster.health = AsyncMock(
            return_value={"status": "yellow", "cluster_name": "test-cluster", "number_of_nodes": 1}
        )
        health = await client.health_check()
        assert health.status == "degraded"
        assert "test-cluster" in (health.message or "")

    async def test_health_exception(self, client: OpenSearchClient, os_client: MagicMock) -> None:
        os_client.cluster.health = AsyncMock(side_effect=RuntimeError("Connection refused"))
        health = await client.health_check()
        assert health.status == "unhealthy"
