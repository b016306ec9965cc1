"""Integration test fixtures — a live document store seeded with mock records.

The driver speaks the typed document API (``/{index}/{type}/{id}`` with
``consistency`` write options), so these tests need an Elasticsearch 2.x
node, e.g.::

    docker run -d -p 9200:9200 elasticsearch:2.4

Seed data is loaded into a fresh index on first use.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx
import pytest

INDEX = "osmos-test"
BUCKET = "article"

MOCK_RECORDS: list[dict[str, Any]] = [
    {
        "id": "doc-001",
        "title": "Advances in Solar Nowcasting Using Deep Learning",
        "author": "Alice Johnson",
        "tags": ["solar energy", "deep learning", "nowcasting"],
    },
    {
        "id": "doc-002",
        "title": "Transformer Models for Natural Language Understanding",
        "author": "Bob Smith",
        "tags": ["NLP", "transformers"],
    },
    {
        "id": "doc-003",
        "title": "Federated Learning for Privacy-Preserving Medical Imaging",
        "author": "Carol Zhang",
        "tags": ["federated learning", "privacy"],
    },
    {
        "id": "doc-004",
        "title": "Reinforcement Learning for Robotic Manipulation",
        "author": "David Lee",
        "tags": ["reinforcement learning", "robotics"],
    },
    {
        "id": "doc-005",
        "title": "Graph Neural Networks for Drug Discovery",
        "author": "Eve Brown",
        "tags": ["graph neural networks", "drug discovery"],
    },
]


def _wait_for_service(url: str, timeout: float = 60.0) -> dict[str, Any] | None:
    """Block until *url* answers with HTTP 200 and return its JSON, or None on timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=30)
            if r.status_code == 200:
                return r.json()
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return None


async def _seed(host: str) -> None:
    async with httpx.AsyncClient(base_url=host, timeout=30) as client:
        await client.delete(f"/{INDEX}")

        resp = await client.put(f"/{INDEX}")
        resp.raise_for_status()

        # Stored bodies carry a stale "id" that the driver must override with _id.
        for record in MOCK_RECORDS:
            body = {**record, "id": "stale"}
            resp = await client.put(f"/{INDEX}/{BUCKET}/{record['id']}", json=body)
            resp.raise_for_status()

        await client.post(f"/{INDEX}/_refresh")


@pytest.fixture(scope="session")
def store_ready() -> str:
    """Ensure a typed-API document store is running and seeded."""
    host = "http://localhost:9200"
    info = _wait_for_service(host, timeout=10.0)
    if info is None:
        pytest.skip("Document store not available at localhost:9200")

    version = info.get("version", {})
    major = str(version.get("number", "0")).split(".")[0]
    if version.get("distribution") == "opensearch" or not major.isdigit() or int(major) >= 5:
        pytest.skip(f"Typed document API unavailable on {version.get('number')}")

    asyncio.run(_seed(host))
    return host
