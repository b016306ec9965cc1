"""Shared test fixtures and configuration."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from osmos_elastic.config.settings import DriverSettings
from osmos_elastic.drivers.elasticsearch.driver import DocumentStoreDriver
from osmos_elastic.models.document import Document, Model


@pytest.fixture
def settings() -> DriverSettings:
    """Create a test DriverSettings instance with defaults."""
    return DriverSettings(
        _env_file=None,  # type: ignore[call-arg]
        store={"hosts": ["http://localhost:9200"], "index": "test-index"},
    )


@pytest.fixture
def model() -> Model:
    """A model whose records are keyed by ``id``."""
    return Model(bucket="article", primary_key="id")


@pytest.fixture
def keyless_model() -> Model:
    """A model that declares no primary-key field."""
    return Model(bucket="event")


@pytest.fixture
def new_document(model: Model) -> Document:
    """A document that has never been written."""
    return Document(model=model)


@pytest.fixture
def saved_document(model: Model) -> Document:
    """A document previously persisted as ``art-1``."""
    return Document(
        model=model,
        primary_key="art-1",
        original_data={"id": "art-1", "title": "Solar Nowcasting", "draft": True},
    )


@pytest.fixture
def client() -> AsyncMock:
    """A document-store client double."""
    return AsyncMock()


@pytest.fixture
def driver(client: AsyncMock) -> DocumentStoreDriver:
    return DocumentStoreDriver(client, "test-index")
