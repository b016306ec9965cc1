"""Elasticsearch / OpenSearch storage driver."""

from osmos_elastic.drivers.elasticsearch.client import DocumentStoreClient, OpenSearchClient, StoreHealth
from osmos_elastic.drivers.elasticsearch.driver import DocumentStoreDriver

__all__ = ["DocumentStoreClient", "DocumentStoreDriver", "OpenSearchClient", "StoreHealth"]
