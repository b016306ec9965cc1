"""osmos-elastic — Elasticsearch storage driver for ORM models."""

__version__ = "0.1.0"

from osmos_elastic.drivers.elasticsearch.driver import DocumentStoreDriver
from osmos_elastic.models.document import Document, Model, Page

__all__ = ["Document", "DocumentStoreDriver", "Model", "Page", "__version__"]
