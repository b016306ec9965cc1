"""Storage driver layer — Backends that persist ORM models.

Built-in drivers:
  - elasticsearch: Elasticsearch / OpenSearch document API

Implement ``StorageDriver`` to back the ORM with another store.
"""
