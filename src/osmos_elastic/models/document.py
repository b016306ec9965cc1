"""ORM-side record types — Models, Documents and pagination results.

The ORM owns these objects; the driver only reads them.  They are frozen
value types, so operations that assign a primary key return an updated
copy instead of mutating the caller's instance.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Model(BaseModel):
    """A record type as declared by the ORM."""

    model_config = ConfigDict(frozen=True)

    bucket: str = Field(description="Document type within the index that holds this model's records")
    primary_key: str | None = Field(default=None, description="Schema-declared primary-key field name")


class Document(BaseModel):
    """A runtime instance of a ``Model``.

    ``original_data`` is the last-persisted snapshot.  A document whose
    snapshot has no value for the primary-key field has never been saved.
    """

    model_config = ConfigDict(frozen=True)

    model: Model = Field(description="The model this document belongs to")
    primary_key: str | int | None = Field(default=None, description="Store-assigned identifier, once written")
    original_data: dict[str, Any] = Field(default_factory=dict, description="Last-persisted field snapshot")

    @property
    def is_persisted(self) -> bool:
        """Whether the snapshot records a value for the primary-key field."""
        key_field = self.model.primary_key
        if not key_field:
            return False
        return bool(self.original_data.get(key_field))

    def with_primary_key(self, primary_key: str | int) -> Document:
        """Return a copy of this document carrying ``primary_key``."""
        return self.model_copy(update={"primary_key": primary_key})


class Page(BaseModel):
    """One page of a paginated search."""

    docs: list[dict[str, Any]] = Field(default_factory=list, description="Records on this page")
    count: int = Field(default=0, description="Total number of matches reported by the store")
    start: int = Field(default=0, description="Offset of the first record on this page")
    limit: int = Field(default=0, description="Requested page size")
