"""Base storage driver — Abstract persistence interface the ORM programs against.

Every storage backend must implement this interface to back ORM models.
A driver is responsible for:
  1. Translating ORM persistence calls into backend requests
  2. Keeping the schema's primary-key field in sync with backend identifiers
  3. Reshaping backend responses into plain field-to-value records
  4. Surfacing backend failures through the driver exception hierarchy
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from osmos_elastic.models.document import Document, Model, Page
    from osmos_elastic.models.identifier import Identifier


class StorageDriver(ABC):
    """Abstract base class for ORM storage drivers.

    Operations are coroutines; each one completes after a single backend
    round trip.  Drivers hold no per-call state.
    """

    @abstractmethod
    async def create_indices(self, model: Model, data: Mapping[str, Any]) -> None:
        """Create the backing index for ``model``.

        Raises:
            InvalidArgument: If ``data`` is not a mapping.
        """

    async def create(self, model: Model) -> None:
        """Allocate an empty record.

        Backends without an allocation primitive defer creation to the
        first ``post``, which is the default.
        """
        return None

    @abstractmethod
    async def get(self, model: Model, key: Identifier | Mapping[str, Any] | str | int) -> dict[str, Any]:
        """Fetch one record by identifier.

        Raises:
            NotFound: If no record has this identifier.
        """

    @abstractmethod
    async def post(self, document: Document, data: Mapping[str, Any]) -> Document:
        """Insert ``data`` as the body of ``document``.

        Returns:
            A copy of ``document`` carrying the identifier the backend assigned.
        """

    @abstractmethod
    async def put(
        self,
        document: Document,
        set: Mapping[str, Any],
        unset: Mapping[str, Any] | list[str],
    ) -> Document:
        """Apply a partial update to ``document``.

        Raises:
            MissingPrimaryKey: If the model or document has no primary key.
        """

    @abstractmethod
    async def delete(self, model: Model, key: Identifier | Mapping[str, Any] | str | int) -> None:
        """Delete one record by identifier.

        Raises:
            NotFound: If no record has this identifier.
        """

    @abstractmethod
    async def find_one(self, model: Model, spec: Mapping[str, Any]) -> dict[str, Any] | None:
        """Return the best match for ``spec``, or ``None``."""

    @abstractmethod
    async def find(self, model: Model, spec: Mapping[str, Any]) -> list[dict[str, Any]]:
        """Return every match for ``spec`` in backend order."""

    async def count(self, model: Model, spec: Mapping[str, Any]) -> int:
        """Count matches for ``spec`` by fetching them."""
        return len(await self.find(model, spec))

    @abstractmethod
    async def find_limit(self, model: Model, spec: Mapping[str, Any], start: int, limit: int) -> Page:
        """Return one page of matches for ``spec``."""
