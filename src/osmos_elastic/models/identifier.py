"""Record identifiers.

Callers may address a record either by a bare value or by a single-entry
mapping such as ``{"id": "42"}``.  Both resolve to the same physical
identifier in the store.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from osmos_elastic.drivers.base.exceptions import InvalidArgument


class ScalarKey(BaseModel):
    """A bare identifier value."""

    model_config = ConfigDict(frozen=True)

    value: str | int

    def resolve(self) -> str:
        return str(self.value)


class KeyedKey(BaseModel):
    """An identifier wrapped in a ``{field: value}`` mapping."""

    model_config = ConfigDict(frozen=True)

    mapping: dict[str, Any]

    def resolve(self) -> str:
        if len(self.mapping) != 1:
            raise InvalidArgument(
                f"A keyed identifier must have exactly one entry, got {len(self.mapping)}: {self.mapping!r}"
            )
        (value,) = self.mapping.values()
        return str(value)


Identifier = ScalarKey | KeyedKey


def as_identifier(key: Identifier | Mapping[str, Any] | str | int) -> Identifier:
    """Wrap a raw key in the matching identifier variant."""
    if isinstance(key, ScalarKey | KeyedKey):
        return key
    if isinstance(key, Mapping):
        return KeyedKey(mapping=dict(key))
    if isinstance(key, str | int) and not isinstance(key, bool):
        return ScalarKey(value=key)
    raise InvalidArgument(f"Unsupported identifier type: {type(key).__name__}")
