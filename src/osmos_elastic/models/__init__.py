"""Record types shared between the ORM and storage drivers."""

from osmos_elastic.models.document import Document, Model, Page
from osmos_elastic.models.identifier import Identifier, KeyedKey, ScalarKey, as_identifier

__all__ = ["Document", "Identifier", "KeyedKey", "Model", "Page", "ScalarKey", "as_identifier"]
