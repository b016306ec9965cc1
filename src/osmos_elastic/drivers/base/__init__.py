"""Base driver interface — Abstract persistence contract for ORM storage drivers."""

from osmos_elastic.drivers.base.driver import StorageDriver
from osmos_elastic.drivers.base.exceptions import (
    ConfigurationError,
    DriverError,
    InvalidArgument,
    MissingPrimaryKey,
    NotFound,
    StoreError,
)

__all__ = [
    "ConfigurationError",
    "DriverError",
    "InvalidArgument",
    "MissingPrimaryKey",
    "NotFound",
    "StorageDriver",
    "StoreError",
]
