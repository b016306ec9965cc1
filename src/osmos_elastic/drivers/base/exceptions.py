"""Driver-specific exceptions."""


class DriverError(Exception):
    """Base exception for storage driver errors."""


class InvalidArgument(DriverError):
    """Raised when a caller passes malformed input to a driver operation."""


class MissingPrimaryKey(DriverError):
    """Raised when an update lacks the primary key it needs to target a record."""


class NotFound(DriverError):
    """Raised when a requested record does not exist in the store."""


class StoreError(DriverError):
    """Raised when the underlying document store reports a failure."""


class ConfigurationError(DriverError):
    """Raised when driver configuration is invalid."""
