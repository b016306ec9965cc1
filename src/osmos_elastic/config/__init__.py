"""Driver configuration."""

from osmos_elastic.config.settings import DriverSettings

__all__ = ["DriverSettings"]
