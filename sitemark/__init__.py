# sitemark/__init__.py

from .exceptions import ConfigurationError, SitemarkError

__all__ = ("ConfigurationError", "SitemarkError")
