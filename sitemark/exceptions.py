# sitemark/exceptions.py


class SitemarkError(Exception):
    """Base class for errors raised by sitemark."""


class ConfigurationError(SitemarkError, ValueError):
    """
    Raised when an option value is invalid.

    Configuration is validated before any document is processed, so this
    error halts the build instead of surfacing halfway through a page.
    """
