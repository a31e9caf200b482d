"""Crumb exception hierarchy.

Shared by the parser, the wrapper, and configuration so callers can
catch one base type.
"""


class CrumbError(Exception):
    """Base for all crumb-specific errors."""


class ConfigurationError(CrumbError):
    """Raised when a ``CookieConfig`` default has the wrong type."""


class InvalidArgument(CrumbError, TypeError):  # noqa: N818 — mirrors the call-surface error name
    """Raised by ``CookieWrapper.set()`` for a non-string key or value.

    Also a ``TypeError``, so callers that already guard against bad
    argument types catch it without importing crumb.
    """
