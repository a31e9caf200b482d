"""Cookie defaults.

CookieConfig is a frozen dataclass, immutable after creation, applied to
every ``CookieWrapper.set()`` call that leaves an attribute out.
"""

from dataclasses import dataclass

from crumb.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class CookieConfig:
    """Default ``Set-Cookie`` attributes. Immutable after creation.

    Every default means "omit the attribute". Override what you need::

        config = CookieConfig(path="/", secure=True, http_only=True)
    """

    path: str | None = None
    domain: str | None = None
    secure: bool = False
    http_only: bool = False

    def __post_init__(self) -> None:
        for name in ("path", "domain"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                msg = f"CookieConfig.{name} must be a string or None, got {type(value).__name__}."
                raise ConfigurationError(msg)
        for name in ("secure", "http_only"):
            if not isinstance(getattr(self, name), bool):
                msg = f"CookieConfig.{name} must be a bool."
                raise ConfigurationError(msg)
