"""Cookie parsing and SetCookie serialization.

Consolidates the read side (parse_cookies, used when a wrapper is seeded
from a ``Cookie`` header) and the write side (SetCookie, used for every
accumulated ``Set-Cookie`` directive) in one module.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import format_datetime

logger = logging.getLogger("crumb.cookies")


def parse_cookies(header: object) -> dict[str, str]:
    """Parse a ``Cookie`` header value into a name-value dict.

    Returns an empty dict for empty, missing, or non-string headers.
    Segments without ``=`` or with an empty name are skipped.
    """
    if not isinstance(header, str) or not header:
        return {}
    cookies: dict[str, str] = {}
    for segment in header.split(";"):
        pair = segment.strip()
        if not pair:
            continue
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            logger.debug("Discarding malformed cookie segment %r", pair)
            continue
        cookies[key] = value.strip()
    return cookies


def format_http_date(moment: datetime | int | float) -> str:
    """Format *moment* as an RFC 7231 HTTP date (``Www, dd Mon yyyy HH:MM:SS GMT``).

    Naive datetimes are taken to be UTC. Numbers are POSIX timestamps.
    """
    if isinstance(moment, bool) or not isinstance(moment, datetime | int | float):
        msg = f"Cannot format {type(moment).__name__} as an HTTP date"
        raise TypeError(msg)
    if not isinstance(moment, datetime):
        moment = datetime.fromtimestamp(moment, UTC)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return format_datetime(moment.astimezone(UTC).replace(microsecond=0), usegmt=True)


@dataclass(frozen=True, slots=True)
class SetCookie:
    """A ``Set-Cookie`` directive accumulated by a CookieWrapper."""

    key: str
    value: str
    max_age: int | None = None
    expires: datetime | None = None
    path: str | None = None
    domain: str | None = None
    # None means "not given"; a CookieWrapper fills it from CookieConfig
    secure: bool | None = None
    http_only: bool | None = None

    def to_header_value(self) -> str:
        """Serialize to a ``Set-Cookie`` header value string.

        Attributes follow ``key=value`` in a fixed order: Max-Age,
        Expires, Path, Domain, Secure, HttpOnly.
        """
        parts = [f"{self.key}={self.value}"]
        if self.max_age is not None:
            parts.append(f"Max-Age={int(self.max_age)}")
        if self.expires is not None:
            parts.append(f"Expires={format_http_date(self.expires)}")
        if self.path:
            parts.append(f"Path={self.path}")
        if self.domain:
            parts.append(f"Domain={self.domain}")
        if self.secure:
            parts.append("Secure")
        if self.http_only:
            parts.append("HttpOnly")
        return "; ".join(parts)
