"""Per-request cookie state.

A CookieWrapper is seeded from the incoming ``Cookie`` header, collects
new cookies as formatted ``Set-Cookie`` directives, and serializes the
combined state back into a ``Cookie``-style string.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import fields
from datetime import UTC, datetime, timedelta
from typing import Any

from crumb.config import CookieConfig
from crumb.errors import InvalidArgument
from crumb.http.cookies import SetCookie, parse_cookies

logger = logging.getLogger("crumb.cookies")

# camelCase option names accepted alongside the snake_case field names
_ALIASES = {"maxAge": "max_age", "httpOnly": "http_only"}
_FIELDS = frozenset(f.name for f in fields(SetCookie))


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _normalize_options(
    options: Mapping[str, Any] | SetCookie | None, overrides: Mapping[str, Any]
) -> dict[str, Any]:
    """Flatten *options* and *overrides* into one dict of SetCookie field names."""
    if options is None:
        source: dict[str, Any] = {}
    elif isinstance(options, SetCookie):
        source = {name: getattr(options, name) for name in _FIELDS}
    elif isinstance(options, Mapping):
        source = dict(options)
    else:
        msg = f"cookie options must be a mapping, got {type(options).__name__}"
        raise InvalidArgument(msg)
    source.update(overrides)

    normalized: dict[str, Any] = {}
    for name, value in source.items():
        field_name = _ALIASES.get(name, name)
        # snake_case wins over its camelCase alias regardless of order
        if name != field_name and field_name in source:
            continue
        if field_name in _FIELDS:
            normalized[field_name] = value
    return normalized


def _is_latin1(text: str) -> bool:
    try:
        text.encode("latin-1")
    except UnicodeEncodeError:
        return False
    return True


def _expiry_after(now: datetime, max_age: int) -> datetime:
    """Return *now* + *max_age* seconds, capped to the representable range."""
    try:
        return now + timedelta(seconds=max_age)
    except OverflowError:
        if max_age < 0:
            return datetime.min.replace(tzinfo=UTC)
        return datetime.max.replace(tzinfo=UTC)


class CookieWrapper:
    """Cookie state for one request/response cycle.

    Usage::

        cookies = CookieWrapper(request_headers.get("cookie"))
        cookies.get("session")
        cookies.set({"key": "theme", "value": "dark", "max_age": 3600, "path": "/"})
        cookies.set_cookie   # ('theme=dark; Max-Age=3600; Expires=...; Path=/',)

    ``set_cookie`` only ever grows; ``initial_map`` is never touched by
    ``set()``.
    """

    __slots__ = ("_clock", "_config", "_initialized", "_set_cookie", "_set_pairs", "initial_map")

    def __init__(
        self,
        raw: object = None,
        *,
        config: CookieConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.initial_map: dict[str, str] = {}
        self._initialized = False
        self._set_cookie: list[str] = []
        self._set_pairs: list[tuple[str, str]] = []
        self._config = config if config is not None else CookieConfig()
        self._clock = clock if clock is not None else _utc_now
        if raw is not None:
            self.init_with_string(raw)

    # -- Input --

    @property
    def initialized(self) -> bool:
        """True once a usable ``Cookie`` string has been parsed."""
        return self._initialized

    def init_with_string(self, raw: object) -> None:
        """Seed the initial cookies from a ``Cookie`` header value.

        Anything that is not a string leaves the wrapper uninitialized.
        Malformed segments are dropped; this never raises.
        """
        if not isinstance(raw, str):
            return
        self.initial_map = parse_cookies(raw)
        self._initialized = True

    def init_with_headers(self, raw_headers: Iterable[tuple[bytes | str, bytes | str]]) -> None:
        """Seed the initial cookies from raw header pairs (ASGI ``scope["headers"]``).

        Multiple ``Cookie`` headers are joined as if they were one.
        """
        values: list[str] = []
        for name, value in raw_headers:
            if isinstance(name, bytes):
                name = name.decode("latin-1")
            if name.lower() != "cookie":
                continue
            if isinstance(value, bytes):
                value = value.decode("latin-1")
            values.append(value)
        if values:
            self.init_with_string("; ".join(values))

    # -- Read --

    def get(self, key: object) -> str:
        """Return the initial value for *key*, or ``""`` if absent or not a string."""
        if not isinstance(key, str):
            return ""
        return self.initial_map.get(key, "")

    def get_all(self) -> dict[str, str]:
        """Return initial cookies merged with every cookie set since, latest wins."""
        merged = dict(self.initial_map)
        merged.update(self._set_pairs)
        return merged

    # -- Write --

    def set(self, options: Mapping[str, Any] | SetCookie | None = None, /, **overrides: Any) -> None:
        """Add a cookie and record its ``Set-Cookie`` directive.

        *options* is a mapping (or a SetCookie) with ``key`` and ``value``
        plus any of ``max_age``, ``expires``, ``path``, ``domain``,
        ``secure``, ``http_only``. Keyword arguments override it. When
        ``max_age`` is given without ``expires``, the expiry is computed
        from the current time, capped at the largest representable date.

        Raises:
            InvalidArgument: If the key or the value is not a latin-1
                encodable string, or another attribute is not latin-1.
        """
        opts = _normalize_options(options, overrides)

        key = opts.get("key")
        if not isinstance(key, str) or not _is_latin1(key):
            msg = "wrong key"
            raise InvalidArgument(msg)
        value = opts.get("value")
        if not isinstance(value, str) or not _is_latin1(value):
            msg = "wrong value"
            raise InvalidArgument(msg)

        max_age = opts.get("max_age")
        expires = opts.get("expires")
        if max_age is not None and expires is None:
            expires = _expiry_after(self._clock(), max_age)

        cfg = self._config
        path = opts.get("path")
        domain = opts.get("domain")
        secure = opts.get("secure")
        http_only = opts.get("http_only")
        cookie = SetCookie(
            key=key,
            value=value,
            max_age=max_age,
            expires=expires,
            path=cfg.path if path is None else path,
            domain=cfg.domain if domain is None else domain,
            secure=cfg.secure if secure is None else bool(secure),
            http_only=cfg.http_only if http_only is None else bool(http_only),
        )

        directive = cookie.to_header_value()
        if not _is_latin1(directive):
            msg = f"cookie attributes for {key!r} must be latin-1 encodable"
            raise InvalidArgument(msg)
        self._set_cookie.append(directive)
        self._set_pairs.append((key, value))
        logger.debug("Set-Cookie: %s", directive)

    # -- Output --

    @property
    def set_cookie(self) -> tuple[str, ...]:
        """Every formatted ``Set-Cookie`` directive, in the order they were set."""
        return tuple(self._set_cookie)

    def set_cookie_headers(self) -> list[tuple[bytes, bytes]]:
        """Return raw ``set-cookie`` header pairs for an ASGI response start message."""
        return [(b"set-cookie", directive.encode("latin-1")) for directive in self._set_cookie]

    def get_cookie_string(self) -> str:
        """Serialize initial and newly set cookies as one ``Cookie`` header value."""
        pairs: list[tuple[str, str]] = []
        if self._initialized:
            pairs.extend(self.initial_map.items())
        pairs.extend(self._set_pairs)
        return "; ".join(f"{key}={value}" for key, value in pairs)

    def __repr__(self) -> str:
        return f"CookieWrapper(keys={sorted(self.get_all())!r}, pending={len(self._set_cookie)})"
