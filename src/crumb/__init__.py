"""Crumb — cookie state for one HTTP request/response cycle.

Parses the incoming ``Cookie`` header, collects ``Set-Cookie`` directives,
and serializes the combined state back into a ``Cookie`` string.

Basic usage::

    from crumb import CookieWrapper

    cookies = CookieWrapper("session=abc; theme=dark")
    cookies.get("theme")  # "dark"

    cookies.set({"key": "lang", "value": "en", "max_age": 3600, "path": "/"})
    cookies.set_cookie  # ("lang=en; Max-Age=3600; Expires=...; Path=/",)
    cookies.get_cookie_string()  # "session=abc; theme=dark; lang=en"
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "CookieConfig",
    "CookieWrapper",
    "CrumbError",
    "InvalidArgument",
    "SetCookie",
    "format_http_date",
    "parse_cookies",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import crumb`` fast while providing a clean top-level API.
    """
    if name == "CookieWrapper":
        from crumb.http.wrapper import CookieWrapper

        return CookieWrapper

    if name == "CookieConfig":
        from crumb.config import CookieConfig

        return CookieConfig

    if name in ("SetCookie", "format_http_date", "parse_cookies"):
        from crumb.http import cookies as _cookies

        return getattr(_cookies, name)

    if name in ("ConfigurationError", "CrumbError", "InvalidArgument"):
        from crumb import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
