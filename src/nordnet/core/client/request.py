from typing import Any, Iterable, Mapping, Optional
from urllib.parse import quote

import aiohttp
from yarl import URL

REDACTED = "***"


def request_url(base_url: str, path: str, params: Optional[Mapping[str, Any]] = None) -> URL:
    """Join the API root and an endpoint path, appending params as a sorted query string.

    Args:
        base_url: API root, e.g. ``https://api.test.nordnet.se/next``
        path: Endpoint path starting with ``/``, segments already percent-encoded
        params: Optional query parameters; values are passed through ``str()``

    Returns:
        URL: The full request URL, sent as is by aiohttp
    """
    url = URL(base_url.rstrip("/") + path, encoded=True)
    if params:
        url = url.with_query(sorted((key, str(value)) for key, value in params.items()))
    return url


def build_url(base_url: str, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
    return str(request_url(base_url, path, params))


def path_segment(value: Any) -> str:
    return quote(str(value), safe="")


def endpoint(*segments: Any) -> str:
    """Build ``/v1/<segment>/<segment>...`` with each segment percent-encoded."""
    return "/v1" + "".join(f"/{path_segment(segment)}" for segment in segments)


def session_auth_header(session_key: str) -> str:
    """Nordnet expects the session key as both user and password of HTTP Basic auth."""
    return aiohttp.BasicAuth(session_key, session_key).encode()


def redact(params: Optional[Mapping[str, Any]], secrets: Iterable[str] = ("auth",)) -> Optional[Mapping[str, Any]]:
    if not params:
        return params
    return {key: (REDACTED if key in secrets else value) for key, value in params.items()}


def redact_path(path: str, session_key: Optional[str]) -> str:
    """Mask the session key where it appears as a path segment, e.g. ``/v1/login/<key>``."""
    if not session_key:
        return path
    secret = path_segment(session_key)
    return "/".join(REDACTED if segment == secret else segment for segment in path.split("/"))
