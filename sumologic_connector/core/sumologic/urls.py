"""Request URL construction for templated API paths."""
from __future__ import annotations

import re
from typing import Mapping, Optional
from urllib.parse import quote, urlsplit, urlunsplit

from .exceptions import URLConstructionError

API_VERSION = "v1"
# API: default page size is 100 and the accepted range is 1-100.
RESOURCE_PAGE_SIZE = 100

_PLACEHOLDER = re.compile(r"\{[^{}]+\}")


def render_path(path: str, path_params: Optional[Mapping[str, str]] = None) -> str:
    """Substitute ``{name}`` placeholders with percent-escaped values.

    Raises:
        URLConstructionError: If a placeholder has no matching parameter
    """
    rendered = path
    for key, value in (path_params or {}).items():
        rendered = rendered.replace("{" + key + "}", quote(str(value), safe=""))

    leftover = _PLACEHOLDER.findall(rendered)
    if leftover:
        raise URLConstructionError(f"unmatched path parameters {leftover} in '{path}'")
    return rendered


def build_url(
    base_url: str,
    path: str,
    path_params: Optional[Mapping[str, str]] = None,
    query_params: Optional[Mapping[str, str]] = None,
    page_token: Optional[str] = None,
    page_size: Optional[int] = None,
) -> str:
    """Build an absolute request URL.

    Query order is ``token``, ``limit``, then endpoint-specific filters.

    Args:
        base_url: API base URL (e.g. https://api.sumologic.com)
        path: Path template such as ``/api/{api-version}/users/{user-id}``
        path_params: Placeholder values
        query_params: Endpoint-specific filters
        page_token: Continuation token; omitted when empty
        page_size: Page size for paged endpoints

    Returns:
        Absolute URL string

    Raises:
        URLConstructionError: Malformed base URL or unmatched placeholder
    """
    try:
        parts = urlsplit(base_url)
    except ValueError as exc:
        raise URLConstructionError(f"error parsing API base URL '{base_url}': {exc}") from exc
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise URLConstructionError(f"error parsing API base URL '{base_url}': scheme and host are required")

    full_path = parts.path.rstrip("/") + render_path(path, path_params)

    query: list[tuple[str, str]] = []
    if page_token:
        # Continuation token from the previous page's "next" field.
        query.append(("token", page_token))
    if page_size is not None:
        query.append(("limit", str(page_size)))
    for key, value in (query_params or {}).items():
        query.append((key, str(value)))

    query_string = "&".join(f"{quote(key, safe='')}={quote(value, safe='')}" for key, value in query)
    return urlunsplit((parts.scheme, parts.netloc, full_path, query_string, ""))
