"""Page-token and error helpers shared by the syncers."""
from __future__ import annotations

from typing import Optional

from ..exceptions import SyncError
from ..resources import Annotations
from ..sumologic.exceptions import SumoLogicError


def parse_page_token(page_token: Optional[str]) -> Optional[str]:
    """Host token → API token; an empty token means the start of the sequence."""
    return page_token or None


def next_page_token(token: Optional[str]) -> str:
    """API next token → host token; '' means there are no further pages."""
    return token or ""


def upstream_error(message: str, exc: SumoLogicError, annotations: Annotations) -> SyncError:
    """Wrap an API failure, keeping whatever rate limit came with it."""
    annotations.with_rate_limiting(exc.rate_limit)
    return SyncError(f"{message}: {exc}", annotations=annotations)
