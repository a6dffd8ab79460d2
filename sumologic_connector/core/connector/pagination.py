"""Drive a paged listing from the first page to the last."""
from __future__ import annotations

from typing import Callable, Iterator, List

from ..exceptions import PaginationCycleError
from ..resources import ListPage, Resource


def paginate(fetch_page: Callable[[str], ListPage], start_token: str = "") -> Iterator[ListPage]:
    """Yield pages until the returned token is empty.

    Raises:
        PaginationCycleError: If a page token repeats
    """
    seen = {start_token}
    token = start_token
    while True:
        page = fetch_page(token)
        yield page
        token = page.next_page_token
        if not token:
            return
        if token in seen:
            raise PaginationCycleError(f"page token {token!r} was already visited", annotations=page.annotations)
        seen.add(token)


def collect_resources(fetch_page: Callable[[str], ListPage], start_token: str = "") -> List[Resource]:
    resources: List[Resource] = []
    for page in paginate(fetch_page, start_token):
        resources.extend(page.resources)
    return resources
