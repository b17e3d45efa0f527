"""
Cursor pagination for list endpoints.

Google list methods return at most one page of results along with a
nextPageToken.  The walker keeps asking for the next page with pageToken set
until a page comes back without a token and merges everything into one result.
"""
from collections.abc import Callable, Mapping
from typing import Any

import requests
import structlog

from .response import ResponseStatus, parse_body

logger = structlog.get_logger(__name__)

NEXT_PAGE_TOKEN = "nextPageToken"
PAGE_TOKEN = "pageToken"
# bookkeeping fields that only describe a single page
PAGE_FIELDS = ("kind", "etag", NEXT_PAGE_TOKEN)
DEFAULT_MAX_PAGES = 1000


def next_page_token(body: Any) -> str|None:
    if isinstance(body, Mapping):
        token = body.get(NEXT_PAGE_TOKEN)
        if token:
            return str(token)
    return None


def is_paginated(response: requests.Response) -> bool:
    """A response is paginated iff its body carries a nextPageToken."""
    return next_page_token(parse_body(response)) is not None


def page_records(body: Any) -> dict[str, Any]:
    """The substantive fields of one page, bookkeeping stripped."""
    if not isinstance(body, Mapping):
        return {}
    return {k: v for k, v in body.items() if k not in PAGE_FIELDS}


def merge_page(aggregate: dict[str, Any], body: Any) -> dict[str, Any]:
    """
    Append one page onto the aggregate.
    List fields are concatenated in page order, anything else is a per page
    value (resultSizeEstimate and friends) and the latest page wins.
    """
    for k, v in page_records(body).items():
        if isinstance(v, list):
            existing = aggregate.get(k)
            if isinstance(existing, list):
                existing.extend(v)
            else:
                aggregate[k] = list(v)
        else:
            aggregate[k] = v
    return aggregate


class PaginationWalker():
    """
    Follows nextPageToken for one GET request.
    fetch is called as fetch(uri, params) and must return the next page's
    response; the client binds it to the dispatcher with its token.
    Pages are fetched one after another since each token depends on the page
    before it.
    """

    def __init__(self, fetch: Callable[[str, dict], requests.Response],
                 max_pages: int|None = DEFAULT_MAX_PAGES) -> None:
        self._fetch = fetch
        self.max_pages = max_pages

    def collect(self, uri: str, params: Mapping|None,
                first_response: requests.Response) -> tuple[dict[str, Any], requests.Response|None]:
        """
        Merge the first page and every following page into one dict.
        params are the parameters the first page was requested with, they
        are reused for every page with only pageToken changing.
        Paging stops at the first page that comes back failed.  That page's
        response is returned alongside what was merged before it so the
        caller can report it, otherwise the second item is None.
        """
        body = parse_body(first_response)
        aggregate = merge_page({}, body)
        token = next_page_token(body)
        pages = 1
        while token:
            if self.max_pages is not None and pages >= self.max_pages:
                logger.warning("pagination_limit_reached", url=uri, pages=pages,
                               max_pages=self.max_pages)
                break
            page_params = dict(params or {})
            page_params[PAGE_TOKEN] = token
            response = self._fetch(uri, page_params)
            pages += 1
            if ResponseStatus.from_code(response.status_code).failed:
                logger.warning("pagination_page_failed", url=uri, page=pages,
                               status_code=response.status_code)
                return aggregate, response
            body = parse_body(response)
            merge_page(aggregate, body)
            token = next_page_token(body)
        return aggregate, None
