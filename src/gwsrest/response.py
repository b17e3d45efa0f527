"""
The uniform response envelope.

Every verb call, successful or not, comes back as a ResponseEnvelope so that
callers can inspect failures programmatically.  Raising is opt in through
ResponseEnvelope.raise_for_status().
"""
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
import json

import requests

from .errors import ApiError
from .resources import WorkspaceRecord


@dataclass(frozen=True)
class ResponseStatus(WorkspaceRecord):
    """
    Classification flags derived from the status code.
    Note ok is strictly 200, so a 204 No Content is successful but not ok.
    """
    code: int
    ok: bool
    successful: bool
    failed: bool
    server_error: bool
    client_error: bool

    @classmethod
    def from_code(cls, code: int) -> "ResponseStatus":
        c = int(code)
        successful = 200 <= c < 300
        return cls(code=c,
                   ok=c == 200,
                   successful=successful,
                   failed=not successful,
                   server_error=500 <= c < 600,
                   client_error=400 <= c < 500)

    def __bool__(self) -> bool:
        return self.successful

    def __str__(self) -> str:
        return str(self.code)


@dataclass
class ResponseEnvelope(WorkspaceRecord):
    """
    headers: header name to value, multiple values joined with a space
    raw_body: the body as received, or the paginated aggregate serialized to JSON
    object: parsed body, the paginated aggregate, or None for an empty body
    method, url: the call the envelope answers, kept for messages and logs
    """
    headers: dict[str, str] = field(default_factory=dict)
    raw_body: str = ""
    object: Any = None
    status: ResponseStatus = field(default_factory=lambda: ResponseStatus.from_code(0))
    method: str = ""
    url: str = ""

    def __bool__(self) -> bool:
        return self.status.successful

    def __str__(self) -> str:
        return f"{self.method.upper()} {self.status.code} {self.url}".strip()

    def __repr__(self) -> str:
        return f"{str(self.__class__)}:{str(self)}"

    @property
    def error_description(self) -> str|None:
        """
        Pull a human readable error out of the body.
        OAuth style errors carry error_description, the REST APIs nest a message
        under error.
        """
        o = self.object
        if not isinstance(o, Mapping) or 'error' not in o:
            return None
        if o.get('error_description'):
            return str(o['error_description'])
        err = o['error']
        if isinstance(err, Mapping):
            return str(err.get('message', '')) or None
        return str(err) if err else None

    def raise_for_status(self) -> "ResponseEnvelope":
        """Raise an ApiError if the request failed, otherwise hand back self."""
        if self.status.successful:
            return self
        verb = self.method.upper()
        description = self.error_description
        if description is not None:
            raise ApiError(f"Google Workspace {verb} SDK Error. {description}",
                           status_code=self.status.code, envelope=self)
        raise ApiError(f"The Google Workspace SDK failed due to an unknown reason in the {verb} method.",
                       status_code=500, envelope=self)


def flatten_headers(response: requests.Response) -> dict[str, str]:
    """
    requests already folds repeated headers with a comma, so go back to the
    urllib3 headers where they are still available to join them with a space.
    """
    raw = getattr(getattr(response, 'raw', None), 'headers', None)
    if raw is not None and hasattr(raw, 'getlist'):
        headers = {}
        for name in raw.keys():
            if name not in headers:
                headers[name] = " ".join(str(v) for v in raw.getlist(name))
        return headers
    return {k: " ".join(v) if isinstance(v, (list, tuple)) else str(v)
            for k, v in response.headers.items()}


def parse_body(response: requests.Response) -> Any:
    """Parsed JSON body, None for an empty, null or non JSON body."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def normalize(response: requests.Response, paginated_results: Mapping|None = None,
              method: str = "", url: str = "") -> ResponseEnvelope:
    """
    Convert a transport response into the envelope.
    When the request was paginated the merged aggregate replaces both the parsed
    object and the raw body, headers and status always come from the first page.
    """
    if paginated_results is not None:
        obj = dict(paginated_results)
        raw_body = json.dumps(obj)
    else:
        obj = parse_body(response)
        raw_body = response.text if response.content else ""
    return ResponseEnvelope(headers=flatten_headers(response),
                            raw_body=raw_body,
                            object=obj,
                            status=ResponseStatus.from_code(response.status_code),
                            method=method.lower(),
                            url=url or str(getattr(response, 'url', '') or ''))
