"""
Single HTTP calls against the Workspace REST APIs.

The dispatcher has no state of its own beyond the requests session, the
token and connection are handed in on every call.  Non-2xx responses are
returned like any other, classification happens when the envelope is built.
"""
from collections.abc import Iterable, Mapping
import platform

import requests

from . import __version__
from .connection import ConnectionDescriptor

VERBS = ("get", "post", "put", "patch", "delete")
# verbs whose parameters travel in the query string, the rest send a JSON body
QUERY_VERBS = ("get", "delete")
DEFAULT_TIMEOUT = 30.0


def user_agent() -> str:
    return (f"gwsrest/{__version__} python/{platform.python_version()} "
            f"requests/{requests.__version__}")


def required_parameters(connection: ConnectionDescriptor, names: Iterable[str]) -> dict[str, str]:
    """
    Map required parameter names onto their connection values.
    Directory and Calendar want domain and customer, License Manager wants customerId.
    """
    values = {
        'domain': connection.domain,
        'customer': connection.customer_id,
        'customerId': connection.customer_id,
    }
    params = {}
    for n in names:
        if n not in values:
            raise ValueError(f"Unknown required parameter: {n}")
        params[n] = values[n]
    return params


def merge_parameters(params: Mapping|None, required: Mapping) -> dict:
    """Caller parameters with the required ones laid over the top, required always wins."""
    merged = dict(params or {})
    merged.update(required)
    return merged


class RequestDispatcher():
    """Issues one verb call with the bearer token and standard headers attached."""

    def __init__(self, session: requests.Session|None = None,
                 timeout: float|None = DEFAULT_TIMEOUT) -> None:
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.headers = {'User-Agent': user_agent(), 'Accept': 'application/json'}

    def request(self, verb: str, url: str, params: Mapping|None, token: str,
                connection: ConnectionDescriptor, required: Iterable[str] = ()) -> requests.Response:
        """
        Send the request and return the raw response.
        Transport errors (timeouts, resets) come straight out of requests.
        """
        v = str(verb).lower()
        if v not in VERBS:
            raise ValueError(f"Invalid HTTP verb: {verb}")
        data = merge_parameters(params, required_parameters(connection, required))
        headers = dict(self.headers)
        headers['Authorization'] = f"Bearer {token}"
        kwargs = {'headers': headers, 'timeout': self.timeout}
        if v in QUERY_VERBS:
            kwargs['params'] = data
        else:
            kwargs['json'] = data
        return self.session.request(v.upper(), url, **kwargs)
