"""
Shared fixtures.  Nothing here touches the network: the requests session and
the authenticator are mocks and canned responses are real requests.Response
objects so the normalization code sees what it would in production.
"""
import json
from unittest.mock import MagicMock

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from gwsrest.client import ApiClient


def make_response(status: int = 200, body=None, headers: dict|None = None,
                  url: str = "") -> requests.Response:
    r = requests.Response()
    r.status_code = status
    if body is None:
        r._content = b""
    elif isinstance(body, bytes):
        r._content = body
    elif isinstance(body, str):
        r._content = body.encode("utf-8")
    else:
        r._content = json.dumps(body).encode("utf-8")
    r.headers = CaseInsensitiveDict(headers if headers is not None else {"Content-Type": "application/json"})
    r.encoding = "utf-8"
    r.url = url
    return r


TEST_CONNECTION = {
    "api_scopes": ["s1"],
    "customer_id": "cust1",
    "domain": "dom1",
    "json_key_file_path": "/k.json",
}


@pytest.fixture
def named_config() -> dict:
    return {
        "default": {"connection": "test"},
        "connections": {
            "test": dict(TEST_CONNECTION),
            "other": {
                "api_scopes": ["directory.group", "gmail.readonly"],
                "customer_id": "C0ther",
                "domain": "other.example.com",
                "subject_email": "admin@other.example.com",
                "json_key": '{"type": "service_account"}',
                "log_channels": ["single", "workspace"],
            },
        },
    }


@pytest.fixture
def authenticator() -> MagicMock:
    a = MagicMock()
    a.authenticate.return_value = "test-token"
    return a


@pytest.fixture
def session() -> MagicMock:
    s = MagicMock()
    s.request.return_value = make_response(200, {})
    return s


@pytest.fixture
def client(named_config, authenticator, session) -> ApiClient:
    return ApiClient("test", config=named_config, authenticator=authenticator, session=session)
