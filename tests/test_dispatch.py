from unittest.mock import MagicMock

import pytest

from gwsrest.connection import validate_connection
from gwsrest.dispatch import RequestDispatcher, required_parameters, user_agent

from conftest import TEST_CONNECTION, make_response

URL = "https://admin.googleapis.com/admin/directory/v1/groups"


@pytest.fixture
def connection():
    return validate_connection(TEST_CONNECTION)


@pytest.fixture
def dispatcher(session):
    return RequestDispatcher(session, timeout=12.5)


def test_get_sends_query_params(dispatcher, session, connection):
    dispatcher.request("get", URL, {"maxResults": 10}, "tok", connection, ("domain", "customer"))
    args, kwargs = session.request.call_args
    assert(args == ("GET", URL))
    assert(kwargs["params"] == {"maxResults": 10, "domain": "dom1", "customer": "cust1"})
    assert("json" not in kwargs)
    assert(kwargs["timeout"] == 12.5)


def test_delete_sends_query_params(dispatcher, session, connection):
    dispatcher.request("DELETE", URL + "/g1", None, "tok", connection)
    args, kwargs = session.request.call_args
    assert(args[0] == "DELETE")
    assert(kwargs["params"] == {})


@pytest.mark.parametrize("verb", ["post", "put", "patch"])
def test_body_verbs_send_json(dispatcher, session, connection, verb):
    dispatcher.request(verb, URL, {"email": "g@dom1"}, "tok", connection, ("customerId",))
    args, kwargs = session.request.call_args
    assert(args[0] == verb.upper())
    assert(kwargs["json"] == {"email": "g@dom1", "customerId": "cust1"})
    assert("params" not in kwargs)


def test_required_parameters_win(dispatcher, session, connection):
    dispatcher.request("get", URL, {"domain": "evil.com", "customer": "x", "q": "a"},
                       "tok", connection, ("domain", "customer"))
    params = session.request.call_args.kwargs["params"]
    assert(params == {"domain": "dom1", "customer": "cust1", "q": "a"})


def test_headers(dispatcher, session, connection):
    dispatcher.request("get", URL, {}, "secret-token", connection)
    headers = session.request.call_args.kwargs["headers"]
    assert(headers["Authorization"] == "Bearer secret-token")
    assert(headers["User-Agent"] == user_agent())
    assert(headers["User-Agent"].startswith("gwsrest/"))
    assert(" python/" in headers["User-Agent"])


def test_returns_error_responses(connection):
    s = MagicMock()
    s.request.return_value = make_response(404, {"error": {"code": 404}})
    r = RequestDispatcher(s).request("get", URL, {}, "tok", connection)
    assert(r.status_code == 404)


def test_invalid_verb(dispatcher, connection):
    with pytest.raises(ValueError):
        dispatcher.request("head", URL, {}, "tok", connection)


def test_unknown_required_parameter(connection):
    with pytest.raises(ValueError):
        required_parameters(connection, ("tenant",))
