"""
Per product facades.

A facade is a base URL and a list of required parameters in front of an
ApiClient.  Build one from a client to share its token, or standalone from a
connection key or config dict which authenticates a new client.
"""
from collections.abc import Mapping

from .client import ApiClient
from .response import ResponseEnvelope


class WorkspaceResource():
    BASE_URL = ""
    REQUIRED_PARAMETERS: tuple[str, ...] = ()

    def __init__(self, client: ApiClient|None = None,
                 connection_key: str|None = None,
                 connection_config: Mapping|None = None,
                 **options) -> None:
        self.client = client if client is not None else ApiClient(connection_key, connection_config, **options)

    def __str__(self) -> str:
        return f"{self.BASE_URL}<{str(self.client)}>"

    def __repr__(self) -> str:
        return f"{str(self.__class__)}:{str(self)}"

    def url(self, uri: str) -> str:
        u = str(uri)
        if u and not u.startswith("/"):
            u = "/" + u
        return self.BASE_URL + u

    def _call(self, method: str, uri: str, params: Mapping|None,
              required: tuple[str, ...]) -> ResponseEnvelope:
        return self.client.execute(method, self.url(uri), params, required)

    def get(self, uri: str, params: Mapping|None = None) -> ResponseEnvelope:
        return self._call("get", uri, params, self.REQUIRED_PARAMETERS)

    def post(self, uri: str, params: Mapping|None = None) -> ResponseEnvelope:
        return self._call("post", uri, params, self.REQUIRED_PARAMETERS)

    def put(self, uri: str, params: Mapping|None = None) -> ResponseEnvelope:
        return self._call("put", uri, params, self.REQUIRED_PARAMETERS)

    def patch(self, uri: str, params: Mapping|None = None) -> ResponseEnvelope:
        return self._call("patch", uri, params, self.REQUIRED_PARAMETERS)

    def delete(self, uri: str, params: Mapping|None = None) -> ResponseEnvelope:
        return self._call("delete", uri, params, self.REQUIRED_PARAMETERS)


class DomainScopedResource(WorkspaceResource):
    """
    Facades whose calls carry domain and customer.
    Either can be left off per call for the methods that reject them.
    """
    REQUIRED_PARAMETERS = ("domain", "customer")

    def required(self, exclude_domain: bool = False, exclude_customer: bool = False) -> tuple[str, ...]:
        r = []
        if not exclude_domain:
            r.append("domain")
        if not exclude_customer:
            r.append("customer")
        return tuple(r)

    def get(self, uri: str, params: Mapping|None = None,
            exclude_domain: bool = False, exclude_customer: bool = False) -> ResponseEnvelope:
        return self._call("get", uri, params, self.required(exclude_domain, exclude_customer))

    def post(self, uri: str, params: Mapping|None = None,
             exclude_domain: bool = False, exclude_customer: bool = False) -> ResponseEnvelope:
        return self._call("post", uri, params, self.required(exclude_domain, exclude_customer))

    def put(self, uri: str, params: Mapping|None = None,
            exclude_domain: bool = False, exclude_customer: bool = False) -> ResponseEnvelope:
        return self._call("put", uri, params, self.required(exclude_domain, exclude_customer))

    def patch(self, uri: str, params: Mapping|None = None,
              exclude_domain: bool = False, exclude_customer: bool = False) -> ResponseEnvelope:
        return self._call("patch", uri, params, self.required(exclude_domain, exclude_customer))

    def delete(self, uri: str, params: Mapping|None = None,
               exclude_domain: bool = False, exclude_customer: bool = False) -> ResponseEnvelope:
        return self._call("delete", uri, params, self.required(exclude_domain, exclude_customer))
