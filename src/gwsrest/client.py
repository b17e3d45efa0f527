"""
The API client.

An ApiClient resolves one connection, authenticates once and then runs every
verb call through the same pipeline: dispatch, follow pagination for GETs,
normalize into an envelope, log.  Called directly it is a plain REST client
taking fully qualified URLs, the product facades (directory(), gmail(), ...)
share its connection and token and only add a base URL and required parameters.
"""
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

import requests
import structlog

from .access import Authenticator, ServiceAccountAccess
from .connection import ConnectionDescriptor, ConnectionResolver, load_config
from .dispatch import DEFAULT_TIMEOUT, RequestDispatcher, merge_parameters, required_parameters
from .errors import ConfigurationError
from .log import ResponseLogger
from .pagination import DEFAULT_MAX_PAGES, PaginationWalker, is_paginated
from .response import ResponseEnvelope, normalize

if TYPE_CHECKING:
    from .calendar import Calendar
    from .directory import Directory
    from .drive import Drive
    from .gmail import Gmail
    from .license_manager import LicenseManager
    from .sheets import Sheets
    from .vault import Vault

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ConnectionContext():
    """A resolved connection and the token obtained for it."""
    connection: ConnectionDescriptor
    token: str

    def __str__(self) -> str:
        return str(self.connection)


class ApiClient():
    """
    Entry point for calling Workspace APIs.

    connection_key names a connection in the config file, None meaning the
    configured default.  A non-empty connection_config dict takes precedence
    and is validated directly without looking at the config file.
    config is the already loaded named configuration, by default it is read
    with load_config().
    Construction raises ConfigurationError or AuthenticationError, after that
    every verb call returns a ResponseEnvelope, failed or not, unless
    raise_on_error is set.
    """

    def __init__(self, connection_key: str|None = None,
                 connection_config: Mapping|None = None,
                 config: Mapping|None = None,
                 authenticator: Authenticator|None = None,
                 session: requests.Session|None = None,
                 timeout: float|None = DEFAULT_TIMEOUT,
                 max_pages: int|None = DEFAULT_MAX_PAGES,
                 raise_on_error: bool = False) -> None:
        try:
            if config is None:
                config = {} if connection_config else load_config()
            self.resolver = ConnectionResolver(config)
            connection = self.resolver.resolve(connection_key, connection_config)
        except ConfigurationError as e:
            ResponseLogger(connection_key=e.connection_key or connection_key).log_config_error(str(e))
            raise
        logger.debug("connection_resolved", **connection.trim())
        self.logger = ResponseLogger(connection.log_channels, connection.key)
        self.authenticator = authenticator if authenticator is not None else ServiceAccountAccess()
        token = self.authenticator.authenticate(list(connection.api_scopes),
                                                connection.subject_email,
                                                connection.credential_source)
        self.context = ConnectionContext(connection, token)
        self.dispatcher = RequestDispatcher(session, timeout)
        self.max_pages = max_pages
        self.raise_on_error = raise_on_error

    def __str__(self) -> str:
        return str(self.context)

    def __repr__(self) -> str:
        return f"{str(self.__class__)}:{str(self)}"

    @property
    def connection(self) -> ConnectionDescriptor:
        return self.context.connection

    @property
    def connection_key(self) -> str|None:
        return self.context.connection.key

    def execute(self, method: str, url: str, params: Mapping|None = None,
                required: Iterable[str] = ()) -> ResponseEnvelope:
        """
        Run one verb call through the whole pipeline.
        required names the connection derived parameters to merge in.
        """
        verb = str(method).lower()
        token = self.context.token
        connection = self.context.connection
        required = tuple(required)
        response = self.dispatcher.request(verb, url, params, token, connection, required)
        paginated_results = None
        if verb == "get" and is_paginated(response):
            sent = merge_parameters(params, required_parameters(connection, required))
            walker = PaginationWalker(
                lambda u, p: self.dispatcher.request("get", u, p, token, connection),
                self.max_pages)
            paginated_results, failed_page = walker.collect(url, sent, response)
            if failed_page is not None:
                # the envelope reports the page that failed, not the first one
                response, paginated_results = failed_page, None
        envelope = normalize(response, paginated_results, method=verb, url=url)
        self.logger.log(verb, url, envelope)
        if self.raise_on_error:
            envelope.raise_for_status()
        return envelope

    def get(self, url: str, params: Mapping|None = None) -> ResponseEnvelope:
        return self.execute("get", url, params)

    def post(self, url: str, params: Mapping|None = None) -> ResponseEnvelope:
        return self.execute("post", url, params)

    def put(self, url: str, params: Mapping|None = None) -> ResponseEnvelope:
        return self.execute("put", url, params)

    def patch(self, url: str, params: Mapping|None = None) -> ResponseEnvelope:
        return self.execute("patch", url, params)

    def delete(self, url: str, params: Mapping|None = None) -> ResponseEnvelope:
        return self.execute("delete", url, params)

    # product facades, imported here as they import this module
    def directory(self) -> "Directory":
        from .directory import Directory
        return Directory(self)

    def calendar(self) -> "Calendar":
        from .calendar import Calendar
        return Calendar(self)

    def gmail(self) -> "Gmail":
        from .gmail import Gmail
        return Gmail(self)

    def drive(self) -> "Drive":
        from .drive import Drive
        return Drive(self)

    def sheets(self) -> "Sheets":
        from .sheets import Sheets
        return Sheets(self)

    def vault(self) -> "Vault":
        from .vault import Vault
        return Vault(self)

    def license_manager(self) -> "LicenseManager":
        from .license_manager import LicenseManager
        return LicenseManager(self)
