"""
Structured logging of API responses.

Each configured log channel gets its own structlog logger so an application
can route a connection's API traffic wherever it likes by logger name.
"""
from collections.abc import Iterable
import sys

import structlog

from .connection import DEFAULT_LOG_CHANNEL
from .response import ResponseEnvelope

INFO_EVENT = "google-api-response-info"
CLIENT_ERROR_EVENT = "google-api-response-client-error"
SERVER_ERROR_EVENT = "google-api-response-server-error"
CONFIG_MISSING_EVENT = "google-api-config-missing-error"


class ResponseLogger():
    """
    Routes responses to info, warning or error depending on the status.
    Logging must never get in the way of the request so a failing channel
    is reported on stderr and skipped.
    """

    def __init__(self, channels: Iterable[str] = (DEFAULT_LOG_CHANNEL,),
                 connection_key: str|None = None) -> None:
        self.channels = tuple(channels) or (DEFAULT_LOG_CHANNEL,)
        self.connection_key = connection_key

    def log(self, method: str, url: str, envelope: ResponseEnvelope) -> None:
        verb = str(method).upper()
        code = envelope.status.code
        if envelope.status.server_error:
            level, event_type = "error", SERVER_ERROR_EVENT
        elif envelope.status.client_error:
            level, event_type = "warning", CLIENT_ERROR_EVENT
        else:
            level, event_type = "info", INFO_EVENT
        message = f"{verb} {code} {url}"
        self._emit(level, message, event_type=event_type, method=verb, url=url,
                   status_code=code, message=message, connection_key=self.connection_key)

    def log_config_error(self, message: str, connection_key: str|None = None) -> None:
        self._emit("critical", message, event_type=CONFIG_MISSING_EVENT,
                   message=message, connection_key=connection_key or self.connection_key)

    def _emit(self, level: str, event: str, **kw) -> None:
        for c in self.channels:
            try:
                getattr(structlog.get_logger(c), level)(event, channel=c, **kw)
            except Exception as e:
                print(f"failed to write {level} log event to a gwsrest log channel: {e}",
                      file=sys.stderr)
