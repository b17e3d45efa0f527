"""
Exceptions raised by gwsrest.

Configuration and authentication failures surface while a client is being
set up and are never retried.  API failures are only raised when a caller
asks for it, otherwise the failed envelope is simply returned.
"""
from typing import Optional


class GwsRestError(Exception):
    """Base for everything raised by this package."""


class ConfigurationError(GwsRestError):
    """
    A connection could not be resolved.
    The message names the offending field so it can be fixed in the config file
    or the inline configuration dict.
    """

    def __init__(self, message: str, field: Optional[str] = None,
                 connection_key: Optional[str] = None) -> None:
        self.field = field
        self.connection_key = connection_key
        super().__init__(message)


class AuthenticationError(GwsRestError):
    """
    Exchanging the service account key for a bearer token failed.
    Usually a bad key, a subject that the service account cannot impersonate,
    or scopes that have not been granted domain wide delegation.
    """

    def __init__(self, message: str, subject_email: Optional[str] = None) -> None:
        self.subject_email = subject_email
        super().__init__(message)


class ApiError(GwsRestError):
    """A non-2xx response that the caller asked to have raised."""

    def __init__(self, message: str, status_code: int, envelope=None) -> None:
        self.status_code = status_code
        self.envelope = envelope
        super().__init__(message)
