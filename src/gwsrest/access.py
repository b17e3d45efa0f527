"""
Bearer token acquisition for service accounts.

Google Workspace admin APIs are called with a service account that has been
granted domain wide delegation, optionally impersonating a user in the domain
(the subject).  See
https://developers.google.com/workspace/guides/create-credentials#service-account
for creating the key.  Everything here is a thin layer over google-auth.
"""
from collections.abc import Iterable
from typing import Protocol
import json

import google.auth.exceptions
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from .connection import CredentialSource
from .errors import AuthenticationError

_SCOPES = {
    "directory.user": "https://www.googleapis.com/auth/admin.directory.user",
    "directory.user-ro": "https://www.googleapis.com/auth/admin.directory.user.readonly",
    "directory.group": "https://www.googleapis.com/auth/admin.directory.group",
    "directory.group-ro": "https://www.googleapis.com/auth/admin.directory.group.readonly",
    "directory.group.member": "https://www.googleapis.com/auth/admin.directory.group.member",
    "directory.orgunit": "https://www.googleapis.com/auth/admin.directory.orgunit",
    "directory.domain-ro": "https://www.googleapis.com/auth/admin.directory.domain.readonly",
    "gmail": "https://mail.google.com/",
    "gmail.readonly": "https://www.googleapis.com/auth/gmail.readonly",
    "gmail.send": "https://www.googleapis.com/auth/gmail.send",
    "gmail.settings": "https://www.googleapis.com/auth/gmail.settings.basic",
    "calendar": "https://www.googleapis.com/auth/calendar",
    "calendar-ro": "https://www.googleapis.com/auth/calendar.readonly",
    "drive": "https://www.googleapis.com/auth/drive",
    "drive-ro": "https://www.googleapis.com/auth/drive.readonly",
    "drive-file": "https://www.googleapis.com/auth/drive.file",
    "sheets": "https://www.googleapis.com/auth/spreadsheets",
    "sheets-ro": "https://www.googleapis.com/auth/spreadsheets.readonly",
    "vault": "https://www.googleapis.com/auth/ediscovery",
    "vault-ro": "https://www.googleapis.com/auth/ediscovery.readonly",
    "licensing": "https://www.googleapis.com/auth/apps.licensing",
}
_SCOPE_URL_PREFIXES = ("https://www.googleapis.com/", "https://mail.google.com/")


def get_scope(scope: str) -> str:
    """
    Get a scope based on simplified label.
    A raw URL will also be expected and is returned as is.
    Anything else comes back empty.
    """
    s = str(scope)
    sc = _SCOPES.get(s, "")
    if not sc and s.startswith(_SCOPE_URL_PREFIXES):
        sc = s
    return sc


def expand_scopes(scopes: Iterable[str]) -> list[str]:
    """
    Labels are swapped for their URL, unknown values are passed through so
    Google gets to reject them rather than us silently dropping a scope.
    """
    expanded = []
    for s in scopes:
        url = get_scope(s) or str(s)
        if url not in expanded:
            expanded.append(url)
    return expanded


class Authenticator(Protocol):
    """Anything that can turn a service account key into a bearer token."""

    def authenticate(self, scopes: list[str], subject_email: str|None,
                     credential_source: CredentialSource) -> str:
        ...


class ServiceAccountAccess():
    """
    Authenticated access for a single service account key.
    Credentials are kept after the first exchange and only refreshed once
    google-auth says they are no longer valid, so one instance can hand out
    the same token to every facade built from a client.
    """

    def __init__(self) -> None:
        self.clear()

    def __bool__(self) -> bool:
        """True is we are connected and authenticated"""
        return self.connected

    def __str__(self) -> str:
        if self.connected:
            return f"Connected:{str(self.session_scopes)}"
        return "Disconnected"

    def __repr__(self) -> str:
        return f"{str(self.__class__)}:{str(self)}"

    def clear(self) -> None:
        """Reset the access state."""
        self.__creds = None
        self.__identity = None
        self.__request = None

    @property
    def connected(self) -> bool:
        return bool(self.__creds) and bool(self.__creds.valid)

    @property
    def session_scopes(self) -> list[str]:
        if self.connected:
            return list(self.__creds.scopes or [])
        return []

    @property
    def creds(self) -> service_account.Credentials|None:
        return self.__creds

    @property
    def token(self) -> str|None:
        return self.__creds.token if self.connected else None

    def authenticate(self, scopes: list[str], subject_email: str|None,
                     credential_source: CredentialSource) -> str:
        """
        Build the service account credentials from the key file or the inline
        key content, impersonate the subject if there is one and refresh to get
        a token.  Anything that goes wrong on the way is an AuthenticationError.
        """
        requested_scopes = expand_scopes(scopes)
        identity = (tuple(requested_scopes), subject_email, credential_source)
        if self.connected and identity == self.__identity:
            return self.__creds.token
        try:
            creds = self._load(requested_scopes, credential_source)
            if subject_email:
                creds = creds.with_subject(subject_email)
            if self.__request is None:
                self.__request = Request()
            creds.refresh(self.__request)
        except (OSError, ValueError, google.auth.exceptions.GoogleAuthError) as e:
            self.clear()
            raise AuthenticationError(
                f"Failed to authenticate service account "
                f"({credential_source.describe()}): {e}",
                subject_email=subject_email) from e
        self.__creds = creds
        self.__identity = identity
        return creds.token

    @staticmethod
    def _load(scopes: list[str], credential_source: CredentialSource) -> service_account.Credentials:
        if credential_source.json_key_file_path:
            return service_account.Credentials.from_service_account_file(
                credential_source.json_key_file_path, scopes=scopes)
        # json.JSONDecodeError is a ValueError so a garbled key lands in the same place
        info = json.loads(credential_source.json_key)
        return service_account.Credentials.from_service_account_info(info, scopes=scopes)
