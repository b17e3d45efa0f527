"""
A connection and request layer over the Google Workspace REST APIs.

Connections (service account key, scopes, domain, customer ID) come from a
YAML config file or an inline dict.  Every product is called the same way,
get/post/put/patch/delete with a path and a dict of parameters, and every
call returns a ResponseEnvelope.  List responses are followed through all
their pages automatically.

    from gwsrest import ApiClient

    client = ApiClient("workspace")
    groups = client.directory().get("/groups")
    if groups:
        for g in groups.object["groups"]:
            print(g["email"])
"""
__version__ = "0.1.0"

from .errors import ApiError, AuthenticationError, ConfigurationError, GwsRestError
from .connection import (ConnectionDescriptor, ConnectionResolver, CredentialSource,
                         load_config)
from .access import Authenticator, ServiceAccountAccess
from .response import ResponseEnvelope, ResponseStatus, normalize
from .client import ApiClient, ConnectionContext
from .facade import DomainScopedResource, WorkspaceResource
from .directory import Directory
from .calendar import Calendar
from .gmail import Gmail
from .drive import Drive
from .sheets import Sheets
from .vault import Vault
from .license_manager import LicenseManager
