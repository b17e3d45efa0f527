"""
Vault API.
https://developers.google.com/vault/reference/rest
"""
from .facade import WorkspaceResource


class Vault(WorkspaceResource):
    BASE_URL = "https://vault.googleapis.com/v1"
