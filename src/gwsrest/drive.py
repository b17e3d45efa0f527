"""
Drive API.
https://developers.google.com/drive/api/reference/rest/v3
"""
from .facade import WorkspaceResource


class Drive(WorkspaceResource):
    BASE_URL = "https://www.googleapis.com/drive/v3"
