"""
Sheets API.
https://developers.google.com/sheets/api/reference/rest
"""
from .facade import WorkspaceResource


class Sheets(WorkspaceResource):
    BASE_URL = "https://sheets.googleapis.com/v4"
