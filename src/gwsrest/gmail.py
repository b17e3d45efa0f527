"""
Gmail API.
https://developers.google.com/gmail/api/reference/rest
Paths are per user, e.g. /users/me/messages, so the connection's subject_email
decides whose mailbox 'me' is.
"""
from .facade import WorkspaceResource


class Gmail(WorkspaceResource):
    BASE_URL = "https://gmail.googleapis.com/gmail/v1"
