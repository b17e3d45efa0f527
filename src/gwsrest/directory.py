"""
Admin SDK Directory API.
https://developers.google.com/admin-sdk/directory/reference/rest
Most list methods want either domain or customer, some reject having both,
so each call can exclude one of them.
"""
from .facade import DomainScopedResource


class Directory(DomainScopedResource):
    BASE_URL = "https://admin.googleapis.com/admin/directory/v1"
