"""
Enterprise License Manager API, scoped to the Google-Apps product.
https://developers.google.com/admin-sdk/licensing/reference/rest
Every call carries customerId, e.g. get('/users') lists all assignments for
the connection's customer.
"""
from .facade import WorkspaceResource


class LicenseManager(WorkspaceResource):
    BASE_URL = "https://licensing.googleapis.com/apps/licensing/v1/product/Google-Apps"
    REQUIRED_PARAMETERS = ("customerId",)
