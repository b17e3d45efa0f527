"""
Calendar API.
https://developers.google.com/calendar/api/v3/reference
Shares the Directory calling convention of merging domain and customer.
"""
from .facade import DomainScopedResource


class Calendar(DomainScopedResource):
    BASE_URL = "https://www.googleapis.com/calendar/v3"
