"""
Catalog error kinds.

Every failure the catalog can surface derives from ``CatalogError`` and
carries the HTTP status it is rendered with. Store failures other than a
missing record are reported as 404 as well, matching what clients of the
service have always observed.
"""

import logging


class CatalogError(Exception):
    """Base class for catalog failures."""

    http_status = 500
    log_level = logging.ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(CatalogError):
    """Chart, chart version or chart files record is absent."""

    http_status = 404
    log_level = logging.DEBUG


class StoreUnavailableError(CatalogError):
    """The document store failed for a reason other than a missing record."""

    http_status = 404
