"""
Chart Asset Service
===================

Read-only catalog of Helm chart metadata served over HTTP.

This package does NOT:
- Ingest or sync chart repositories
- Write to the document store

This package ONLY:
- Lists and looks up charts and chart versions (paginated, filtered, deduplicated)
- Serves chart assets (icon, README, values files, JSON schema)

Version: assetsvc_v1
"""

from .models import (
    Repo,
    Maintainer,
    ChartVersion,
    Chart,
    ValueFile,
    ChartFiles,
)
from .errors import CatalogError, NotFoundError, StoreUnavailableError

__version__ = "assetsvc_v1"

__all__ = [
    "Repo",
    "Maintainer",
    "ChartVersion",
    "Chart",
    "ValueFile",
    "ChartFiles",
    "CatalogError",
    "NotFoundError",
    "StoreUnavailableError",
    "__version__",
]
