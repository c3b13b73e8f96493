"""
Chart asset retrieval.

Serves raw payloads rather than JSON envelopes. The owning chart is always
looked up first; a store error or a missing chart is a 404.

Absent content is handled per asset:
- icon, README: 404
- values, schema: 200 with an empty body (both are optional in a chart)
"""

import logging
from dataclasses import dataclass

from .catalog import find_chart
from .errors import NotFoundError
from .models import ChartFiles, chart_files_id
from .store.base import ChartFilesRepository, ChartRepository

logger = logging.getLogger(__name__)

DEFAULT_ICON_CONTENT_TYPE = "image/png"
README_CONTENT_TYPE = "text/markdown; charset=utf-8"
VALUES_CONTENT_TYPE = "application/yaml; charset=utf-8"
SCHEMA_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class Asset:
    content: bytes
    media_type: str


class AssetService:
    """Icon, README, values and schema lookups for a chart."""

    def __init__(self, charts: ChartRepository, files: ChartFilesRepository):
        self.charts = charts
        self.files = files

    def _version_files(self, namespace: str, repo: str, chart_name: str, version: str) -> ChartFiles:
        chart = find_chart(self.charts, namespace, repo, chart_name)
        return self.files.find_files(namespace, chart.repo_name, chart_files_id(chart.id, version))

    def get_icon(self, namespace: str, repo: str, chart_name: str) -> Asset:
        chart = find_chart(self.charts, namespace, repo, chart_name)
        if not chart.has_icon:
            raise NotFoundError(f"Chart {chart.id} has no icon")
        return Asset(
            content=chart.raw_icon,
            media_type=chart.icon_content_type or DEFAULT_ICON_CONTENT_TYPE,
        )

    def get_readme(self, namespace: str, repo: str, chart_name: str, version: str) -> Asset:
        files = self._version_files(namespace, repo, chart_name, version)
        if not files.readme:
            raise NotFoundError(f"README not found for {repo}/{chart_name} {version}")
        return Asset(content=files.readme.encode("utf-8"), media_type=README_CONTENT_TYPE)

    def get_values(
        self,
        namespace: str,
        repo: str,
        chart_name: str,
        version: str,
        values_name: str,
    ) -> Asset:
        """
        A named values file, else the legacy single values content whatever
        name was asked for, else an empty body.
        """
        files = self._version_files(namespace, repo, chart_name, version)
        value_file = files.find_value_file(values_name)
        if value_file is not None:
            content = value_file.content
        elif files.values:
            content = files.values
        else:
            logger.debug(f"No values for {repo}/{chart_name} {version}")
            content = ""
        return Asset(content=content.encode("utf-8"), media_type=VALUES_CONTENT_TYPE)

    def get_schema(self, namespace: str, repo: str, chart_name: str, version: str) -> Asset:
        files = self._version_files(namespace, repo, chart_name, version)
        return Asset(content=files.json_schema.encode("utf-8"), media_type=SCHEMA_CONTENT_TYPE)
