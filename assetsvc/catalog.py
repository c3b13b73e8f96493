"""
Catalog Query Engine

Resolves list and detail requests into store queries and renders the
results. Pure reads: every request issues its own store calls and nothing
is cached between requests.

Listing rules:
- ``size`` > 0 paginates; the page count comes from a separate count query.
  Unpaginated listings always report a single page.
- Filtering by name + version + appversion keeps one chart per name
  (first seen) unless duplicates are requested.
- ``chart_versions[0]`` is the latest version.
"""

import logging
import math
from typing import Dict, List, Optional, Tuple

from .errors import NotFoundError, StoreUnavailableError
from .models import Chart, chart_files_id
from .response import (
    DEFAULT_VALUES_NAME,
    DetailResponse,
    ListResponse,
    Meta,
    ResourceBuilder,
    values_name_for,
)
from .store.base import ChartFilesRepository, ChartQuery, ChartRepository

logger = logging.getLogger(__name__)


def parse_page_params(page: Optional[str], size: Optional[str]) -> Tuple[int, int]:
    """
    Lenient parsing of the ``page`` and ``size`` query parameters.

    A missing, non-numeric or non-positive size disables pagination (0).
    A missing, non-numeric or non-positive page is the first page.
    """
    try:
        parsed_size = int(size) if size is not None else 0
    except ValueError:
        parsed_size = 0
    try:
        parsed_page = int(page) if page is not None else 1
    except ValueError:
        parsed_page = 1
    return max(parsed_page, 1), max(parsed_size, 0)


def total_pages(count: int, size: int) -> int:
    if size <= 0:
        return 1
    return math.ceil(count / size)


def find_chart(charts: ChartRepository, namespace: str, repo: str, chart_name: str) -> Chart:
    """Look up ``<repo>/<chart_name>``; raises NotFoundError or StoreUnavailableError."""
    chart_id = f"{repo}/{chart_name}"
    try:
        return charts.find_one(namespace, chart_id)
    except NotFoundError:
        logger.debug(f"Chart {chart_id} not found in namespace {namespace}")
        raise
    except StoreUnavailableError as e:
        logger.error(f"Store error looking up chart {chart_id}: {e}")
        raise


def _matches_text(chart: Chart, text: str) -> bool:
    haystack = [chart.name, chart.description, chart.repo_name]
    haystack.extend(chart.keywords)
    haystack.extend(chart.sources)
    haystack.extend(m.name for m in chart.maintainers)
    return any(text in (field or "").lower() for field in haystack)


class CatalogService:
    """List and detail queries over charts and chart versions."""

    def __init__(
        self,
        charts: ChartRepository,
        files: ChartFilesRepository,
        builder: ResourceBuilder,
    ):
        self.charts = charts
        self.files = files
        self.builder = builder

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _values_name(self, namespace: str, chart: Chart, version: str) -> str:
        """Values file name for a version's link; falls back to values.yaml."""
        try:
            files = self.files.find_files(namespace, chart.repo_name, chart_files_id(chart.id, version))
        except NotFoundError:
            return DEFAULT_VALUES_NAME
        except StoreUnavailableError as e:
            logger.warning(f"Could not load files for {chart.id} {version}: {e}")
            return DEFAULT_VALUES_NAME
        return values_name_for(files)

    def _latest_values_names(self, namespace: str, charts: List[Chart]) -> Dict[str, str]:
        names = {}
        for chart in charts:
            latest = chart.latest_version()
            if latest is not None:
                names[chart.id] = self._values_name(namespace, chart, latest.version)
        return names

    def _chart_list(self, namespace: str, charts: List[Chart], pages: int = 1) -> ListResponse:
        names = self._latest_values_names(namespace, charts)
        return ListResponse(
            data=self.builder.chart_list(namespace, charts, names),
            meta=Meta(total_pages=pages),
        )

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    def list_charts(
        self,
        namespace: str,
        repo: Optional[str] = None,
        page: int = 1,
        size: int = 0,
    ) -> ListResponse:
        query = ChartQuery(namespace=namespace, repo=repo, page=page, size=size)
        charts = self.charts.find_all(query)
        pages = 1
        if query.paginated:
            pages = total_pages(self.charts.count(query.unpaged()), query.size)
        return self._chart_list(namespace, charts, pages)

    def list_charts_with_filters(
        self,
        namespace: str,
        name: str,
        version: str,
        app_version: str,
        show_duplicates: bool = False,
        repo: Optional[str] = None,
    ) -> ListResponse:
        """
        Charts named ``name`` that publish ``version`` with ``app_version``.

        The same chart name can be served by several repositories. Unless
        ``show_duplicates`` is set only the first one found is returned.
        """
        charts = self.charts.find_all(ChartQuery(namespace=namespace, repo=repo, name=name))
        selected: List[Chart] = []
        seen = set()
        for chart in charts:
            if chart.name != name:
                continue
            if not any(
                cv.version == version and cv.app_version == app_version
                for cv in chart.chart_versions
            ):
                continue
            if not show_duplicates and chart.name in seen:
                continue
            seen.add(chart.name)
            selected.append(chart)
        return self._chart_list(namespace, selected)

    def search_charts(self, namespace: str, text: str, repo: Optional[str] = None) -> ListResponse:
        """Case-insensitive match on name, description, keywords, sources and maintainers."""
        needle = text.strip().lower()
        charts = self.charts.find_all(ChartQuery(namespace=namespace, repo=repo))
        if needle:
            charts = [c for c in charts if _matches_text(c, needle)]
        return self._chart_list(namespace, charts)

    def get_chart(self, namespace: str, repo: str, chart_name: str) -> DetailResponse:
        chart = find_chart(self.charts, namespace, repo, chart_name)
        names = self._latest_values_names(namespace, [chart])
        return DetailResponse(
            data=self.builder.chart(namespace, chart, names.get(chart.id, DEFAULT_VALUES_NAME))
        )

    def list_chart_versions(self, namespace: str, repo: str, chart_name: str) -> ListResponse:
        chart = find_chart(self.charts, namespace, repo, chart_name)
        names = {
            cv.version: self._values_name(namespace, chart, cv.version)
            for cv in chart.chart_versions
        }
        return ListResponse(data=self.builder.chart_version_list(namespace, chart, names))

    def get_chart_version(self, namespace: str, repo: str, chart_name: str, version: str) -> DetailResponse:
        chart = find_chart(self.charts, namespace, repo, chart_name)
        chart_version = chart.find_version(version)
        if chart_version is None:
            raise NotFoundError(f"Version {version} of chart {chart.id} not found")
        values_name = self._values_name(namespace, chart, version)
        return DetailResponse(
            data=self.builder.chart_version(namespace, chart, chart_version, values_name)
        )
