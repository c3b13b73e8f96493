"""
In-memory chart store.

Holds charts and chart files in plain lists. Used for local development
(seeded from a JSON file) and as the store behind the test suite.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from ..errors import NotFoundError, StoreUnavailableError
from ..models import Chart, ChartFiles
from .base import ChartQuery, ChartRepository, ChartFilesRepository

logger = logging.getLogger(__name__)


class InMemoryStore(ChartRepository, ChartFilesRepository):
    """Both repositories backed by lists; records are never mutated after load."""

    def __init__(
        self,
        charts: Optional[Iterable[Chart]] = None,
        files: Optional[Iterable[ChartFiles]] = None,
    ):
        self._charts: List[Chart] = list(charts or [])
        self._files: List[ChartFiles] = list(files or [])

    @classmethod
    def from_file(cls, path: str) -> "InMemoryStore":
        """
        Load a seed file of the form ``{"charts": [...], "files": [...]}``.

        Raises StoreUnavailableError when the file is missing or malformed.
        """
        seed_path = Path(path)
        try:
            with seed_path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
            charts = [Chart.model_validate(c) for c in raw.get("charts", [])]
            files = [ChartFiles.model_validate(f) for f in raw.get("files", [])]
        except (OSError, ValueError, AttributeError) as e:
            raise StoreUnavailableError(f"Cannot load seed file {seed_path}: {e}") from e
        logger.info(f"Loaded {len(charts)} charts and {len(files)} chart files from {seed_path}")
        return cls(charts, files)

    def _matching(self, query: ChartQuery) -> List[Chart]:
        items = [c for c in self._charts if c.namespace == query.namespace]
        if query.repo:
            items = [c for c in items if c.repo_name == query.repo]
        if query.name:
            items = [c for c in items if c.name == query.name]
        items.sort(key=lambda c: (c.name, c.id))
        return items

    def find_one(self, namespace: str, chart_id: str) -> Chart:
        for chart in self._charts:
            if chart.id == chart_id and chart.namespace == namespace:
                return chart
        raise NotFoundError(f"Chart {chart_id} not found in namespace {namespace}")

    def find_all(self, query: ChartQuery) -> List[Chart]:
        items = self._matching(query)
        if query.paginated:
            return items[query.offset:query.offset + query.size]
        return items

    def count(self, query: ChartQuery) -> int:
        return len(self._matching(query))

    def find_files(self, namespace: str, repo_name: str, files_id: str) -> ChartFiles:
        for files in self._files:
            if files.id != files_id:
                continue
            # Files written without a repo are matched on id alone.
            if files.repo is None or (files.repo.name == repo_name and files.repo.namespace == namespace):
                return files
        raise NotFoundError(f"Files {files_id} not found in namespace {namespace}")
