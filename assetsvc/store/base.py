"""
Repository contracts for the document store.

Implementations raise NotFoundError when a record is absent and
StoreUnavailableError for any other failure. Each call is a single
round-trip to the store; nothing is retried.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models import Chart, ChartFiles


class ChartQuery(BaseModel):
    """Filter and page window for chart listings."""
    namespace: str
    repo: Optional[str] = None
    name: Optional[str] = None
    page: int = Field(1, ge=1)
    size: int = Field(0, ge=0, description="0 disables pagination")

    @property
    def paginated(self) -> bool:
        return self.size > 0

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size if self.paginated else 0

    def unpaged(self) -> "ChartQuery":
        """Same filter without the page window, as used for counting."""
        return self.model_copy(update={"page": 1, "size": 0})


class ChartRepository(ABC):
    """Read access to chart records."""

    @abstractmethod
    def find_one(self, namespace: str, chart_id: str) -> Chart:
        """Return the chart ``<repo>/<name>`` in ``namespace``."""

    @abstractmethod
    def find_all(self, query: ChartQuery) -> List[Chart]:
        """Return charts matching ``query`` ordered by name, then id."""

    @abstractmethod
    def count(self, query: ChartQuery) -> int:
        """Number of charts matching ``query`` ignoring its page window."""


class ChartFilesRepository(ABC):
    """Read access to chart files records."""

    @abstractmethod
    def find_files(self, namespace: str, repo_name: str, files_id: str) -> ChartFiles:
        """Return the files bundle keyed by ``<chart_id>-<version>``."""
