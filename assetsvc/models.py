"""
Chart Catalog Models

Pydantic models for the records written by the chart ingestion pipeline.
The service only ever reads them.

- ``Chart`` keeps its versions newest-first: index 0 is the latest version.
- ``ChartFiles`` is keyed by ``<chart_id>-<version>`` and is correlated with
  its chart by id only.
"""

import base64
import binascii
import logging
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class Repo(BaseModel):
    """Chart repository a chart was indexed from."""
    name: str = Field(..., description="Repository name (first half of the chart id)")
    namespace: str = Field("", description="Namespace the repository belongs to")
    url: Optional[str] = Field(None, description="Repository index URL")


class Maintainer(BaseModel):
    name: str
    email: Optional[str] = None


class ChartVersion(BaseModel):
    """A single immutable release of a chart."""
    version: str = Field(..., description="Chart version (semver string)")
    app_version: str = Field("", description="Version of the packaged application")
    created: Optional[datetime] = Field(None, description="Release timestamp")
    digest: str = Field("", description="Content digest of the chart package")
    urls: List[str] = Field(default_factory=list, description="Package download URLs")


class ChartBase(BaseModel):
    """Chart fields that are safe to expose on the wire."""
    id: str = Field(..., description="Chart identifier: <repo>/<name>")
    name: str = ""
    repo: Optional[Repo] = None
    description: str = ""
    home: str = ""
    keywords: List[str] = Field(default_factory=list)
    maintainers: List[Maintainer] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list)
    icon: str = ""
    icon_content_type: str = ""
    category: str = ""
    chart_versions: List[ChartVersion] = Field(default_factory=list)

    @field_validator("keywords", "sources", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        """Documents written without these keys store null."""
        return v or []

    @property
    def repo_name(self) -> str:
        if self.repo is not None:
            return self.repo.name
        return self.id.split("/", 1)[0]

    @property
    def namespace(self) -> str:
        return self.repo.namespace if self.repo is not None else ""

    def latest_version(self) -> Optional[ChartVersion]:
        """Index 0 is the latest version by convention of the ingestion pipeline."""
        return self.chart_versions[0] if self.chart_versions else None

    def find_version(self, version: str) -> Optional[ChartVersion]:
        for cv in self.chart_versions:
            if cv.version == version:
                return cv
        return None


class Chart(ChartBase):
    """Stored chart record, including the raw icon bytes."""
    raw_icon: Optional[bytes] = Field(None, description="Icon bytes; never serialized in API responses")

    @field_validator("raw_icon", mode="before")
    @classmethod
    def decode_raw_icon(cls, v):
        """JSON documents carry the icon base64-encoded."""
        if isinstance(v, str):
            if not v:
                return None
            try:
                return base64.b64decode(v, validate=True)
            except (binascii.Error, ValueError):
                logger.warning(f"Discarding raw icon that is not valid base64 ({len(v)} chars)")
                return None
        return v

    @property
    def has_icon(self) -> bool:
        return bool(self.raw_icon)


class ValueFile(BaseModel):
    name: str
    content: str = ""


class ChartFiles(BaseModel):
    """Auxiliary text artifacts of one chart version."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="<chart_id>-<version>")
    repo: Optional[Repo] = None
    digest: str = ""
    readme: str = ""
    values: str = Field("", description="Legacy single values.yaml content")
    value_files: List[ValueFile] = Field(default_factory=list)
    json_schema: str = Field("", alias="schema", description="values.schema.json content")

    @field_validator("readme", "values", "json_schema", mode="before")
    @classmethod
    def none_to_blank(cls, v):
        return v or ""

    @field_validator("value_files", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return v or []

    def find_value_file(self, name: str) -> Optional[ValueFile]:
        for vf in self.value_files:
            if vf.name == name:
                return vf
        return None


def chart_files_id(chart_id: str, version: str) -> str:
    """Key of the ChartFiles record for one version of a chart."""
    return f"{chart_id}-{version}"
