"""
Wire representation of catalog records.

Every resource is rendered as::

    {"type": ..., "id": ..., "attributes": {...},
     "relationships": {<name>: {"data": ...}}, "links": {"self": ...}}

and wrapped in ``{"data": ..., "meta": {"totalPages": n}}`` envelopes.
Nothing in this module performs I/O: callers resolve whatever store data
a resource needs (e.g. the values file name) and pass it in.
"""

from typing import Dict, List, Mapping, Optional, Union

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .models import Chart, ChartBase, ChartFiles, ChartVersion

CHART_TYPE = "chart"
CHART_VERSION_TYPE = "chartVersion"
DEFAULT_VALUES_NAME = "values.yaml"


class ChartAttributes(ChartBase):
    """A chart as exposed on the wire: no raw icon, icon replaced by its asset URL."""


class ChartVersionAttributes(ChartVersion):
    """A chart version plus the asset URLs of its files."""

    model_config = ConfigDict(populate_by_name=True)

    readme: str = ""
    values: str = ""
    values_schema: str = Field("", alias="schema")


class SelfLink(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    self_link: str = Field(..., alias="self")


class RelationshipData(BaseModel):
    data: Optional[Union[ChartVersionAttributes, ChartAttributes]] = None


class Resource(BaseModel):
    type: str
    id: str
    attributes: Union[ChartAttributes, ChartVersionAttributes]
    relationships: Dict[str, RelationshipData] = Field(default_factory=dict)
    links: SelfLink


class Meta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_pages: int = Field(1, alias="totalPages")


class ListResponse(BaseModel):
    data: List[Resource] = Field(default_factory=list)
    meta: Meta = Field(default_factory=Meta)


class DetailResponse(BaseModel):
    data: Resource


def render(envelope: BaseModel, status_code: int = 200) -> JSONResponse:
    """Serialize an envelope with its wire field names."""
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json", by_alias=True),
    )


def values_name_for(files: Optional[ChartFiles]) -> str:
    """Name under which a version's values are served: first named file wins."""
    if files is not None and files.value_files:
        return files.value_files[0].name
    return DEFAULT_VALUES_NAME


class ResourceBuilder:
    """Builds resources whose links live under ``<prefix>/ns/<namespace>``."""

    def __init__(self, path_prefix: str):
        self.path_prefix = path_prefix

    def _ns(self, namespace: str) -> str:
        return f"{self.path_prefix}/ns/{namespace}"

    def chart_link(self, namespace: str, chart_id: str) -> str:
        return f"{self._ns(namespace)}/charts/{chart_id}"

    def chart_version_link(self, namespace: str, chart_id: str, version: str) -> str:
        return f"{self.chart_link(namespace, chart_id)}/versions/{version}"

    def icon_url(self, namespace: str, chart_id: str) -> str:
        return f"{self._ns(namespace)}/assets/{chart_id}/logo"

    def version_assets_path(self, namespace: str, chart_id: str, version: str) -> str:
        return f"{self._ns(namespace)}/assets/{chart_id}/versions/{version}"

    def chart_attributes(self, namespace: str, chart: Chart) -> ChartAttributes:
        data = chart.model_dump(exclude={"raw_icon"})
        data["icon"] = self.icon_url(namespace, chart.id) if chart.has_icon else ""
        if not chart.has_icon:
            data["icon_content_type"] = ""
        return ChartAttributes.model_validate(data)

    def chart_version_attributes(
        self,
        namespace: str,
        chart_id: str,
        chart_version: ChartVersion,
        values_name: str = DEFAULT_VALUES_NAME,
    ) -> ChartVersionAttributes:
        base = self.version_assets_path(namespace, chart_id, chart_version.version)
        return ChartVersionAttributes(
            **chart_version.model_dump(),
            readme=f"{base}/README.md",
            values=f"{base}/values/{values_name}",
            values_schema=f"{base}/values.schema.json",
        )

    def chart(self, namespace: str, chart: Chart, latest_values_name: str = DEFAULT_VALUES_NAME) -> Resource:
        latest = chart.latest_version()
        latest_data = None
        if latest is not None:
            latest_data = self.chart_version_attributes(namespace, chart.id, latest, latest_values_name)
        return Resource(
            type=CHART_TYPE,
            id=chart.id,
            attributes=self.chart_attributes(namespace, chart),
            relationships={"latestChartVersion": RelationshipData(data=latest_data)},
            links=SelfLink(self_link=self.chart_link(namespace, chart.id)),
        )

    def chart_list(
        self,
        namespace: str,
        charts: List[Chart],
        latest_values_names: Optional[Mapping[str, str]] = None,
    ) -> List[Resource]:
        names = latest_values_names or {}
        return [
            self.chart(namespace, c, names.get(c.id, DEFAULT_VALUES_NAME))
            for c in charts
        ]

    def chart_version(
        self,
        namespace: str,
        chart: Chart,
        chart_version: ChartVersion,
        values_name: str = DEFAULT_VALUES_NAME,
    ) -> Resource:
        parent = self.chart_attributes(namespace, chart).model_copy(update={"chart_versions": []})
        return Resource(
            type=CHART_VERSION_TYPE,
            id=f"{chart.id}-{chart_version.version}",
            attributes=self.chart_version_attributes(namespace, chart.id, chart_version, values_name),
            relationships={"chart": RelationshipData(data=parent)},
            links=SelfLink(self_link=self.chart_version_link(namespace, chart.id, chart_version.version)),
        )

    def chart_version_list(
        self,
        namespace: str,
        chart: Chart,
        values_names: Optional[Mapping[str, str]] = None,
    ) -> List[Resource]:
        names = values_names or {}
        return [
            self.chart_version(namespace, chart, cv, names.get(cv.version, DEFAULT_VALUES_NAME))
            for cv in chart.chart_versions
        ]
