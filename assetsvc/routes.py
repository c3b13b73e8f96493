"""
Chart Catalog Router
====================
Namespace-scoped read-only endpoints, mounted under the API path prefix.

Endpoints:
- GET /ns/{namespace}/charts                     list, search (?q=) or filter (?name=&version=&appversion=)
- GET /ns/{namespace}/charts/{repo}              same, scoped to one repository
- GET /ns/{namespace}/charts/{repo}/{chart}      chart detail
- GET /ns/{namespace}/charts/{repo}/{chart}/versions
- GET /ns/{namespace}/charts/{repo}/{chart}/versions/{version}
- GET /ns/{namespace}/assets/{repo}/{chart}/logo
- GET /ns/{namespace}/assets/{repo}/{chart}/versions/{version}/README.md
- GET /ns/{namespace}/assets/{repo}/{chart}/versions/{version}/values/{values_name}
- GET /ns/{namespace}/assets/{repo}/{chart}/versions/{version}/values.schema.json
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, Response

from .assets import Asset, AssetService
from .catalog import CatalogService, parse_page_params
from .response import DetailResponse, ListResponse, render

router = APIRouter(tags=["charts"])


def get_catalog(request: Request) -> CatalogService:
    return request.app.state.catalog


def get_assets(request: Request) -> AssetService:
    return request.app.state.assets


def _asset_response(asset: Asset) -> Response:
    return Response(content=asset.content, media_type=asset.media_type)


def _list(
    catalog: CatalogService,
    namespace: str,
    repo: Optional[str],
    page: Optional[str],
    size: Optional[str],
    name: Optional[str],
    version: Optional[str],
    appversion: Optional[str],
    show_duplicates: Optional[str],
    q: Optional[str],
) -> JSONResponse:
    if q is not None and q.strip():
        return render(catalog.search_charts(namespace, q, repo=repo))
    if name is not None and version is not None and appversion is not None:
        return render(
            catalog.list_charts_with_filters(
                namespace,
                name=name,
                version=version,
                app_version=appversion,
                show_duplicates=(show_duplicates or "").lower() == "true",
                repo=repo,
            )
        )
    page_num, page_size = parse_page_params(page, size)
    return render(catalog.list_charts(namespace, repo=repo, page=page_num, size=page_size))


@router.get("/ns/{namespace}/charts", response_model=ListResponse)
def list_charts(
    namespace: str,
    page: Optional[str] = Query(None, description="Page number (1-based)"),
    size: Optional[str] = Query(None, description="Page size; absent or invalid disables pagination"),
    name: Optional[str] = Query(None, description="Chart name filter"),
    version: Optional[str] = Query(None, description="Chart version filter"),
    appversion: Optional[str] = Query(None, description="App version filter"),
    show_duplicates: Optional[str] = Query(None, alias="showDuplicates"),
    q: Optional[str] = Query(None, description="Free-text search"),
    catalog: CatalogService = Depends(get_catalog),
):
    """List charts in a namespace."""
    return _list(catalog, namespace, None, page, size, name, version, appversion, show_duplicates, q)


@router.get("/ns/{namespace}/charts/{repo}", response_model=ListResponse)
def list_repo_charts(
    namespace: str,
    repo: str,
    page: Optional[str] = Query(None),
    size: Optional[str] = Query(None),
    name: Optional[str] = Query(None),
    version: Optional[str] = Query(None),
    appversion: Optional[str] = Query(None),
    show_duplicates: Optional[str] = Query(None, alias="showDuplicates"),
    q: Optional[str] = Query(None),
    catalog: CatalogService = Depends(get_catalog),
):
    """List charts of one repository."""
    return _list(catalog, namespace, repo, page, size, name, version, appversion, show_duplicates, q)


@router.get("/ns/{namespace}/charts/{repo}/{chart_name}", response_model=DetailResponse)
def get_chart(namespace: str, repo: str, chart_name: str, catalog: CatalogService = Depends(get_catalog)):
    return render(catalog.get_chart(namespace, repo, chart_name))


@router.get("/ns/{namespace}/charts/{repo}/{chart_name}/versions", response_model=ListResponse)
def list_chart_versions(namespace: str, repo: str, chart_name: str, catalog: CatalogService = Depends(get_catalog)):
    return render(catalog.list_chart_versions(namespace, repo, chart_name))


@router.get("/ns/{namespace}/charts/{repo}/{chart_name}/versions/{version}", response_model=DetailResponse)
def get_chart_version(
    namespace: str,
    repo: str,
    chart_name: str,
    version: str,
    catalog: CatalogService = Depends(get_catalog),
):
    return render(catalog.get_chart_version(namespace, repo, chart_name, version))


@router.get("/ns/{namespace}/assets/{repo}/{chart_name}/logo")
def get_chart_icon(namespace: str, repo: str, chart_name: str, assets: AssetService = Depends(get_assets)):
    """Raw icon bytes with their recorded content type."""
    return _asset_response(assets.get_icon(namespace, repo, chart_name))


@router.get("/ns/{namespace}/assets/{repo}/{chart_name}/versions/{version}/README.md")
def get_chart_version_readme(
    namespace: str,
    repo: str,
    chart_name: str,
    version: str,
    assets: AssetService = Depends(get_assets),
):
    return _asset_response(assets.get_readme(namespace, repo, chart_name, version))


@router.get("/ns/{namespace}/assets/{repo}/{chart_name}/versions/{version}/values.schema.json")
def get_chart_version_schema(
    namespace: str,
    repo: str,
    chart_name: str,
    version: str,
    assets: AssetService = Depends(get_assets),
):
    return _asset_response(assets.get_schema(namespace, repo, chart_name, version))


@router.get("/ns/{namespace}/assets/{repo}/{chart_name}/versions/{version}/values/{values_name:path}")
def get_chart_version_values(
    namespace: str,
    repo: str,
    chart_name: str,
    version: str,
    values_name: str,
    assets: AssetService = Depends(get_assets),
):
    return _asset_response(assets.get_values(namespace, repo, chart_name, version, values_name))
