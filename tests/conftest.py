"""
Shared fixtures for the asset service tests.
"""

import os
import sys
from typing import List, Optional
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from fastapi.testclient import TestClient

from assetsvc.app import create_app
from assetsvc.config import Settings
from assetsvc.errors import NotFoundError
from assetsvc.models import Chart, ChartFiles, ChartVersion, Repo
from assetsvc.response import ResourceBuilder
from assetsvc.store import ChartFilesRepository, ChartRepository, InMemoryStore

NAMESPACE = "kubeapps-namespace"
PATH_PREFIX = "/v1"
TEST_REPO = Repo(name="my-repo", namespace=NAMESPACE)

TEST_CHART_README = "# Quickstart\n\n```bash\nhelm install my-repo/my-chart\n```"
TEST_CHART_VALUES = "image:\n  registry: docker.io\n  repository: my-repo/my-chart\n  tag: 0.1.0"
TEST_CHART_SCHEMA = '{"properties": {"type": "object"}}'
ICON_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"


def make_chart(
    chart_id: str,
    versions: Optional[List[str]] = None,
    app_version: str = "",
    repo: Optional[Repo] = None,
    **kwargs,
) -> Chart:
    """Chart ``<repo>/<name>`` with the given versions, newest first."""
    repo_name, name = chart_id.split("/", 1)
    if repo is None:
        repo = Repo(name=repo_name, namespace=NAMESPACE)
    return Chart(
        id=chart_id,
        name=kwargs.pop("name", name),
        repo=repo,
        chart_versions=[
            ChartVersion(version=v, app_version=app_version, digest=f"digest-{v}")
            for v in (versions or [])
        ],
        **kwargs,
    )


def make_files(chart_id: str, version: str, **kwargs) -> ChartFiles:
    repo_name = chart_id.split("/", 1)[0]
    return ChartFiles(
        id=f"{chart_id}-{version}",
        repo=Repo(name=repo_name, namespace=NAMESPACE),
        **kwargs,
    )


@pytest.fixture
def builder() -> ResourceBuilder:
    return ResourceBuilder(PATH_PREFIX)


@pytest.fixture
def charts_repo() -> MagicMock:
    """Chart repository mock; tests set return values / side effects."""
    return MagicMock(spec=ChartRepository)


@pytest.fixture
def files_repo() -> MagicMock:
    """Files repository mock; defaults to "no files recorded"."""
    repo = MagicMock(spec=ChartFilesRepository)
    repo.find_files.side_effect = NotFoundError("no files")
    return repo


@pytest.fixture
def settings() -> Settings:
    return Settings(store_backend="memory", path_prefix=PATH_PREFIX)


@pytest.fixture
def make_client(settings):
    """Build a TestClient over any store implementing both repositories."""
    def _make(store) -> TestClient:
        return TestClient(create_app(settings, store=store))
    return _make


@pytest.fixture
def memory_store() -> InMemoryStore:
    charts = [
        make_chart("my-repo/my-chart", ["0.1.0", "0.0.1"], raw_icon=ICON_BYTES, icon_content_type="image/svg"),
        make_chart("my-repo/dokuwiki", ["1.2.3", "1.2.2"]),
        make_chart("stable/drupal", ["1.2.3"]),
        make_chart("stable/wordpress", ["1.2.3"], description="Blogging platform", keywords=["blog"]),
    ]
    files = [
        make_files("my-repo/my-chart", "0.1.0", readme=TEST_CHART_README, values=TEST_CHART_VALUES, schema=TEST_CHART_SCHEMA),
        make_files("my-repo/dokuwiki", "1.2.3", value_files=[{"name": "values-production.yaml", "content": TEST_CHART_VALUES}]),
        make_files("stable/drupal", "1.2.3"),
    ]
    return InMemoryStore(charts, files)
