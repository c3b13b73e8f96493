"""
Catalog Query Engine Tests

- Unpaginated listings report one page and never count
- Paginated listings count once and report ceil(total / size) pages
- Name/version/appversion filtering deduplicates by chart name
- Lookups hit the store exactly once when the chart is missing
"""

import pytest

from conftest import NAMESPACE, make_chart, make_files
from assetsvc.catalog import CatalogService, parse_page_params, total_pages
from assetsvc.errors import NotFoundError, StoreUnavailableError


@pytest.fixture
def catalog(charts_repo, files_repo, builder) -> CatalogService:
    return CatalogService(charts_repo, files_repo, builder)


class TestPageParams:
    """Tests for lenient pagination parsing."""

    @pytest.mark.parametrize("page,size,expected", [
        (None, None, (1, 0)),
        (None, "2", (1, 2)),
        ("3", "10", (3, 10)),
        (None, "0", (1, 0)),
        (None, "-5", (1, 0)),
        (None, "ten", (1, 0)),
        ("zero", "2", (1, 2)),
        ("-1", "2", (1, 2)),
    ])
    def test_parse(self, page, size, expected):
        assert parse_page_params(page, size) == expected

    @pytest.mark.parametrize("count,size,expected", [
        (4, 2, 2),
        (5, 2, 3),
        (0, 2, 0),
        (7, 0, 1),
    ])
    def test_total_pages(self, count, size, expected):
        assert total_pages(count, size) == expected


class TestListCharts:
    """Tests for chart listings."""

    def test_no_charts(self, catalog, charts_repo):
        charts_repo.find_all.return_value = []

        result = catalog.list_charts(NAMESPACE)

        assert result.data == []
        assert result.meta.total_pages == 1
        charts_repo.count.assert_not_called()

    def test_unpaginated_reports_single_page(self, catalog, charts_repo):
        charts_repo.find_all.return_value = [
            make_chart("my-repo/my-chart", ["0.0.1"]),
            make_chart("stable/dokuwiki", ["1.2.3", "1.2.2"]),
        ]

        result = catalog.list_charts(NAMESPACE)

        assert [r.id for r in result.data] == ["my-repo/my-chart", "stable/dokuwiki"]
        assert result.data[1].relationships["latestChartVersion"].data.version == "1.2.3"
        assert result.meta.total_pages == 1
        charts_repo.count.assert_not_called()

    def test_paginated_counts_total(self, catalog, charts_repo):
        charts_repo.find_all.return_value = [
            make_chart("my-repo/my-chart", ["0.0.1"]),
            make_chart("stable/dokuwiki", ["1.2.3"]),
        ]
        charts_repo.count.return_value = 4

        result = catalog.list_charts(NAMESPACE, page=1, size=2)

        assert result.meta.total_pages == 2
        query = charts_repo.find_all.call_args.args[0]
        assert (query.namespace, query.repo, query.page, query.size) == (NAMESPACE, None, 1, 2)
        counted = charts_repo.count.call_args.args[0]
        assert counted.size == 0
        charts_repo.count.assert_called_once()

    def test_repo_scope_passed_to_store(self, catalog, charts_repo):
        charts_repo.find_all.return_value = []

        catalog.list_charts(NAMESPACE, repo="my-repo")

        query = charts_repo.find_all.call_args.args[0]
        assert query.repo == "my-repo"
        assert query.namespace == NAMESPACE

    def test_latest_version_links_use_named_values_file(self, catalog, charts_repo, files_repo):
        charts_repo.find_all.return_value = [make_chart("my-repo/my-chart", ["0.1.0"])]
        files_repo.find_files.side_effect = None
        files_repo.find_files.return_value = make_files(
            "my-repo/my-chart", "0.1.0", value_files=[{"name": "values-test.yaml", "content": "x"}]
        )

        result = catalog.list_charts(NAMESPACE)

        latest = result.data[0].relationships["latestChartVersion"].data
        assert latest.values.endswith("/versions/0.1.0/values/values-test.yaml")
        files_repo.find_files.assert_called_once_with(NAMESPACE, "my-repo", "my-repo/my-chart-0.1.0")

    def test_files_store_error_falls_back_to_default_values_name(self, catalog, charts_repo, files_repo):
        charts_repo.find_all.return_value = [make_chart("my-repo/my-chart", ["0.1.0"])]
        files_repo.find_files.side_effect = StoreUnavailableError("connection reset")

        result = catalog.list_charts(NAMESPACE)

        latest = result.data[0].relationships["latestChartVersion"].data
        assert latest.values.endswith("/values/values.yaml")

    def test_chart_without_versions_skips_files_lookup(self, catalog, charts_repo, files_repo):
        charts_repo.find_all.return_value = [make_chart("my-repo/empty", [])]

        result = catalog.list_charts(NAMESPACE)

        assert result.data[0].relationships["latestChartVersion"].data is None
        files_repo.find_files.assert_not_called()


class TestListChartsWithFilters:
    """Tests for name/version/appversion filtering and deduplication."""

    def _duplicated(self):
        return [
            make_chart("stable/foo", ["1.0.0"], app_version="0.1.0"),
            make_chart("bitnami/foo", ["1.0.0"], app_version="0.1.0"),
        ]

    def test_returns_matching_chart(self, catalog, charts_repo):
        charts_repo.find_all.return_value = [
            make_chart("bar/foo", ["1.0.0", "0.0.1"], app_version="0.1.0"),
        ]

        result = catalog.list_charts_with_filters(NAMESPACE, "foo", "1.0.0", "0.1.0")

        assert [r.id for r in result.data] == ["bar/foo"]
        assert result.meta.total_pages == 1
        assert charts_repo.find_all.call_args.args[0].name == "foo"

    def test_ignores_duplicated_chart(self, catalog, charts_repo):
        charts_repo.find_all.return_value = self._duplicated()

        result = catalog.list_charts_with_filters(NAMESPACE, "foo", "1.0.0", "0.1.0")

        assert len(result.data) == 1
        assert result.data[0].id == "stable/foo"

    def test_includes_duplicates_when_requested(self, catalog, charts_repo):
        charts_repo.find_all.return_value = self._duplicated()

        result = catalog.list_charts_with_filters(NAMESPACE, "foo", "1.0.0", "0.1.0", show_duplicates=True)

        assert [r.id for r in result.data] == ["stable/foo", "bitnami/foo"]

    def test_first_match_wins_when_earlier_duplicate_lacks_version(self, catalog, charts_repo):
        charts_repo.find_all.return_value = [
            make_chart("stable/foo", ["0.9.0"], app_version="0.1.0"),
            make_chart("bitnami/foo", ["1.0.0"], app_version="0.1.0"),
        ]

        result = catalog.list_charts_with_filters(NAMESPACE, "foo", "1.0.0", "0.1.0")

        assert [r.id for r in result.data] == ["bitnami/foo"]

    @pytest.mark.parametrize("version,app_version", [
        ("1.0.0", "0.2.0"),
        ("1.0.1", "0.1.0"),
        ("1.0", "0.1.0"),
    ])
    def test_version_and_app_version_must_both_match(self, catalog, charts_repo, version, app_version):
        charts_repo.find_all.return_value = [make_chart("bar/foo", ["1.0.0"], app_version="0.1.0")]

        result = catalog.list_charts_with_filters(NAMESPACE, "foo", version, app_version)

        assert result.data == []

    def test_other_names_are_skipped(self, catalog, charts_repo):
        charts_repo.find_all.return_value = [make_chart("bar/foobar", ["1.0.0"], app_version="0.1.0")]

        result = catalog.list_charts_with_filters(NAMESPACE, "foo", "1.0.0", "0.1.0")

        assert result.data == []


class TestSearchCharts:
    """Tests for free-text search."""

    def test_matches_name_description_keywords_and_maintainers(self, catalog, charts_repo):
        charts_repo.find_all.return_value = [
            make_chart("stable/wordpress", ["1.0.0"]),
            make_chart("stable/ghost", ["1.0.0"], description="A blogging platform"),
            make_chart("stable/hugo", ["1.0.0"], keywords=["Blog", "static"]),
            make_chart("stable/drupal", ["1.0.0"], maintainers=[{"name": "blogteam"}]),
            make_chart("stable/redis", ["1.0.0"], description="Key value store"),
        ]

        result = catalog.search_charts(NAMESPACE, "BLOG")

        assert [r.id for r in result.data] == ["stable/ghost", "stable/hugo", "stable/drupal"]
        assert result.meta.total_pages == 1

    def test_blank_query_returns_everything(self, catalog, charts_repo):
        charts_repo.find_all.return_value = [make_chart("stable/redis", ["1.0.0"])]

        result = catalog.search_charts(NAMESPACE, "  ")

        assert len(result.data) == 1


class TestChartLookups:
    """Tests for chart and chart version detail queries."""

    def test_get_chart(self, catalog, charts_repo):
        charts_repo.find_one.return_value = make_chart("my-repo/my-chart", ["0.1.0", "0.0.1"])

        result = catalog.get_chart(NAMESPACE, "my-repo", "my-chart")

        assert result.data.id == "my-repo/my-chart"
        assert result.data.relationships["latestChartVersion"].data.version == "0.1.0"
        charts_repo.find_one.assert_called_once_with(NAMESPACE, "my-repo/my-chart")

    @pytest.mark.parametrize("error", [
        NotFoundError("no documents"),
        StoreUnavailableError("return an error when checking if chart exists"),
    ])
    def test_get_chart_missing_queries_store_once(self, catalog, charts_repo, files_repo, error):
        charts_repo.find_one.side_effect = error

        with pytest.raises(type(error)):
            catalog.get_chart(NAMESPACE, "my-repo", "my-chart")

        charts_repo.find_one.assert_called_once()
        files_repo.find_files.assert_not_called()

    def test_list_chart_versions(self, catalog, charts_repo):
        charts_repo.find_one.return_value = make_chart("my-repo/my-chart", ["0.1.0", "0.0.1"])

        result = catalog.list_chart_versions(NAMESPACE, "my-repo", "my-chart")

        assert [r.attributes.version for r in result.data] == ["0.1.0", "0.0.1"]
        assert all(r.type == "chartVersion" for r in result.data)

    def test_get_chart_version(self, catalog, charts_repo):
        charts_repo.find_one.return_value = make_chart("my-repo/my-chart", ["0.1.0", "0.0.1"])

        result = catalog.get_chart_version(NAMESPACE, "my-repo", "my-chart", "0.0.1")

        assert result.data.id == "my-repo/my-chart-0.0.1"
        assert result.data.relationships["chart"].data.chart_versions == []

    def test_get_unknown_chart_version(self, catalog, charts_repo):
        charts_repo.find_one.return_value = make_chart("my-repo/my-chart", ["0.1.0"])

        with pytest.raises(NotFoundError):
            catalog.get_chart_version(NAMESPACE, "my-repo", "my-chart", "9.9.9")
