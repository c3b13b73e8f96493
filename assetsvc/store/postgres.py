"""
PostgreSQL chart store.

Charts and chart files are JSONB documents written by the ingestion
pipeline:

    charts (repo_name, repo_namespace, chart_id, info jsonb)
    files  (repo_name, repo_namespace, chart_id, chart_files_id, info jsonb)

A single ThreadedConnectionPool is created at startup and shared by all
requests. Connections run in autocommit mode; every query is a plain read.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Tuple

import psycopg2
from psycopg2.extras import RealDictCursor
from psycopg2.pool import ThreadedConnectionPool

from ..config import Settings
from ..errors import NotFoundError, StoreUnavailableError
from ..models import Chart, ChartFiles
from .base import ChartQuery, ChartRepository, ChartFilesRepository

logger = logging.getLogger(__name__)

CHARTS_TABLE = "charts"
FILES_TABLE = "files"


def _where(query: ChartQuery) -> Tuple[str, List[Any]]:
    clauses = ["repo_namespace = %s"]
    params: List[Any] = [query.namespace]
    if query.repo:
        clauses.append("repo_name = %s")
        params.append(query.repo)
    if query.name:
        clauses.append("info->>'name' = %s")
        params.append(query.name)
    return " AND ".join(clauses), params


def _chart_from_row(row: Dict[str, Any]) -> Chart:
    info = dict(row["info"])
    info.setdefault("id", row.get("chart_id"))
    return Chart.model_validate(info)


class PostgresStore(ChartRepository, ChartFilesRepository):
    """Chart and chart files repositories over a psycopg2 connection pool."""

    def __init__(self, pool):
        self._pool = pool

    @classmethod
    def connect(cls, settings: Settings) -> "PostgresStore":
        try:
            pool = ThreadedConnectionPool(
                settings.pool_min,
                settings.pool_max,
                cursor_factory=RealDictCursor,
                **settings.dsn_kwargs(),
            )
        except psycopg2.Error as e:
            logger.error(f"Database connection error: {e}")
            raise StoreUnavailableError(f"Database connection failed: {e}") from e
        return cls(pool)

    def close(self) -> None:
        self._pool.closeall()

    @contextmanager
    def _cursor(self):
        try:
            conn = self._pool.getconn()
        except psycopg2.Error as e:
            logger.error(f"Database connection error: {e}")
            raise StoreUnavailableError(f"Database connection failed: {e}") from e
        try:
            conn.autocommit = True
            cur = conn.cursor()
            try:
                yield cur
            finally:
                cur.close()
        except psycopg2.Error as e:
            logger.error(f"Query failed: {e}")
            raise StoreUnavailableError(f"Query failed: {e}") from e
        finally:
            self._pool.putconn(conn)

    def find_one(self, namespace: str, chart_id: str) -> Chart:
        with self._cursor() as cur:
            cur.execute(
                f"SELECT chart_id, info FROM {CHARTS_TABLE} "
                "WHERE repo_namespace = %s AND chart_id = %s",
                (namespace, chart_id),
            )
            row = cur.fetchone()
        if row is None:
            raise NotFoundError(f"Chart {chart_id} not found in namespace {namespace}")
        return _chart_from_row(row)

    def find_all(self, query: ChartQuery) -> List[Chart]:
        where, params = _where(query)
        sql = (
            f"SELECT chart_id, info FROM {CHARTS_TABLE} WHERE {where} "
            "ORDER BY info->>'name' ASC, chart_id ASC"
        )
        if query.paginated:
            sql += " LIMIT %s OFFSET %s"
            params += [query.size, query.offset]
        with self._cursor() as cur:
            cur.execute(sql, tuple(params))
            rows = cur.fetchall()
        return [_chart_from_row(row) for row in rows]

    def count(self, query: ChartQuery) -> int:
        where, params = _where(query)
        with self._cursor() as cur:
            cur.execute(
                f"SELECT COUNT(*) AS count FROM {CHARTS_TABLE} WHERE {where}",
                tuple(params),
            )
            row = cur.fetchone()
        return int(row["count"]) if row else 0

    def find_files(self, namespace: str, repo_name: str, files_id: str) -> ChartFiles:
        with self._cursor() as cur:
            cur.execute(
                f"SELECT info FROM {FILES_TABLE} "
                "WHERE repo_namespace = %s AND repo_name = %s AND chart_files_id = %s",
                (namespace, repo_name, files_id),
            )
            row = cur.fetchone()
        if row is None:
            raise NotFoundError(f"Files {files_id} not found in namespace {namespace}")
        info = dict(row["info"])
        info.setdefault("id", files_id)
        return ChartFiles.model_validate(info)
