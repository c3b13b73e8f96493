"""
Service Configuration
=====================
Settings are read once from the environment at startup.

Database:
- DATABASE_URL, or PGHOST / PGPORT / PGDATABASE / PGUSER / PGPASSWORD

Service:
- ASSETSVC_STORE        postgres (default) | memory
- ASSETSVC_SEED_FILE    JSON seed for the memory store
- ASSETSVC_PATH_PREFIX  route and link prefix (default /v1; "" or "/" mounts at the root)
- ASSETSVC_DB_POOL_MIN / ASSETSVC_DB_POOL_MAX
- LOG_LEVEL, HOST, PORT
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field

DEFAULT_PATH_PREFIX = "/v1"


def _int_env(env: Mapping[str, str], key: str, default: int) -> int:
    try:
        return int(env.get(key, default))
    except (TypeError, ValueError):
        return default


class Settings(BaseModel):
    """Runtime settings for the asset service."""
    database_url: Optional[str] = None
    pg_host: str = "localhost"
    pg_port: str = "5432"
    pg_database: str = "assets"
    pg_user: str = "postgres"
    pg_password: str = ""

    store_backend: str = Field("postgres", description="postgres | memory")
    seed_file: Optional[str] = None
    path_prefix: str = DEFAULT_PATH_PREFIX
    pool_min: int = 1
    pool_max: int = 10

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        prefix = env.get("ASSETSVC_PATH_PREFIX", DEFAULT_PATH_PREFIX).strip("/")
        return cls(
            database_url=env.get("DATABASE_URL") or None,
            pg_host=env.get("PGHOST", "localhost"),
            pg_port=env.get("PGPORT", "5432"),
            pg_database=env.get("PGDATABASE", "assets"),
            pg_user=env.get("PGUSER", "postgres"),
            pg_password=env.get("PGPASSWORD", ""),
            store_backend=env.get("ASSETSVC_STORE", "postgres").lower(),
            seed_file=env.get("ASSETSVC_SEED_FILE") or None,
            path_prefix=f"/{prefix}" if prefix else "",
            pool_min=_int_env(env, "ASSETSVC_DB_POOL_MIN", 1),
            pool_max=_int_env(env, "ASSETSVC_DB_POOL_MAX", 10),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            host=env.get("HOST", "0.0.0.0"),
            port=_int_env(env, "PORT", 8080),
        )

    def dsn_kwargs(self) -> dict:
        """Connection arguments for psycopg2."""
        if self.database_url:
            return {"dsn": self.database_url}
        return {
            "host": self.pg_host,
            "port": self.pg_port,
            "database": self.pg_database,
            "user": self.pg_user,
            "password": self.pg_password,
        }
