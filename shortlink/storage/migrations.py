"""
Schema migrations for the PostgreSQL backend.

SQL files under `shortlink/storage/sql/` are applied once each, in
file-name order, and recorded in `_shortlink_migrations`. The whole run
holds a transaction-scoped advisory lock so several workers starting at
the same time do not race each other.

This runs at startup only; the Link Store treats the schema as given.
"""

import logging
from importlib import resources
from typing import List, Tuple

from psycopg_pool import ConnectionPool

log = logging.getLogger("shortlink.storage")

# Arbitrary constant shared by every shortlink process.
_ADVISORY_LOCK_KEY = 7_301_977

_BOOKKEEPING_SQL = """
CREATE TABLE IF NOT EXISTS _shortlink_migrations (
    version    TEXT PRIMARY KEY,
    applied_at TIMESTAMPTZ NOT NULL DEFAULT now()
)
"""


def load_migrations() -> List[Tuple[str, str]]:
    """Return (version, sql) pairs sorted by version (file stem)."""
    folder = resources.files(__package__).joinpath("sql")
    found = []
    for entry in folder.iterdir():
        if entry.name.endswith(".sql"):
            found.append((entry.name[: -len(".sql")], entry.read_text(encoding="utf-8")))
    return sorted(found)


def run_migrations(pool: ConnectionPool) -> List[str]:
    """
    Apply pending migrations.

    Returns:
        List[str]: versions applied by this call (empty when up to date).
    """
    applied: List[str] = []
    with pool.connection() as con, con.transaction(), con.cursor() as cur:
        cur.execute("SELECT pg_advisory_xact_lock(%s)", (_ADVISORY_LOCK_KEY,))
        cur.execute(_BOOKKEEPING_SQL)
        cur.execute("SELECT version FROM _shortlink_migrations")
        done = {row[0] for row in cur.fetchall()}

        for version, sql in load_migrations():
            if version in done:
                continue
            log.info("applying migration %s", version)
            cur.execute(sql)
            cur.execute("INSERT INTO _shortlink_migrations (version) VALUES (%s)", (version,))
            applied.append(version)

    if not applied:
        log.info("schema up to date")
    return applied
