"""
Storage factory - switch Link Store backend from config
=======================================================

Centralizes selection of the storage backend (in-memory vs PostgreSQL)
so the rest of the app can stay ignorant of where data lives.

- Reads the environment **at call time** to avoid stale values in tests.
- Imports the DB backend (and psycopg) **only if** "postgres" is selected.

LLM Prompt
----------
You are extending storage backends. Keep defaults safe ("memory"). Read env lazily
inside the factory function. Don't import heavy DB modules unless needed.

Environment variables
---------------------
- SHORTLINK_STORAGE_BACKEND: "memory" (default) or "postgres"
- SHORTLINK_DB_DSN:          DSN string if backend=="postgres"
- SHORTLINK_POOL_MIN_SIZE / SHORTLINK_POOL_MAX_SIZE: pool bounds
"""

import logging
from typing import Optional

from shortlink.config import load_settings
from shortlink.storage.base import BaseLinkStore
from shortlink.storage.storage import Storage

log = logging.getLogger("shortlink.storage")


def get_storage(backend: Optional[str] = None, **kwargs) -> BaseLinkStore:
    """
    Return a Link Store based on configuration.

    Parameters
    ----------
    backend : str, optional
        "memory" or "postgres". If omitted, reads SHORTLINK_STORAGE_BACKEND.
    kwargs : dict
        For postgres: dsn="...", min_size=..., max_size=... override the environment.

    Raises
    ------
    ValueError
        Unknown backend, or postgres without a DSN. Both are startup errors.
    """
    current = load_settings()
    be = (backend or current.STORAGE_BACKEND).strip().lower()
    log.info("Selected storage backend: %r", be)

    if be == "memory":
        return Storage()

    if be == "postgres":
        dsn = kwargs.get("dsn") or current.DB_DSN
        if not dsn:
            raise ValueError("DB_DSN is required for postgres backend (env SHORTLINK_DB_DSN)")
        # Local import to avoid hard dependency when not using postgres
        from shortlink.storage.db_storage import DBStorage

        return DBStorage.from_dsn(
            dsn,
            min_size=kwargs.get("min_size", current.POOL_MIN_SIZE),
            max_size=kwargs.get("max_size", current.POOL_MAX_SIZE),
        )

    raise ValueError(f"Unknown storage backend: {be!r}")
