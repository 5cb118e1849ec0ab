"""
Base storage interface for Shortlink.

Purpose:
    Define the narrow Link Store contract (put / get) that both the
    in-memory and the PostgreSQL backends implement, so the manager and
    the HTTP layer never know where records live.

Contract:
    - put(id, url): insert a new Link Record. A duplicate id or any
      backend failure raises StorageError. There is no upsert.
    - get(id): return the stored url, or None when no record exists.
      Only genuine backend failures raise StorageError, so callers can
      tell "not found" (404) from "broken" (500).
    - No update, delete or cache: records are immutable and durable.

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover`.

LLM Prompt Example:
    "Show how a two-method storage interface (put, get) with a distinguished
    not-found result lets an HTTP layer map missing rows to 404 and real
    failures to 500 without knowing which database sits behind it."
"""

from abc import ABC, abstractmethod
from typing import Optional


class BaseLinkStore(ABC):
    """Abstract base class for Link Store backends."""

    @abstractmethod  # pragma: no cover
    def put(self, link_id: str, url: str) -> None:
        """
        Insert the mapping link_id -> url.

        Raises:
            StorageError: if link_id already exists or the backend fails.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get(self, link_id: str) -> Optional[str]:
        """
        Look up the url stored for link_id.

        Returns:
            Optional[str]: the url, or None if no record exists.

        Raises:
            StorageError: on any backend failure other than "no such row".
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release backend resources. No-op unless the backend holds any."""

    def prepare_schema(self) -> None:
        """Bring the backend schema up to date at startup. No-op by default."""
