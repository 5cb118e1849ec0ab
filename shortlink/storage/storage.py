"""
Storage module for Shortlink (in-memory implementation).

Design:
    - Reference implementation of BaseLinkStore backed by a dict.
    - A lock makes the insert-if-absent check atomic, standing in for the
      primary-key constraint the PostgreSQL backend relies on.
    - Used for tests and local runs; nothing survives a restart.
"""

import threading
from typing import Dict, Optional

from shortlink.errors import StorageError

from .base import BaseLinkStore


class Storage(BaseLinkStore):
    def __init__(self):
        """
        Initialize empty storage.

        Internal schema:
            self.urls = {link_id: url}
        """
        self.urls: Dict[str, str] = {}
        self._lock = threading.Lock()

    def put(self, link_id: str, url: str) -> None:
        """
        Insert a new record.

        Raises:
            StorageError: if `link_id` is already taken (even for the same url).
        """
        with self._lock:
            if link_id in self.urls:
                raise StorageError(f"duplicate key value violates unique constraint: id={link_id!r}")
            self.urls[link_id] = url

    def get(self, link_id: str) -> Optional[str]:
        return self.urls.get(link_id)

    def __len__(self) -> int:
        return len(self.urls)
