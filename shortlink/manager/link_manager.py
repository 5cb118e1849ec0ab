"""
LinkManager module for Shortlink.

Responsibilities:
    - Store flow: validate the submitted URL, generate an id, compose the
      short link, persist the Link Record
    - Redirect flow: resolve an id to its stored URL
    - Turn every failure into one ShortlinkError kind, leaving the HTTP
      mapping to the single handler in main.py

Design notes:
    - No dedupe: submitting the same URL twice creates two records.
    - No retry on id collision; the store's primary key rejects it and
      the request fails with StorageError.
    - The short link is composed before the insert, so a broken base URL
      never leaves an orphan record behind.
    - Storage and id strategy are injected; defaults come from config.

LLM Prompt Example:
    "Explain why a random 21-character id over a 64-symbol alphabet needs no
    existence check before insert, and how a primary-key constraint covers
    the remaining collision risk."
"""

import logging
from dataclasses import dataclass
from typing import Optional

from shortlink.errors import NotFoundError
from shortlink.storage.base import BaseLinkStore

from .strategies import BaseStrategy, get_strategy_from_config
from .urls import join_short_url, parse_absolute_url

log = logging.getLogger("shortlink.manager")


@dataclass(frozen=True)
class CreatedLink:
    """Outcome of a successful store flow."""
    id: str
    url: str
    short_url: str


class LinkManager:
    """Coordinates the store and redirect flows over an injected Link Store."""

    def __init__(
        self,
        storage: BaseLinkStore,
        id_strategy: Optional[BaseStrategy] = None,
        url_base: Optional[str] = None,
    ):
        """
        Args:
            storage (BaseLinkStore): Backend storage instance, shared by reference.
            id_strategy (Optional[BaseStrategy]): Id generator; resolved from config when omitted.
            url_base (Optional[str]): Base URL for absolute short links; None gives bare ids.
        """
        self.storage = storage
        self.id_strategy = id_strategy or get_strategy_from_config()
        self.url_base = url_base

    def create_link(self, raw_url: Optional[str]) -> CreatedLink:
        """
        Create a Link Record for `raw_url`.

        Raises:
            ValidationError: `raw_url` is not an absolute URL. Nothing is stored.
            ConfigurationError: the configured base URL cannot be joined with the id.
            StorageError: the insert failed (collision or backend failure).
        """
        url = parse_absolute_url(raw_url)
        link_id = self.id_strategy.generate()
        short_url = join_short_url(self.url_base, link_id)
        self.storage.put(link_id, url)
        log.info("created link %s", link_id)
        return CreatedLink(id=link_id, url=url, short_url=short_url)

    def resolve(self, link_id: str) -> str:
        """
        Return the stored URL for `link_id`.

        Raises:
            NotFoundError: no record for `link_id`.
            StorageError: the lookup failed.
        """
        url = self.storage.get(link_id)
        if url is None:
            raise NotFoundError(f"no link with id {link_id!r}")
        return url
