"""
Strategies for short-id generation in shortlink.

Provided strategies:
- NanoIdStrategy: random id over the 64-symbol URL-safe alphabet A-Za-z0-9_- (default, length 21)
- RandomBase62Strategy: random id over A-Za-z0-9 only, for deployments that dislike '-' and '_'

Both draw from `secrets` (the OS CSPRNG) and are stateless. Neither checks
the store for an existing id: with 21 symbols from a 64-letter alphabet a
collision is astronomically unlikely, and the `urls.id` primary key turns
the rare occurrence into a StorageError instead of an overwrite.

Configuration (via shortlink.config.settings):
- CODE_STRATEGY: "nanoid" (default) or "base62"
- CODE_LENGTH: id length (default 21; clamped 8..64)
"""

import secrets
import string
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Type

from shortlink.config import CODE_LENGTH_MAX, CODE_LENGTH_MIN, settings

URL_SAFE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "_-"
BASE62_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits

DEFAULT_LENGTH = 21


def _safe_len(length: Optional[int]) -> int:
    """Resolve desired id length from arg or config, clamped to [8, 64]."""
    L = int(length) if length is not None else int(getattr(settings, "CODE_LENGTH", DEFAULT_LENGTH))
    return max(CODE_LENGTH_MIN, min(CODE_LENGTH_MAX, L))


def _random_string(alphabet: str, length: int) -> str:
    return "".join(secrets.choice(alphabet) for _ in range(length))


class BaseStrategy(ABC):
    """Abstract base for id generation strategies."""

    alphabet: str = URL_SAFE_ALPHABET
    length: int = DEFAULT_LENGTH

    @abstractmethod
    def generate(self) -> str:
        """Return a fresh id of exactly `self.length` characters from `self.alphabet`."""
        raise NotImplementedError


@dataclass(frozen=True)
class NanoIdStrategy(BaseStrategy):
    """Nano ID style ids: 21 chars from A-Za-z0-9_- give ~126 bits of entropy."""
    length: int = DEFAULT_LENGTH
    alphabet: str = URL_SAFE_ALPHABET

    def generate(self) -> str:
        return _random_string(self.alphabet, self.length)


@dataclass(frozen=True)
class RandomBase62Strategy(BaseStrategy):
    length: int = DEFAULT_LENGTH
    alphabet: str = BASE62_ALPHABET

    def generate(self) -> str:
        return _random_string(self.alphabet, self.length)


STRATEGY_REGISTRY: Dict[str, Type[BaseStrategy]] = {
    "nanoid": NanoIdStrategy,
    "base62": RandomBase62Strategy,
}


def get_strategy_from_config(name: Optional[str] = None, length: Optional[int] = None) -> BaseStrategy:
    """
    Resolve the active strategy from parameters or settings.CODE_STRATEGY / CODE_LENGTH.
    Unknown names fall back to nanoid.
    """
    key = (name or getattr(settings, "CODE_STRATEGY", "nanoid") or "nanoid").strip().lower()
    cls = STRATEGY_REGISTRY.get(key) or STRATEGY_REGISTRY["nanoid"]
    return cls(length=_safe_len(length))  # type: ignore[call-arg]
