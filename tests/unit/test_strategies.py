"""
Unit tests for shortlink.manager.strategies.

Covers:
    - fixed length and alphabet of generated ids
    - uniqueness over a large sample
    - registry resolution, fallback and length clamping
"""

import re

import pytest

from shortlink.manager import strategies
from shortlink.manager.strategies import (
    BASE62_ALPHABET,
    URL_SAFE_ALPHABET,
    NanoIdStrategy,
    RandomBase62Strategy,
    get_strategy_from_config,
)

URL_SAFE_PATTERN = re.compile(r"^[A-Za-z0-9_-]{21}$")


def test_url_safe_alphabet_has_64_symbols():
    assert len(URL_SAFE_ALPHABET) == 64
    assert len(set(URL_SAFE_ALPHABET)) == 64
    assert len(BASE62_ALPHABET) == 62


def test_nanoid_default_length_and_charset():
    s = NanoIdStrategy()
    code = s.generate()
    assert len(code) == 21
    assert URL_SAFE_PATTERN.match(code)


def test_ten_thousand_ids_unique_and_in_alphabet():
    s = NanoIdStrategy()
    samples = [s.generate() for _ in range(10_000)]
    assert len(set(samples)) == len(samples)
    allowed = set(URL_SAFE_ALPHABET)
    for code in samples:
        assert len(code) == 21
        assert set(code) <= allowed


def test_base62_strategy_never_emits_dash_or_underscore():
    s = RandomBase62Strategy()
    samples = [s.generate() for _ in range(2000)]
    assert all(len(x) == 21 for x in samples)
    assert all(set(x) <= set(BASE62_ALPHABET) for x in samples)


def test_custom_length():
    assert len(NanoIdStrategy(length=32).generate()) == 32


@pytest.mark.parametrize(
    "name,cls",
    [
        ("nanoid", NanoIdStrategy),
        ("NanoID", NanoIdStrategy),
        ("base62", RandomBase62Strategy),
        (" BASE62 ", RandomBase62Strategy),
        ("random", NanoIdStrategy),
        ("no-such-strategy", NanoIdStrategy),
    ],
)
def test_registry_resolution(name, cls):
    assert isinstance(get_strategy_from_config(name), cls)


@pytest.mark.parametrize("requested,expected", [(1, 8), (21, 21), (1000, 64)])
def test_length_is_clamped(requested, expected):
    assert get_strategy_from_config("nanoid", length=requested).length == expected


def test_strategy_defaults_follow_settings(monkeypatch):
    monkeypatch.setattr(strategies.settings, "CODE_STRATEGY", "base62")
    monkeypatch.setattr(strategies.settings, "CODE_LENGTH", 12)
    code = get_strategy_from_config().generate()
    assert len(code) == 12
    assert set(code) <= set(BASE62_ALPHABET)


def test_strategies_are_immutable():
    s = NanoIdStrategy()
    with pytest.raises(Exception):
        s.length = 5  # type: ignore[misc]
