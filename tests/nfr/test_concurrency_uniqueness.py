"""
NFR: concurrent creates never share an id

Goal:
    Hammer the store flow from many threads and ensure:
      - every create returns a distinct id
      - every id resolves to the URL it was created for

How to run (opt-in):
    RUN_NFR=1 pytest tests/nfr/test_concurrency_uniqueness.py -vv
"""

import os
from concurrent.futures import ThreadPoolExecutor

import pytest

from shortlink.manager.link_manager import LinkManager
from shortlink.storage.storage import Storage

pytestmark = pytest.mark.nfr


def _should_run():
    return os.getenv("RUN_NFR") == "1"


@pytest.mark.skipif(not _should_run(), reason="NFR tests are opt-in; set RUN_NFR=1 to enable")
def test_concurrent_creates_are_unique():
    storage = Storage()
    manager = LinkManager(storage=storage)

    N = 20_000
    with ThreadPoolExecutor(max_workers=16) as ex:
        links = list(ex.map(lambda i: manager.create_link(f"https://example.com/{i}"), range(N)))

    assert len({link.id for link in links}) == N
    assert len(storage) == N
    for i, link in enumerate(links):
        assert manager.resolve(link.id) == f"https://example.com/{i}"
