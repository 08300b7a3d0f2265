"""Checks against the real OpenLibrary search API.

Deselected by default; run with ``pytest -m integration``.
"""

import asyncio

import pytest

from booknotes.services.http_client import OptimizedHTTPClient
from booknotes.services.open_library import OpenLibraryService

pytestmark = pytest.mark.integration


async def _live_suggestions(query):
    async with OptimizedHTTPClient() as client:
        return await OpenLibraryService(http_client=client).suggest(query)


def test_live_title_search():
    suggestions = asyncio.run(_live_suggestions("dune"))
    assert 0 < len(suggestions) <= 5
    assert any("dune" in s.title.lower() for s in suggestions)
