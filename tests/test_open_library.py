import asyncio

import httpx
import pytest

from booknotes.services.open_library import OpenLibraryService, Suggestion


def _suggest(service, query):
    return asyncio.run(service.suggest(query))


@pytest.mark.parametrize("query", [None, "", "a", "  b  ", "   "])
def test_short_queries_skip_the_network(fake_open_library, search_docs, query):
    upstream = fake_open_library(docs=search_docs(7))
    assert _suggest(upstream.service(), query) == []
    assert upstream.calls == []


def test_top_five_with_defaults(fake_open_library, search_docs):
    upstream = fake_open_library(docs=search_docs(7))

    suggestions = _suggest(upstream.service(), "harry")

    assert len(suggestions) == 5
    assert all(isinstance(s, Suggestion) for s in suggestions)
    assert suggestions[0] == Suggestion(title="Harry Potter 0", author="J. K. Rowling", cover_i=1000)
    # docs without title/author/cover fall back to empty values
    assert suggestions[2] == Suggestion(title="", author="", cover_i=None)


def test_request_sent_upstream(fake_open_library, search_docs):
    upstream = fake_open_library(docs=search_docs(1))

    _suggest(upstream.service(), "harry")

    assert len(upstream.calls) == 1
    request = upstream.calls[0]
    assert request.method == "GET"
    assert request.url.path == "/search.json"
    assert request.url.params["title"] == "harry"
    assert request.url.params["limit"] == "5"


def test_empty_author_list(fake_open_library):
    upstream = fake_open_library(docs=[{"title": "Anonymous", "author_name": [], "cover_i": 7}])
    assert _suggest(upstream.service(), "anon") == [Suggestion(title="Anonymous", author="", cover_i=7)]


def test_missing_docs_key(fake_open_library):
    upstream = fake_open_library(body=b'{"numFound": 0}')
    assert _suggest(upstream.service(), "nothing") == []


@pytest.mark.parametrize("status_code", [404, 500, 503])
def test_error_status_gives_empty_list(fake_open_library, search_docs, status_code):
    upstream = fake_open_library(docs=search_docs(3), status_code=status_code)
    assert _suggest(upstream.service(), "harry") == []
    assert len(upstream.calls) == 1


@pytest.mark.parametrize("body", [b"<html>down</html>", b"[1, 2, 3]", b'{"docs": "nope"}'])
def test_malformed_body_gives_empty_list(fake_open_library, body):
    upstream = fake_open_library(body=body)
    assert _suggest(upstream.service(), "harry") == []


@pytest.mark.parametrize("error", [
    httpx.ConnectError("connection refused"),
    httpx.ReadTimeout("too slow"),
])
def test_network_failure_gives_empty_list(fake_open_library, error):
    upstream = fake_open_library(error=error)
    assert _suggest(upstream.service(), "harry") == []


def test_custom_limit(fake_open_library, search_docs):
    upstream = fake_open_library(docs=search_docs(7))
    service = upstream.service()
    service.limit = 2
    assert len(_suggest(service, "harry")) == 2


def test_base_url_trailing_slash():
    assert OpenLibraryService(base_url="https://openlibrary.org/").base_url == "https://openlibrary.org"
