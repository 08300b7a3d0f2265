import os
import tempfile

# booknotes.api builds its default app at import time; keep that store out of the repo.
os.environ.setdefault(
    "LIBRARY_DB_FILE",
    os.path.join(tempfile.gettempdir(), f"booknotes_test_{os.getpid()}.db"),
)

import httpx
import pytest
from fastapi.testclient import TestClient

from booknotes.api import create_app
from booknotes.library import Library
from booknotes.services.http_client import OptimizedHTTPClient
from booknotes.services.open_library import OpenLibraryService


def make_docs(count):
    """OpenLibrary-shaped search docs; every third one is missing its optional fields."""
    docs = []
    for i in range(count):
        if i % 3 == 2:
            docs.append({"key": f"/works/OL{i}W"})
        else:
            docs.append({
                "title": f"Harry Potter {i}",
                "author_name": ["J. K. Rowling", "Mary GrandPré"],
                "cover_i": 1000 + i,
            })
    return docs


class FakeOpenLibrary:
    """Records calls and answers with a canned search response."""

    def __init__(self, docs=None, status_code=200, body=None, error=None):
        self.calls = []
        self.docs = docs if docs is not None else []
        self.status_code = status_code
        self.body = body
        self.error = error

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        if self.body is not None:
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, json={"numFound": len(self.docs), "docs": self.docs})

    def service(self) -> OpenLibraryService:
        client = OptimizedHTTPClient(transport=httpx.MockTransport(self))
        return OpenLibraryService(http_client=client, base_url="https://openlibrary.test")


@pytest.fixture
def lib(tmp_path, request):
    # One database file per test
    db_file = str(tmp_path / f"test_{request.node.name}.db")
    return Library(db_file=db_file)


@pytest.fixture
def open_library():
    return FakeOpenLibrary(docs=make_docs(7))


@pytest.fixture
def client(lib, open_library):
    app = create_app(library=lib, suggestions=open_library.service())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fake_open_library():
    """Factory for stand-in OpenLibrary endpoints with custom answers."""
    return FakeOpenLibrary


@pytest.fixture
def search_docs():
    return make_docs
