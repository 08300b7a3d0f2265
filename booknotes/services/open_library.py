import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel

from booknotes.config import settings
from booknotes.services.http_client import OptimizedHTTPClient, get_http_client


logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2


class Suggestion(BaseModel):
    """One autocomplete entry built from an OpenLibrary search doc."""
    title: str = ""
    author: str = ""
    cover_i: Optional[int] = None


class UpstreamError(Exception):
    """OpenLibrary could not be reached or answered with something unusable."""
    pass


class OpenLibraryService:
    """Title suggestions from the OpenLibrary search API.

    Suggestions are a convenience for the add form, so every failure ends in
    an empty list instead of an error.
    """

    def __init__(self, http_client: Optional[OptimizedHTTPClient] = None,
                 base_url: Optional[str] = None, limit: Optional[int] = None):
        self._http_client = http_client
        self.base_url = (base_url or settings.openlibrary_url).rstrip("/")
        self.limit = limit or settings.suggestion_limit

    async def suggest(self, query: Optional[str]) -> List[Suggestion]:
        """Top matches for a partial title.

        Queries shorter than two characters never reach the network.
        """
        if not query or len(query.strip()) < MIN_QUERY_LENGTH:
            return []

        try:
            docs = await self._search(query)
        except UpstreamError as e:
            logger.warning(f"OpenLibrary error in suggest(): {e}")
            return []

        return [self._to_suggestion(doc) for doc in docs[:self.limit]]

    async def _search(self, query: str) -> List[Dict[str, Any]]:
        client = self._http_client or await get_http_client()
        url = f"{self.base_url}/search.json"

        try:
            response = await client.get(url, params={"title": query, "limit": self.limit})
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise UpstreamError("request timed out") from e
        except httpx.HTTPStatusError as e:
            raise UpstreamError(f"status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise UpstreamError(str(e)) from e
        except ValueError as e:
            raise UpstreamError("response is not JSON") from e

        if not isinstance(data, dict):
            raise UpstreamError("unexpected response shape")
        docs = data.get("docs") or []
        if not isinstance(docs, list):
            raise UpstreamError("docs is not a list")
        return [doc for doc in docs if isinstance(doc, dict)]

    @staticmethod
    def _to_suggestion(doc: Dict[str, Any]) -> Suggestion:
        authors = doc.get("author_name") or []
        cover = doc.get("cover_i")
        return Suggestion(
            title=str(doc.get("title") or ""),
            author=str(authors[0]) if isinstance(authors, list) and authors else "",
            cover_i=cover if isinstance(cover, int) and not isinstance(cover, bool) else None,
        )
