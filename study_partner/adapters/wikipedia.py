"""Search adapter - Encyclopedia lookups through the MediaWiki search API."""

import logging
import re
from typing import Any
from urllib.parse import quote

import httpx

from study_partner.config.settings import Settings
from study_partner.exceptions import UpstreamSearchError
from study_partner.models.search import SearchResult

logger = logging.getLogger(__name__)

ARTICLE_BASE_URL = "https://en.wikipedia.org/wiki/"
USER_AGENT = "study-partner/0.1 (educational study assistant)"
UNREADABLE_RESPONSE = "Search returned an unreadable response"

_HIGHLIGHT_MARKUP = re.compile(r"</?span[^>]*>")
_WHITESPACE = re.compile(r"\s+")
# Characters encodeURIComponent leaves alone besides alphanumerics and "-_."
_URI_COMPONENT_SAFE = "!~*'()"


def strip_highlighting(snippet: str | None) -> str:
    """Remove the <span class="searchmatch"> markup from a snippet."""
    if not snippet:
        return ""
    return _HIGHLIGHT_MARKUP.sub("", snippet)


def article_link(title: str) -> str:
    """Build the canonical article URL for a page title."""
    slug = _WHITESPACE.sub("_", title)
    return ARTICLE_BASE_URL + quote(slug, safe=_URI_COMPONENT_SAFE)


def normalize_hit(hit: Any) -> SearchResult:
    """
    Map a raw MediaWiki search hit to a SearchResult.

    Raises:
        UpstreamSearchError: If the hit has no usable title
    """
    if not isinstance(hit, dict) or not isinstance(hit.get("title"), str):
        raise UpstreamSearchError(UNREADABLE_RESPONSE)

    title = hit["title"]
    snippet = hit.get("snippet")
    return SearchResult(
        title=title,
        link=article_link(title),
        snippet=strip_highlighting(snippet if isinstance(snippet, str) else None),
    )


def _upstream_message(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if not isinstance(error, dict):
        return None
    return error.get("info") or error.get("message")


class WikipediaSearchClient:
    """Runs a single search query against the MediaWiki API."""

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        api_url: str = "https://en.wikipedia.org/w/api.php",
        limit: int = 10,
        timeout: float = 10.0,
    ):
        self.http_client = http_client
        self.api_url = api_url
        self.limit = limit
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "WikipediaSearchClient":
        return cls(
            api_url=settings.search_api_url,
            limit=settings.search_result_limit,
            timeout=settings.search_timeout,
        )

    def search(self, query: str) -> list[SearchResult]:
        """
        Search the encyclopedia.

        Args:
            query: Free text search query

        Returns:
            Normalized results, empty when nothing matched

        Raises:
            UpstreamSearchError: On transport errors, non-success status or
                an unreadable body
        """
        params = {
            "action": "query",
            "list": "search",
            "srsearch": query,
            "srlimit": str(self.limit),
            "format": "json",
        }
        logger.debug("Searching %s for %r", self.api_url, query)

        try:
            if self.http_client is not None:
                response = self._get(self.http_client, params)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = self._get(client, params)
        except httpx.HTTPError as e:
            raise UpstreamSearchError(str(e) or "Search request failed") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.is_error:
            raise UpstreamSearchError(
                _upstream_message(payload)
                or f"Search request failed with status {response.status_code}"
            )

        if not isinstance(payload, dict):
            raise UpstreamSearchError(UNREADABLE_RESPONSE)

        upstream_error = _upstream_message(payload)
        if upstream_error:
            raise UpstreamSearchError(upstream_error)

        query_block = payload.get("query") or {}
        hits = (query_block.get("search") or []) if isinstance(query_block, dict) else None
        if not isinstance(hits, list):
            raise UpstreamSearchError(UNREADABLE_RESPONSE)
        return [normalize_hit(hit) for hit in hits]

    def _get(self, client: httpx.Client, params: dict[str, str]) -> httpx.Response:
        return client.get(
            self.api_url,
            params=params,
            headers={"User-Agent": USER_AGENT},
            timeout=self.timeout,
        )
