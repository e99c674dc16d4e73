"""HTTP client the study panels use to reach the API server."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from study_partner.exceptions import ApiRequestError
from study_partner.models import ChatMessage, Quiz, QuizQuestion, SearchResponse, SearchResult

logger = logging.getLogger(__name__)


def _failure_message(response: httpx.Response, fallback: str) -> str:
    """Prefer the server's details, then its error title, then the fallback."""
    try:
        body: Any = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        return body.get("details") or body.get("error") or fallback
    return fallback


class StudyPartnerAPI:
    """
    Thin wrapper over the /api endpoints.

    Every failure, including transport errors, surfaces as ApiRequestError
    carrying a message fit to show the user.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3001",
        http_client: httpx.Client | None = None,
        timeout: float = 60.0,
    ):
        self.http_client = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self.http_client.close()

    def __enter__(self) -> "StudyPartnerAPI":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def chat(self, messages: list[ChatMessage]) -> str:
        """Send the transcript and return the assistant reply."""
        body = {"messages": [m.model_dump() for m in messages]}
        data = self._request("POST", "/api/chat", "Failed to get response", json=body)
        return data.get("response", "")

    def search(self, query: str) -> list[SearchResult]:
        """Run an encyclopedia search through the server."""
        data = self._request("GET", "/api/search", "Search failed", params={"q": query})
        try:
            return SearchResponse.model_validate(data).results
        except ValidationError as e:
            raise ApiRequestError("Search returned an unexpected response") from e

    def generate_quiz(self, topic: str) -> list[QuizQuestion]:
        """Ask the server for a quiz about a topic."""
        data = self._request(
            "POST", "/api/generate-quiz", "Failed to generate quiz", json={"topic": topic}
        )
        try:
            return Quiz.model_validate(data).questions
        except ValidationError as e:
            raise ApiRequestError("Quiz response was not a valid quiz") from e

    def _request(self, method: str, path: str, fallback: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = self.http_client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.debug("%s %s failed: %s", method, path, e)
            raise ApiRequestError(str(e) or fallback) from e

        if response.is_error:
            raise ApiRequestError(
                _failure_message(response, fallback), status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ApiRequestError(fallback, status_code=response.status_code) from e
        if not isinstance(data, dict):
            raise ApiRequestError(fallback, status_code=response.status_code)
        return data
