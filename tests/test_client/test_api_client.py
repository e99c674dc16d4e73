"""Tests for the panel-side API client."""

import json

import httpx
import pytest

from study_partner.client.api import StudyPartnerAPI
from study_partner.exceptions import ApiRequestError, UpstreamRequestFailed
from study_partner.models import ChatMessage


def api_for(handler) -> StudyPartnerAPI:
    http_client = httpx.Client(
        base_url="http://testserver", transport=httpx.MockTransport(handler)
    )
    return StudyPartnerAPI(http_client=http_client)


class TestAgainstServer:
    """Test the client against the in-process API."""

    def test_chat(self, api: StudyPartnerAPI, fake_generative):
        reply = api.chat([ChatMessage(role="user", content="What is osmosis?")])

        assert reply == fake_generative.reply

    def test_search(self, api: StudyPartnerAPI, sample_search_results):
        results = api.search("photosynthesis")

        assert results == sample_search_results

    def test_generate_quiz(self, api: StudyPartnerAPI, sample_questions):
        questions = api.generate_quiz("Photosynthesis")

        assert questions == sample_questions

    def test_error_details_are_surfaced(self, api: StudyPartnerAPI, fake_generative):
        """Test that the server's details become the error message."""
        fake_generative.error = UpstreamRequestFailed("Model is overloaded")

        with pytest.raises(ApiRequestError) as exc_info:
            api.chat([ChatMessage(role="user", content="Hi")])

        assert exc_info.value.message == "Model is overloaded"
        assert exc_info.value.status_code == 500

    def test_error_title_used_without_details(self, api: StudyPartnerAPI):
        """Test the fallback to the error title."""
        with pytest.raises(ApiRequestError, match="Missing query parameter q"):
            api.search("   ")


class TestFailureHandling:
    """Test failures that never reach a well-behaved server."""

    def test_non_json_error_uses_fallback(self):
        api = api_for(lambda request: httpx.Response(502, text="Bad Gateway"))

        with pytest.raises(ApiRequestError, match="Failed to get response"):
            api.chat([ChatMessage(role="user", content="Hi")])

    def test_transport_error(self):
        """Test that connection failures become ApiRequestError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        api = api_for(handler)

        with pytest.raises(ApiRequestError, match="Connection refused"):
            api.generate_quiz("Photosynthesis")

    def test_invalid_quiz_payload(self):
        """Test that a success body without a valid quiz is rejected."""
        api = api_for(lambda request: httpx.Response(200, json={"questions": [{"question": "?"}]}))

        with pytest.raises(ApiRequestError, match="not a valid quiz"):
            api.generate_quiz("Photosynthesis")

    def test_sends_transcript_with_roles(self):
        """Test the chat request body."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"response": "ok"})

        api_for(handler).chat(
            [
                ChatMessage(role="assistant", content="Hello!"),
                ChatMessage(role="user", content="Hi"),
            ]
        )

        assert seen[0].url.path == "/api/chat"
        assert seen[0].method == "POST"
        assert json.loads(seen[0].content) == {
            "messages": [
                {"role": "assistant", "content": "Hello!"},
                {"role": "user", "content": "Hi"},
            ]
        }
