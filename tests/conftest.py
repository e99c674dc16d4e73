"""Shared test fixtures and configuration for pytest."""

from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from study_partner.api.server import create_app, get_generative_client, get_search_client
from study_partner.client.api import StudyPartnerAPI
from study_partner.config.settings import Settings
from study_partner.models import ChatMessage, Quiz, QuizQuestion, SearchResult


class FakeGenerativeClient:
    """Stands in for GenerativeTextClient and records every call."""

    def __init__(
        self,
        reply: str = "Photosynthesis turns light into chemical energy.",
        quiz: Quiz | None = None,
        error: Exception | None = None,
    ):
        self.reply = reply
        self.quiz = quiz
        self.error = error
        self.chat_calls: list[list[ChatMessage]] = []
        self.quiz_calls: list[str] = []

    def chat(self, messages: list[ChatMessage]) -> str:
        self.chat_calls.append(list(messages))
        if self.error:
            raise self.error
        return self.reply

    def generate_quiz(self, topic: str) -> Quiz:
        self.quiz_calls.append(topic)
        if self.error:
            raise self.error
        return self.quiz


class FakeSearchClient:
    """Stands in for WikipediaSearchClient and records every query."""

    def __init__(self, results: list[SearchResult] | None = None, error: Exception | None = None):
        self.results = results or []
        self.error = error
        self.queries: list[str] = []

    def search(self, query: str) -> list[SearchResult]:
        self.queries.append(query)
        if self.error:
            raise self.error
        return self.results


def make_settings(**env: Any) -> Settings:
    """Build settings from explicit values only, ignoring any .env file."""
    values = {"GEMINI_API_KEY": "test-key", **env}
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    """Settings with a Gemini key configured."""
    return make_settings()


@pytest.fixture
def unconfigured_settings() -> Settings:
    """Settings without a Gemini key."""
    return make_settings(GEMINI_API_KEY="")


@pytest.fixture
def sample_questions() -> list[QuizQuestion]:
    """Create a five question quiz about photosynthesis."""
    return [
        QuizQuestion(
            question="Which organelle carries out photosynthesis?",
            options=["Mitochondrion", "Chloroplast", "Nucleus", "Ribosome"],
            correctAnswer=1,
        ),
        QuizQuestion(
            question="Which gas do plants absorb during photosynthesis?",
            options=["Carbon dioxide", "Oxygen", "Nitrogen", "Helium"],
            correctAnswer=0,
        ),
        QuizQuestion(
            question="Which pigment gives leaves their green color?",
            options=["Carotene", "Xanthophyll", "Anthocyanin", "Chlorophyll"],
            correctAnswer=3,
        ),
        QuizQuestion(
            question="What is a product of the light-dependent reactions?",
            options=["Glucose", "Starch", "ATP", "Cellulose"],
            correctAnswer=2,
        ),
        QuizQuestion(
            question="Where does the Calvin cycle take place?",
            options=["Thylakoid membrane", "Stroma", "Cytoplasm", "Cell wall"],
            correctAnswer=1,
        ),
    ]


@pytest.fixture
def sample_quiz(sample_questions: list[QuizQuestion]) -> Quiz:
    return Quiz(questions=sample_questions)


@pytest.fixture
def sample_search_results() -> list[SearchResult]:
    return [
        SearchResult(
            title="Photosynthesis",
            link="https://en.wikipedia.org/wiki/Photosynthesis",
            snippet="Photosynthesis is a system of biological processes",
        ),
        SearchResult(
            title="Calvin cycle",
            link="https://en.wikipedia.org/wiki/Calvin_cycle",
            snippet="The Calvin cycle is the light-independent reactions",
        ),
    ]


@pytest.fixture
def fake_generative(sample_quiz: Quiz) -> FakeGenerativeClient:
    return FakeGenerativeClient(quiz=sample_quiz)


@pytest.fixture
def fake_search(sample_search_results: list[SearchResult]) -> FakeSearchClient:
    return FakeSearchClient(results=sample_search_results)


def build_app(
    settings: Settings,
    generative: FakeGenerativeClient | None,
    search: FakeSearchClient | None,
) -> FastAPI:
    """Create the API with the external adapters replaced by fakes."""
    app = create_app(settings)
    if generative is not None:
        app.dependency_overrides[get_generative_client] = lambda: generative
    if search is not None:
        app.dependency_overrides[get_search_client] = lambda: search
    return app


@pytest.fixture
def client(
    settings: Settings,
    fake_generative: FakeGenerativeClient,
    fake_search: FakeSearchClient,
) -> TestClient:
    """Test client for a fully configured API."""
    return TestClient(build_app(settings, fake_generative, fake_search))


@pytest.fixture
def unconfigured_client(
    unconfigured_settings: Settings,
    fake_generative: FakeGenerativeClient,
    fake_search: FakeSearchClient,
) -> TestClient:
    """Test client for an API started without GEMINI_API_KEY."""
    return TestClient(build_app(unconfigured_settings, fake_generative, fake_search))


@pytest.fixture
def api(client: TestClient) -> StudyPartnerAPI:
    """Panel-side API client talking to the in-process server."""
    return StudyPartnerAPI(http_client=client)


@pytest.fixture
def app_client_factory(fake_generative: FakeGenerativeClient, fake_search: FakeSearchClient):
    """Build a test client for custom settings, sharing the fake adapters."""

    def factory(**env: Any) -> TestClient:
        return TestClient(build_app(make_settings(**env), fake_generative, fake_search))

    return factory
