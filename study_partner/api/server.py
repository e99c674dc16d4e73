"""FastAPI application proxying the study panels to Gemini and Wikipedia."""

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from study_partner.adapters.gemini import GenerativeTextClient
from study_partner.adapters.wikipedia import WikipediaSearchClient
from study_partner.api.errors import GEMINI_ERRORS, SEARCH_ERRORS
from study_partner.config.settings import Settings, get_settings
from study_partner.exceptions import (
    ConfigurationMissing,
    InvalidClientInput,
    MalformedGeneratedContent,
    UpstreamRequestFailed,
    UpstreamSearchError,
)
from study_partner.models import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    Quiz,
    QuizRequest,
    SearchResponse,
)

logger = logging.getLogger(__name__)

GEMINI_NOT_CONFIGURED = "Gemini is not configured"

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def error_response(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    """Render an ErrorResponse body."""
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(body.model_dump(exclude_none=True), status_code=status_code)


def get_app_settings(request: Request) -> Settings:
    """Dependency to get the settings the app was created with."""
    return request.app.state.settings


def get_generative_client(request: Request) -> GenerativeTextClient | None:
    """Dependency to get the app's Gemini client, or None when no key is set."""
    return request.app.state.generative_client


def get_search_client(
    settings: Settings = Depends(get_app_settings),
) -> WikipediaSearchClient:
    """Dependency to get the encyclopedia search client."""
    return WikipediaSearchClient.from_settings(settings)


def require_gemini(
    settings: Settings, client: GenerativeTextClient | None, feature: str
) -> GenerativeTextClient:
    """
    Gate a request on the Gemini credential.

    Raises:
        ConfigurationMissing: If GEMINI_API_KEY is not set
    """
    if not settings.gemini_configured or client is None:
        raise ConfigurationMissing(
            GEMINI_NOT_CONFIGURED,
            f"Add GEMINI_API_KEY to your .env to enable {feature}.",
        )
    return client


async def handle_configuration_missing(
    request: Request, exc: ConfigurationMissing
) -> JSONResponse:
    logger.warning("%s %s: %s", request.method, request.url.path, exc.error)
    return error_response(503, exc.error, exc.details)


async def handle_invalid_input(request: Request, exc: InvalidClientInput) -> JSONResponse:
    return error_response(400, exc.error, exc.details)


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return error_response(400, "Invalid request", problems or None)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Settings to use (loaded from the environment by default)

    Returns:
        FastAPI app with the chat, search and quiz endpoints
    """
    settings = settings or get_settings()

    app = FastAPI(title="Study Partner API")
    app.state.settings = settings
    app.state.generative_client = (
        GenerativeTextClient.from_settings(settings) if settings.gemini_configured else None
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ConfigurationMissing, handle_configuration_missing)
    app.add_exception_handler(InvalidClientInput, handle_invalid_input)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    if not settings.gemini_configured:
        logger.warning("GEMINI_API_KEY is not set; chat and quiz generation will answer 503")

    @app.get("/")
    def read_root(settings: Settings = Depends(get_app_settings)):
        return {
            "message": "Study Partner API running",
            "gemini_configured": settings.gemini_configured,
        }

    @app.post("/api/chat", response_model=ChatResponse, responses=ERROR_RESPONSES)
    def chat(
        payload: ChatRequest,
        settings: Settings = Depends(get_app_settings),
        client: GenerativeTextClient | None = Depends(get_generative_client),
    ):
        client = require_gemini(settings, client, "chat")

        try:
            reply = client.chat(payload.messages)
        except UpstreamRequestFailed as e:
            logger.exception("Chat request failed: %s", e)
            return error_response(
                500, "Failed to get response from Gemini", GEMINI_ERRORS.classify_exception(e)
            )

        return ChatResponse(response=reply)

    @app.get("/api/search", response_model=SearchResponse, responses=ERROR_RESPONSES)
    def search(
        q: str = "",
        settings: Settings = Depends(get_app_settings),
        client: WikipediaSearchClient = Depends(get_search_client),
    ):
        query = q.strip()
        if not query:
            raise InvalidClientInput("Missing query parameter q")

        if settings.search_requires_gemini_key and not settings.gemini_configured:
            raise ConfigurationMissing(
                GEMINI_NOT_CONFIGURED,
                "Add GEMINI_API_KEY to your .env to enable search.",
            )

        try:
            results = client.search(query)
        except UpstreamSearchError as e:
            logger.exception("Search failed for %r: %s", query, e)
            return error_response(
                500, "Failed to perform search", SEARCH_ERRORS.classify_exception(e)
            )

        return SearchResponse(results=results)

    @app.post("/api/generate-quiz", response_model=Quiz, responses=ERROR_RESPONSES)
    def generate_quiz(
        payload: QuizRequest,
        settings: Settings = Depends(get_app_settings),
        client: GenerativeTextClient | None = Depends(get_generative_client),
    ):
        topic = payload.topic.strip()
        if not topic:
            raise InvalidClientInput("Missing quiz topic", "Provide a topic to generate a quiz about.")

        client = require_gemini(settings, client, "quiz generation")

        try:
            quiz = client.generate_quiz(topic)
        except (UpstreamRequestFailed, MalformedGeneratedContent) as e:
            logger.exception("Quiz generation failed for %r: %s", topic, e)
            return error_response(
                500, "Failed to generate quiz", GEMINI_ERRORS.classify_exception(e)
            )

        return quiz

    return app
