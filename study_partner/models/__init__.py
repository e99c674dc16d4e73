"""Data models for chat, quiz and search payloads."""

from .chat import ChatMessage, ChatRequest, ChatResponse, Role
from .quiz import OPTIONS_PER_QUESTION, Quiz, QuizQuestion, QuizRequest
from .errors import ErrorResponse
from .search import SearchResponse, SearchResult

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "Role",
    "OPTIONS_PER_QUESTION",
    "Quiz",
    "QuizQuestion",
    "QuizRequest",
    "SearchResult",
    "SearchResponse",
    "ErrorResponse",
]
