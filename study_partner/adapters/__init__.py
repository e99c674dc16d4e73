"""Adapters for the external generative and search services."""

from .gemini import GenerativeTextClient, build_conversation, parse_quiz
from .wikipedia import WikipediaSearchClient, article_link, strip_highlighting

__all__ = [
    "GenerativeTextClient",
    "build_conversation",
    "parse_quiz",
    "WikipediaSearchClient",
    "article_link",
    "strip_highlighting",
]
