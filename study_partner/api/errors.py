"""Mapping of upstream error messages to user-facing remediation text."""

from dataclasses import dataclass
from typing import Callable

Predicate = Callable[[str], bool]


def contains_any(*needles: str) -> Predicate:
    """Build a predicate matching lower-cased text containing any needle."""
    return lambda text: any(needle in text for needle in needles)


@dataclass(frozen=True)
class ClassificationRule:
    """A predicate over the lower-cased message and the text it maps to."""

    matches: Predicate
    remediation: str


class ErrorClassifier:
    """
    Ordered rules evaluated top to bottom; the first match wins.

    Messages no rule matches are passed through unchanged, and an empty
    message becomes the fallback text.
    """

    def __init__(self, rules: list[ClassificationRule], fallback: str):
        self.rules = list(rules)
        self.fallback = fallback

    def classify(self, message: str | None) -> str:
        if not message:
            return self.fallback

        lower = message.lower()
        for rule in self.rules:
            if rule.matches(lower):
                return rule.remediation
        return message

    def classify_exception(self, error: BaseException) -> str:
        return self.classify(str(error))


GEMINI_ERRORS = ErrorClassifier(
    rules=[
        ClassificationRule(
            contains_any("permission", "unauthorized", "api key"),
            "Invalid Gemini API key. Please update GEMINI_API_KEY in your .env file "
            "from https://aistudio.google.com/app/apikey",
        ),
        ClassificationRule(
            contains_any("quota", "billing", "exceeded"),
            "Gemini API quota exceeded. Please review your Google AI Studio usage and billing.",
        ),
        ClassificationRule(
            contains_any("rate limit"),
            "Gemini rate limit reached. Please wait a moment and try again.",
        ),
    ],
    fallback="Gemini API request failed.",
)

SEARCH_ERRORS = ErrorClassifier(
    rules=[
        ClassificationRule(
            contains_any("permission", "api key"),
            "The search service rejected the request. Check SEARCH_API_URL in your .env.",
        ),
        ClassificationRule(
            contains_any("daily", "limit", "quota"),
            "Search quota exceeded. Please wait a moment and try again.",
        ),
    ],
    fallback="Search request failed.",
)
