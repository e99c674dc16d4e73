"""Generative-text adapter - Study chat and quiz generation through Gemini."""

import logging
from typing import Any, Iterable

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from pydantic import ValidationError

from study_partner.config.settings import Settings
from study_partner.exceptions import MalformedGeneratedContent, UpstreamRequestFailed
from study_partner.models.chat import ChatMessage
from study_partner.models.quiz import Quiz

logger = logging.getLogger(__name__)

STUDY_CHAT_PROMPT = (
    "You are a helpful AI study partner. Provide clear, educational explanations "
    "to help students learn. Be concise but thorough."
)

QUIZ_INSTRUCTIONS = (
    "You are a quiz generator. Generate exactly 5 multiple-choice questions with 4 "
    "options each. Respond ONLY with valid JSON in this exact format: "
    '{"questions": [{"question": "...", "options": ["A", "B", "C", "D"], '
    '"correctAnswer": 0}]} where correctAnswer is the index (0-3) of the correct option.'
)


def build_conversation(
    messages: Iterable[ChatMessage], include_prompt: bool = True
) -> list[BaseMessage]:
    """
    Turn a chat transcript into the turn list sent to the model.

    The study instruction goes first as a user turn. Assistant entries
    become model turns, everything else a user turn. Entries without
    content are dropped.

    Args:
        messages: Transcript, oldest first
        include_prompt: Whether to prepend the study instruction

    Returns:
        LangChain messages ready for invoke()
    """
    conversation: list[BaseMessage] = []

    if include_prompt:
        conversation.append(HumanMessage(content=STUDY_CHAT_PROMPT))

    for message in messages:
        if not message.content:
            continue
        if message.role == "assistant":
            conversation.append(AIMessage(content=message.content))
        else:
            conversation.append(HumanMessage(content=message.content))

    return conversation


def build_quiz_prompt(topic: str) -> str:
    """Build the single prompt used for quiz generation."""
    return (
        f"{QUIZ_INSTRUCTIONS}\n\nTopic: {topic}\n\n"
        "Remember: respond with raw JSON only."
    )


def extract_text(message: BaseMessage) -> str:
    """
    Get the text of a model response.

    Content can be a plain string or a list of content blocks, in which
    case the text blocks are concatenated.
    """
    content: Any = message.content
    if isinstance(content, str):
        return content

    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def parse_quiz(text: str) -> Quiz:
    """
    Parse generated quiz JSON.

    Args:
        text: Raw model output

    Returns:
        Validated Quiz

    Raises:
        MalformedGeneratedContent: If the text is not JSON of the quiz shape
    """
    try:
        return Quiz.model_validate_json(text)
    except ValidationError as e:
        raise MalformedGeneratedContent(
            f"Generated quiz is not valid: {e.error_count()} problem(s), "
            f"first: {e.errors()[0]['msg']}"
        ) from e


class GenerativeTextClient:
    """Calls the generative model for study chat replies and quizzes."""

    def __init__(self, chat_model: BaseChatModel, quiz_model: BaseChatModel):
        self.chat_model = chat_model
        self.quiz_model = quiz_model

    @classmethod
    def from_settings(cls, settings: Settings) -> "GenerativeTextClient":
        """
        Create a client backed by Gemini.

        Args:
            settings: Settings with a configured gemini_api_key

        Returns:
            GenerativeTextClient using ChatGoogleGenerativeAI models
        """
        chat_model = ChatGoogleGenerativeAI(
            model=settings.model_name,
            google_api_key=settings.gemini_api_key,
            temperature=settings.chat_temperature,
            max_retries=0,
        )
        # JSON mode for quizzes
        quiz_model = ChatGoogleGenerativeAI(
            model=settings.model_name,
            google_api_key=settings.gemini_api_key,
            temperature=settings.quiz_temperature,
            response_mime_type="application/json",
            max_retries=0,
        )
        return cls(chat_model=chat_model, quiz_model=quiz_model)

    def chat(self, messages: list[ChatMessage]) -> str:
        """
        Get the assistant reply for a transcript.

        Args:
            messages: Transcript including the latest user message

        Returns:
            Reply text

        Raises:
            UpstreamRequestFailed: If the model call fails
        """
        conversation = build_conversation(messages)
        logger.debug("Requesting chat reply for %d turn(s)", len(conversation))

        try:
            response = self.chat_model.invoke(conversation)
        except Exception as e:
            raise UpstreamRequestFailed(str(e) or "Gemini API request failed.") from e

        return extract_text(response)

    def generate_quiz(self, topic: str) -> Quiz:
        """
        Generate a multiple choice quiz about a topic.

        Args:
            topic: Topic the questions should cover

        Returns:
            Parsed Quiz

        Raises:
            UpstreamRequestFailed: If the model call fails
            MalformedGeneratedContent: If the output cannot be parsed
        """
        logger.debug("Requesting quiz for topic %r", topic)

        try:
            response = self.quiz_model.invoke(build_quiz_prompt(topic))
        except Exception as e:
            raise UpstreamRequestFailed(str(e) or "Gemini API request failed.") from e

        return parse_quiz(extract_text(response))
