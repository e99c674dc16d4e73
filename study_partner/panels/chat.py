"""Chat panel - Transcript state and the transitions that change it."""

import logging
from dataclasses import dataclass

from pydantic import BaseModel, Field

from study_partner.client.api import StudyPartnerAPI
from study_partner.exceptions import ApiRequestError
from study_partner.models import ChatMessage, SearchResult
from study_partner.panels.status import RequestStatus

logger = logging.getLogger(__name__)

GREETING = ChatMessage(
    role="assistant",
    content="Hello! I'm your AI Study Partner. Ask me any question and I'll help you learn!",
)
SEARCH_COMMAND = "/search"
EMPTY_SEARCH_QUERY = "Please provide a search query after /search"
NO_RESULTS = "No results found."


@dataclass(frozen=True)
class SendChat:
    """Ask the chat endpoint to answer the transcript."""

    messages: tuple[ChatMessage, ...]


@dataclass(frozen=True)
class RunSearch:
    """Ask the search endpoint for encyclopedia hits."""

    query: str


ChatCommand = SendChat | RunSearch


class ChatPanelState(BaseModel):
    """Everything the chat panel renders."""

    messages: tuple[ChatMessage, ...] = Field(default=(GREETING,))
    input_text: str = ""
    status: RequestStatus = RequestStatus.IDLE

    model_config = {"frozen": True}

    @property
    def is_busy(self) -> bool:
        """Input and submit are disabled while a request is in flight."""
        return self.status is RequestStatus.PENDING

    @property
    def can_submit(self) -> bool:
        return not self.is_busy and bool(self.input_text.strip())


def initial_chat_state() -> ChatPanelState:
    return ChatPanelState()


def parse_search_command(text: str) -> str | None:
    """
    Get the query of a /search command.

    Returns:
        The stripped query (possibly empty), or None for ordinary chat input
    """
    stripped = text.strip()
    lower = stripped.lower()
    if lower == SEARCH_COMMAND:
        return ""
    if lower.startswith(SEARCH_COMMAND + " "):
        return stripped[len(SEARCH_COMMAND) + 1 :].strip()
    return None


def format_search_results(query: str, results: list[SearchResult]) -> str:
    """Render search hits as the text of one assistant message."""
    if results:
        formatted = "\n\n".join(
            f"{index}. {result.title}\n{result.link}\n{result.snippet or ''}"
            for index, result in enumerate(results, start=1)
        )
    else:
        formatted = NO_RESULTS
    return f'Here are the top results for "{query}":\n\n{formatted}'


def format_error(message: str) -> str:
    return (
        f"Sorry, I encountered an error: {message}. "
        "Please check your API key and try again."
    )


def _append(state: ChatPanelState, message: ChatMessage, **changes) -> ChatPanelState:
    return state.model_copy(update={"messages": state.messages + (message,), **changes})


def update_input(state: ChatPanelState, text: str) -> ChatPanelState:
    if state.is_busy:
        return state
    return state.model_copy(update={"input_text": text})


def submit(state: ChatPanelState) -> tuple[ChatPanelState, ChatCommand | None]:
    """
    Submit the current input.

    The input is cleared and the user message appended before any request
    is made. Blank input and submissions while busy are ignored.

    Returns:
        The new state and the request to perform, if any
    """
    if not state.can_submit:
        return state, None

    text = state.input_text
    user_message = ChatMessage(role="user", content=text)
    state = _append(state, user_message, input_text="", status=RequestStatus.PENDING)

    query = parse_search_command(text)
    if query is None:
        return state, SendChat(messages=state.messages)
    if not query:
        return receive_failure(state, EMPTY_SEARCH_QUERY), None
    return state, RunSearch(query=query)


def receive_reply(state: ChatPanelState, reply: str) -> ChatPanelState:
    if not state.is_busy:
        return state
    return _append(
        state,
        ChatMessage(role="assistant", content=reply),
        status=RequestStatus.SUCCEEDED,
    )


def receive_search_results(
    state: ChatPanelState, query: str, results: list[SearchResult]
) -> ChatPanelState:
    if not state.is_busy:
        return state
    return _append(
        state,
        ChatMessage(role="assistant", content=format_search_results(query, results)),
        status=RequestStatus.SUCCEEDED,
    )


def receive_failure(state: ChatPanelState, message: str) -> ChatPanelState:
    if not state.is_busy:
        return state
    return _append(
        state,
        ChatMessage(role="assistant", content=format_error(message)),
        status=RequestStatus.FAILED,
    )


def release(state: ChatPanelState) -> ChatPanelState:
    """Leave the pending state without touching the transcript."""
    if not state.is_busy:
        return state
    return state.model_copy(update={"status": RequestStatus.FAILED})


class ChatPanel:
    """Runs chat panel transitions against the API."""

    def __init__(self, api: StudyPartnerAPI, state: ChatPanelState | None = None):
        self.api = api
        self.state = state or initial_chat_state()

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return self.state.messages

    def send(self, text: str) -> ChatPanelState:
        """
        Submit a line of user input and wait for the outcome.

        Args:
            text: Raw input, a question or a /search command

        Returns:
            The settled panel state
        """
        self.state = update_input(self.state, text)
        self.state, command = submit(self.state)
        if command is None:
            return self.state

        try:
            if isinstance(command, RunSearch):
                results = self.api.search(command.query)
                self.state = receive_search_results(self.state, command.query, results)
            else:
                reply = self.api.chat(list(command.messages))
                self.state = receive_reply(self.state, reply)
        except ApiRequestError as e:
            logger.debug("Chat panel request failed: %s", e)
            self.state = receive_failure(self.state, e.message)
        finally:
            self.state = release(self.state)

        return self.state
