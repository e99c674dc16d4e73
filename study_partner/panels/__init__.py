"""Chat and quiz panels: owned state plus pure transitions."""

from .chat import ChatPanel, ChatPanelState, initial_chat_state
from .quiz import OptionMark, QuizPanel, QuizPanelState, QuizPhase, initial_quiz_state, score_answers
from .status import RequestStatus

__all__ = [
    "ChatPanel",
    "ChatPanelState",
    "initial_chat_state",
    "OptionMark",
    "QuizPanel",
    "QuizPanelState",
    "QuizPhase",
    "initial_quiz_state",
    "score_answers",
    "RequestStatus",
]
