"""Quiz panel - Generation, answering and scoring state."""

import logging
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Sequence

from pydantic import BaseModel, Field, field_validator

from study_partner.client.api import StudyPartnerAPI
from study_partner.exceptions import ApiRequestError
from study_partner.models import QuizQuestion

logger = logging.getLogger(__name__)

GENERATION_FAILED_ALERT = (
    "Failed to generate quiz. Please make sure your Gemini API key is configured correctly."
)
PERFECT_SCORE = "Perfect score!"
GREAT_JOB = "Great job!"
KEEP_STUDYING = "Keep studying!"


class QuizPhase(str, Enum):
    """Lifecycle of the quiz shown in the panel."""

    EMPTY = "empty"
    GENERATING = "generating"
    READY = "ready"
    SUBMITTED = "submitted"


class OptionMark(str, Enum):
    """How an option is highlighted."""

    NONE = "none"
    SELECTED = "selected"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class QuizPanelState(BaseModel):
    """Everything the quiz panel renders."""

    topic: str = ""
    phase: QuizPhase = QuizPhase.EMPTY
    questions: tuple[QuizQuestion, ...] = ()
    answers: Mapping[int, int] = Field(default_factory=lambda: MappingProxyType({}))
    score: int | None = None
    alert: str | None = None

    model_config = {"frozen": True}

    @field_validator("answers")
    @classmethod
    def freeze_answers(cls, v: Mapping[int, int]) -> Mapping[int, int]:
        return _read_only(v)

    @property
    def is_busy(self) -> bool:
        """Topic input and generate are disabled while generating."""
        return self.phase is QuizPhase.GENERATING

    @property
    def can_generate(self) -> bool:
        return not self.is_busy and bool(self.topic.strip())

    @property
    def submitted(self) -> bool:
        return self.phase is QuizPhase.SUBMITTED

    @property
    def total_questions(self) -> int:
        return len(self.questions)


def _read_only(answers: Mapping[int, int]) -> Mapping[int, int]:
    return MappingProxyType(dict(answers))


def initial_quiz_state() -> QuizPanelState:
    return QuizPanelState()


def score_answers(questions: Sequence[QuizQuestion], answers: Mapping[int, int]) -> int:
    """
    Count the questions answered correctly.

    Unanswered questions and answers for indices outside the quiz never
    count.
    """
    return sum(
        1 for index, question in enumerate(questions) if question.is_correct(answers.get(index))
    )


def verdict(score: int, total: int) -> str:
    """Short feedback line for a submitted quiz."""
    if score == total:
        return PERFECT_SCORE
    if score >= total * 0.7:
        return GREAT_JOB
    return KEEP_STUDYING


def update_topic(state: QuizPanelState, topic: str) -> QuizPanelState:
    if state.is_busy:
        return state
    return state.model_copy(update={"topic": topic})


def start_generation(state: QuizPanelState) -> tuple[QuizPanelState, str | None]:
    """
    Begin generating a quiz for the current topic.

    Any previous quiz, answers, score and alert are cleared.

    Returns:
        The new state and the topic to request, or None if nothing starts
    """
    if not state.can_generate:
        return state, None

    state = state.model_copy(
        update={
            "phase": QuizPhase.GENERATING,
            "questions": (),
            "answers": _read_only({}),
            "score": None,
            "alert": None,
        }
    )
    return state, state.topic


def receive_quiz(state: QuizPanelState, questions: list[QuizQuestion]) -> QuizPanelState:
    if not state.is_busy:
        return state
    if not questions:
        return receive_generation_failure(state)
    return state.model_copy(update={"phase": QuizPhase.READY, "questions": tuple(questions)})


def receive_generation_failure(state: QuizPanelState) -> QuizPanelState:
    if not state.is_busy:
        return state
    return state.model_copy(update={"phase": QuizPhase.EMPTY, "alert": GENERATION_FAILED_ALERT})


def dismiss_alert(state: QuizPanelState) -> QuizPanelState:
    return state.model_copy(update={"alert": None})


def select_answer(state: QuizPanelState, question_index: int, option_index: int) -> QuizPanelState:
    """Record an answer; ignored unless the quiz is ready and the indices exist."""
    if state.phase is not QuizPhase.READY:
        return state
    if not 0 <= question_index < len(state.questions):
        return state
    if not 0 <= option_index < len(state.questions[question_index].options):
        return state
    answers = _read_only({**state.answers, question_index: option_index})
    return state.model_copy(update={"answers": answers})


def submit_answers(state: QuizPanelState) -> QuizPanelState:
    """Score the quiz once; later submits leave the state unchanged."""
    if state.phase is not QuizPhase.READY:
        return state
    return state.model_copy(
        update={
            "phase": QuizPhase.SUBMITTED,
            "score": score_answers(state.questions, state.answers),
        }
    )


def option_mark(state: QuizPanelState, question_index: int, option_index: int) -> OptionMark:
    """
    Highlight for one option.

    Before submission only the current selection is marked. Afterwards the
    correct option is always marked, plus the user's pick if it was wrong.
    """
    selected = state.answers.get(question_index) == option_index

    if not state.submitted:
        return OptionMark.SELECTED if selected else OptionMark.NONE

    if state.questions[question_index].is_correct(option_index):
        return OptionMark.CORRECT
    if selected:
        return OptionMark.INCORRECT
    return OptionMark.NONE


class QuizPanel:
    """Runs quiz panel transitions against the API."""

    def __init__(self, api: StudyPartnerAPI, state: QuizPanelState | None = None):
        self.api = api
        self.state = state or initial_quiz_state()

    def generate(self, topic: str) -> QuizPanelState:
        """
        Generate a new quiz, replacing any current one.

        Args:
            topic: Topic for the questions

        Returns:
            The settled panel state (READY, or EMPTY with an alert)
        """
        self.state = update_topic(self.state, topic)
        self.state, requested_topic = start_generation(self.state)
        if requested_topic is None:
            return self.state

        try:
            questions = self.api.generate_quiz(requested_topic)
            self.state = receive_quiz(self.state, questions)
        except ApiRequestError as e:
            logger.debug("Quiz generation failed: %s", e)
            self.state = receive_generation_failure(self.state)
        finally:
            # Never leave the panel stuck in GENERATING
            self.state = receive_generation_failure(self.state)

        return self.state

    def select(self, question_index: int, option_index: int) -> QuizPanelState:
        self.state = select_answer(self.state, question_index, option_index)
        return self.state

    def submit(self) -> QuizPanelState:
        self.state = submit_answers(self.state)
        return self.state
