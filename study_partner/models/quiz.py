"""Pydantic models for quiz data structures."""

from pydantic import BaseModel, Field, field_validator

OPTIONS_PER_QUESTION = 4


class QuizQuestion(BaseModel):
    """A single multiple choice question with four options."""

    question_text: str = Field(
        ...,
        min_length=1,
        alias="question",
        description="The question text",
    )
    options: list[str] = Field(
        ...,
        description="Exactly four answer options, in display order",
    )
    correct_answer: int = Field(
        ...,
        ge=0,
        le=OPTIONS_PER_QUESTION - 1,
        alias="correctAnswer",
        description="Index (0-3) of the correct option",
    )

    @field_validator("options")
    @classmethod
    def validate_options(cls, v: list[str]) -> list[str]:
        """Ensure there are exactly four non-empty options."""
        if len(v) != OPTIONS_PER_QUESTION:
            raise ValueError(
                f"Expected {OPTIONS_PER_QUESTION} options, got {len(v)}"
            )
        for index, value in enumerate(v):
            if not value or not value.strip():
                raise ValueError(f"Option {index} cannot be empty")
        return v

    def is_correct(self, option_index: int | None) -> bool:
        """Check whether an option index is the correct answer."""
        return option_index is not None and option_index == self.correct_answer

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "question": "Which organelle carries out photosynthesis?",
                "options": ["Mitochondrion", "Chloroplast", "Nucleus", "Ribosome"],
                "correctAnswer": 1,
            }
        },
    }


class Quiz(BaseModel):
    """A generated quiz as returned by /api/generate-quiz."""

    questions: list[QuizQuestion] = Field(
        ...,
        min_length=1,
        description="Generated questions (five are requested, not enforced)",
    )

    @property
    def total_questions(self) -> int:
        """Get the number of questions in the quiz."""
        return len(self.questions)


class QuizRequest(BaseModel):
    """Body of a quiz generation request."""

    topic: str = Field(..., description="Topic to generate the quiz about")

    model_config = {
        "json_schema_extra": {"example": {"topic": "Photosynthesis"}}
    }
