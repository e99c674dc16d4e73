"""Pydantic models for the study chat."""

from typing import Literal

from pydantic import BaseModel, Field

Role = Literal["user", "assistant"]


class ChatMessage(BaseModel):
    """One entry of a chat transcript."""

    role: Role = Field(..., description="Who wrote the message")
    content: str = Field(..., description="Message text")

    model_config = {"frozen": True}


class ChatRequest(BaseModel):
    """Body of a chat request: the full transcript so far."""

    messages: list[ChatMessage] = Field(
        ...,
        description="Transcript, oldest first, ending with the new user message",
    )


class ChatResponse(BaseModel):
    """The assistant reply to a chat request."""

    response: str
