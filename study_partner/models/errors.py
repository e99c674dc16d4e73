from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body of every non-success API response."""

    error: str
    details: str | None = None
