from pydantic import BaseModel, Field


class SearchResult(BaseModel):
    """A normalized encyclopedia search hit."""

    title: str
    link: str
    snippet: str = ""


class SearchResponse(BaseModel):
    results: list[SearchResult] = Field(default_factory=list)
