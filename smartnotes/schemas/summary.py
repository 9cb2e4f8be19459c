"""
SmartNotes Backend — Summarization Request/Response Contract
=============================================================

What:  The shape of the one non-CRUD network interaction.
Why:   The note-creation flow depends on exactly these fields; keeping the
       contract in one module lets the route, the service and the model
       output parser agree on it.

Request:  { content, length, tone, bulletPoints }
Response: { title, summary, keywords }

`bulletPoints` is accepted in camelCase on the wire and exposed as
`bullet_points` in Python.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from smartnotes.models.note import SummaryLength, SummaryTone


class SummarizeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str = Field(description="Text to summarize (non-empty)")
    length: SummaryLength = Field(default=SummaryLength.MEDIUM)
    tone: SummaryTone = Field(default=SummaryTone.PROFESSIONAL)
    bullet_points: bool = Field(default=False, alias="bulletPoints")


class SummarizeResponse(BaseModel):
    """
    A successful summarization.

    Also used to validate the model's raw JSON output: a response missing
    `title`, `summary` or `keywords`, or with non-string keywords, fails
    validation and is reported as a malformed response.
    """
    title: str = Field(min_length=1)
    summary: str = Field(min_length=1)
    keywords: List[str]

    @field_validator("title", "summary")
    @classmethod
    def strip_text(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped

    @field_validator("keywords")
    @classmethod
    def drop_blank_keywords(cls, v: List[str]) -> List[str]:
        return [k.strip() for k in v if k and k.strip()]
