"""
Summarizer feature: Schemas for generated note metadata.
"""

from pydantic import BaseModel, Field


class SummaryResult(BaseModel):
    """Title, summary and tags generated for captured content."""
    title: str = Field(description="Short title, at most 50 characters.")
    summary: str = Field(description="One or two sentence summary of the content.")
    tags: list[str] = Field(
        default_factory=list,
        description="Up to 5 lowercase single-word topic tags.",
    )
