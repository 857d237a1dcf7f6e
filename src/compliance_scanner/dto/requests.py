"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


class AnalyzeRequest(BaseModel):
    """Request DTO for a compliance analysis.

    The handler will convert this to a call to AnalysisService.
    """

    text: str = Field(..., description="The document text to analyze", min_length=1)
    document_id: str | None = Field(
        None,
        description="Stable document id; used in the cache key instead of the text hash",
    )
    content_type: str | None = Field(
        None,
        description="Scan content type (social_media, website_content, advertisement, ...)",
    )
    marketing: bool = Field(
        True,
        description="Run the marketing-context analysis",
    )
