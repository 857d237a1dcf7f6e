"""Pydantic models for AI analysis results.

These validate provider output and cached payloads; a cached value that
no longer matches this shape is treated as a miss.
"""

from typing import Literal

from pydantic import BaseModel, Field

Severity = Literal["low", "medium", "high", "critical"]
OverallStatus = Literal["compliant", "non_compliant", "needs_review"]


class Violation(BaseModel):
    """A single regulatory violation reported by the analyzer."""

    category: str
    title: str
    description: str
    severity: Severity
    confidence: float = Field(..., ge=0.0, le=1.0)
    suggestion: str | None = None


class ComplianceAnalysis(BaseModel):
    """Structured compliance review of one document."""

    compliance_score: float = Field(..., ge=0, le=100, alias="complianceScore")
    overall_status: OverallStatus = Field(..., alias="overallStatus")
    violations: list[Violation] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)

    model_config = {"populate_by_name": True}
