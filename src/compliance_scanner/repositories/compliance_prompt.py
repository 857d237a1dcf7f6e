"""Prompt and response parsing shared by the AI analyzers."""

import json
import re

from pydantic import ValidationError

from compliance_scanner.errors import AnalyzerError
from compliance_scanner.models import ComplianceAnalysis

SYSTEM_PROMPT = (
    "You are an expert RBI compliance analyst. Analyze documents for compliance "
    "issues and provide structured feedback in JSON format."
)

FOCUS_AREAS = [
    "Data protection and privacy",
    "Financial reporting standards",
    "Risk management requirements",
    "Customer due diligence",
    "Anti-money laundering provisions",
    "Operational risk management",
    "Technology and cybersecurity guidelines",
]

RESPONSE_FORMAT = """{
  "complianceScore": <number between 0-100>,
  "overallStatus": "<compliant|non_compliant|needs_review>",
  "violations": [
    {
      "category": "<compliance category>",
      "title": "<violation title>",
      "description": "<detailed description>",
      "severity": "<low|medium|high|critical>",
      "confidence": <number between 0-1>,
      "suggestion": "<suggested fix>"
    }
  ],
  "confidence": <overall confidence score 0-1>
}"""

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.MULTILINE)


def build_prompt(text: str, context: str | None = None) -> str:
    """Build the user prompt for a compliance review.

    Args:
        text: The document text
        context: Optional marketing context

    Returns:
        The prompt string
    """
    focus = "\n".join(f"{i}. {area}" for i, area in enumerate(FOCUS_AREAS, start=1))
    context_line = f"\nThe document is {context.replace('_', ' ')} material.\n" if context else ""
    return (
        "Analyze the following document text for RBI (Reserve Bank of India) "
        f"compliance issues.\n{context_line}\nFocus on:\n{focus}\n\n"
        f"Document text:\n{text}\n\n"
        f"Provide your analysis in the following JSON format:\n{RESPONSE_FORMAT}"
    )


def parse_analysis(content: str | None) -> ComplianceAnalysis:
    """Parse the model's JSON reply into a ComplianceAnalysis.

    Raises:
        AnalyzerError: If the reply is empty, not JSON, or the wrong shape
    """
    if not content:
        raise AnalyzerError("No analysis response from AI")
    if not isinstance(content, str):
        raise AnalyzerError(f"AI response content is not text: {type(content).__name__}")

    cleaned = _FENCE.sub("", content.strip())
    try:
        return ComplianceAnalysis.model_validate(json.loads(cleaned))
    except json.JSONDecodeError as e:
        raise AnalyzerError(f"AI response is not valid JSON: {e}") from e
    except ValidationError as e:
        raise AnalyzerError(f"AI response has unexpected shape: {e}") from e
