"""AI compliance analyzer protocol.

Defines the interface for any generative-AI service that can review
document text for regulatory violations.

Implementations:
- OpenAI chat completions
- Google Generative Language (Gemini)
"""

from typing import Protocol, runtime_checkable

from compliance_scanner.models import ComplianceAnalysis


@runtime_checkable
class ComplianceAnalyzer(Protocol):
    """Protocol for AI compliance analyzers."""

    @property
    def model_name(self) -> str:
        """Return the name/identifier of the model."""
        ...

    async def analyze(self, text: str, context: str | None = None) -> ComplianceAnalysis:
        """Analyze document text for compliance violations.

        Args:
            text: The document text
            context: Optional marketing context (e.g. "social_media_marketing")

        Returns:
            The parsed analysis

        Raises:
            AnalyzerError: If the provider fails or returns malformed output
        """
        ...

    async def is_available(self) -> bool:
        """Check if the analyzer is configured and reachable."""
        ...
