"""Memoized compliance analysis.

Business logic:
1. Resolve the marketing context from the scan's content type
2. Build the cache key from the document id (or text hash) and options
3. Serve a cached result when one validates
4. Otherwise call the AI analyzer and cache its result
"""

import time
from dataclasses import dataclass

from pydantic import ValidationError

from compliance_scanner.logging_config import get_logger
from compliance_scanner.models import ComplianceAnalysis
from compliance_scanner.protocols import ComplianceAnalyzer
from compliance_scanner.utils import hash_text

from .cache_service import AnalysisCacheService

logger = get_logger(__name__)

GENERAL_MARKETING = "general_marketing"

MARKETING_CONTEXTS = {
    "social_media": "social_media_marketing",
    "website_content": "website_marketing",
    "advertisement": "advertisement_marketing",
    "email_campaign": "email_marketing",
    "brochure": "brochure_marketing",
    "presentation": "presentation_marketing",
}


def marketing_context_for(content_type: str | None) -> str:
    """Map a scan content type to its marketing context."""
    return MARKETING_CONTEXTS.get(content_type or "", GENERAL_MARKETING)


@dataclass(frozen=True)
class AnalysisOutcome:
    """Result of one analysis request.

    Attributes:
        key: Cache key the result lives under
        analysis: The compliance analysis
        cache_used: Whether the result came from the cache
        processing_time_ms: Wall time spent serving the request
    """

    key: str
    analysis: ComplianceAnalysis
    cache_used: bool
    processing_time_ms: float


class AnalysisService:
    """Analysis orchestration: cache first, AI provider on a miss."""

    def __init__(self, cache: AnalysisCacheService, analyzer: ComplianceAnalyzer) -> None:
        self._cache = cache
        self._analyzer = analyzer

    async def analyze(
        self,
        text: str,
        document_id: str | None = None,
        content_type: str | None = None,
        marketing: bool = True,
    ) -> AnalysisOutcome:
        """Analyze document text, reusing a cached result when possible.

        Args:
            text: The document text
            document_id: Stable id used in place of the text hash when given
            content_type: Scan content type (e.g. "social_media")
            marketing: Whether to run the marketing-context analysis

        Returns:
            AnalysisOutcome with the result and whether the cache served it

        Raises:
            AnalyzerError: If the AI provider fails; nothing is cached
        """
        start_time = time.perf_counter()
        context = marketing_context_for(content_type) if marketing else None
        key = self._cache.key_for(document_id or hash_text(text), marketing=marketing, context=context)

        cached = self._cache.get(key)
        if cached is not None:
            try:
                analysis = ComplianceAnalysis.model_validate(cached)
            except ValidationError:
                logger.warning("ignoring malformed cached analysis", key=key)
            else:
                logger.info("serving analysis from cache", key=key, document_id=document_id)
                return AnalysisOutcome(
                    key=key,
                    analysis=analysis,
                    cache_used=True,
                    processing_time_ms=(time.perf_counter() - start_time) * 1000,
                )

        logger.info(
            "starting compliance analysis",
            document_id=document_id,
            text_length=len(text),
            context=context,
            model=self._analyzer.model_name,
        )
        analysis = await self._analyzer.analyze(text, context=context)
        self._cache.set(key, analysis.model_dump(mode="json"))

        processing_time_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "compliance analysis complete",
            document_id=document_id,
            score=analysis.compliance_score,
            duration_ms=round(processing_time_ms, 1),
        )
        return AnalysisOutcome(
            key=key,
            analysis=analysis,
            cache_used=False,
            processing_time_ms=processing_time_ms,
        )

    async def is_healthy(self) -> bool:
        return self._cache.is_healthy() and await self._analyzer.is_available()
