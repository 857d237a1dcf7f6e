"""HTTP handler for compliance analysis requests."""

from fastapi import HTTPException, status

from compliance_scanner.dto import AnalyzeRequest, AnalyzeResponse
from compliance_scanner.errors import AnalyzerError
from compliance_scanner.logging_config import get_logger
from compliance_scanner.services import AnalysisService

logger = get_logger(__name__)


class AnalysisHandler:
    """HTTP handler delegating to AnalysisService."""

    def __init__(self, analysis_service: AnalysisService) -> None:
        self._analysis = analysis_service

    async def analyze(self, request: AnalyzeRequest) -> AnalyzeResponse:
        """Handle POST /analysis requests.

        Raises:
            HTTPException: 502 if the AI provider fails, 500 otherwise
        """
        try:
            outcome = await self._analysis.analyze(
                text=request.text,
                document_id=request.document_id,
                content_type=request.content_type,
                marketing=request.marketing,
            )
        except AnalyzerError as e:
            logger.error("analysis failed", document_id=request.document_id, error=str(e))
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"AI analysis failed: {e}",
            ) from e
        except Exception as e:
            logger.exception("unexpected analysis error", document_id=request.document_id)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to analyze document: {e}",
            ) from e

        return AnalyzeResponse(
            key=outcome.key,
            cache_used=outcome.cache_used,
            processing_time_ms=outcome.processing_time_ms,
            result=outcome.analysis,
        )
