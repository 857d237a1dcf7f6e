"""Gemini-based compliance analyzer.

Uses the Google Generative Language REST API (``generateContent``) with
JSON output requested through the generation config.
"""

import httpx

from compliance_scanner.config import settings
from compliance_scanner.errors import AnalyzerError
from compliance_scanner.logging_config import get_logger
from compliance_scanner.models import ComplianceAnalysis

from .compliance_prompt import SYSTEM_PROMPT, build_prompt, parse_analysis

logger = get_logger(__name__)


class GeminiComplianceAnalyzer:
    """Gemini implementation of the ComplianceAnalyzer protocol."""

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key or settings.gemini_api_key
        self._model_name = model_name or settings.gemini_model
        self._base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def create(
        cls,
        api_key: str | None = None,
        model_name: str | None = None,
    ) -> "GeminiComplianceAnalyzer":
        return cls(api_key=api_key, model_name=model_name)

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    @property
    def model_name(self) -> str:
        return self._model_name

    async def analyze(self, text: str, context: str | None = None) -> ComplianceAnalysis:
        """Analyze document text for compliance violations.

        Raises:
            AnalyzerError: If the request fails or the reply is malformed
        """
        if not self._api_key:
            raise AnalyzerError("GEMINI_API_KEY is not configured")

        payload = {
            "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
            "contents": [{"role": "user", "parts": [{"text": build_prompt(text, context)}]}],
            "generationConfig": {
                "temperature": 0.1,
                "maxOutputTokens": 2000,
                "responseMimeType": "application/json",
            },
        }

        try:
            response = await self.client.post(
                f"{self._base_url}/models/{self._model_name}:generateContent",
                json=payload,
                params={"key": self._api_key},
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("gemini request failed", model=self._model_name, error=str(e))
            raise AnalyzerError(f"Gemini API error: {e}") from e

        try:
            candidates = data.get("candidates") or []
            parts = candidates[0].get("content", {}).get("parts", []) if candidates else []
            content = "".join(part.get("text", "") for part in parts)
        except (AttributeError, KeyError, TypeError) as e:
            logger.error("gemini reply has unexpected shape", model=self._model_name, error=repr(e))
            raise AnalyzerError(f"Gemini API returned an unexpected response shape: {e!r}") from e
        return parse_analysis(content)

    async def is_available(self) -> bool:
        return bool(self._api_key)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
