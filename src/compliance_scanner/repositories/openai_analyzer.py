"""OpenAI-based compliance analyzer.

Calls the chat completions endpoint directly over httpx and asks the
model for a JSON compliance report.
"""

import httpx

from compliance_scanner.config import settings
from compliance_scanner.errors import AnalyzerError
from compliance_scanner.logging_config import get_logger
from compliance_scanner.models import ComplianceAnalysis

from .compliance_prompt import SYSTEM_PROMPT, build_prompt, parse_analysis

logger = get_logger(__name__)


class OpenAIComplianceAnalyzer:
    """OpenAI implementation of the ComplianceAnalyzer protocol.

    This class satisfies the ComplianceAnalyzer protocol through
    structural typing - no explicit inheritance needed.

    Example:
        ```python
        analyzer = OpenAIComplianceAnalyzer.create()
        analysis = await analyzer.analyze("Guaranteed 18% returns, zero risk!")
        print(analysis.compliance_score)
        ```
    """

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        base_url: str | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the OpenAI analyzer.

        Args:
            api_key: OpenAI API key. Defaults to settings.openai_api_key.
            model_name: Chat model. Defaults to settings.openai_model.
            base_url: API base URL. Defaults to settings.openai_base_url.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self._api_key = api_key or settings.openai_api_key
        self._model_name = model_name or settings.openai_model
        self._base_url = (base_url or settings.openai_base_url).rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def create(
        cls,
        api_key: str | None = None,
        model_name: str | None = None,
    ) -> "OpenAIComplianceAnalyzer":
        """Factory method to create OpenAIComplianceAnalyzer with defaults.

        Args:
            api_key: API key. If None, uses settings.
            model_name: Model name. If None, uses settings.

        Returns:
            Configured OpenAIComplianceAnalyzer
        """
        return cls(api_key=api_key, model_name=model_name)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    @property
    def model_name(self) -> str:
        return self._model_name

    async def analyze(self, text: str, context: str | None = None) -> ComplianceAnalysis:
        """Analyze document text for compliance violations.

        Args:
            text: The document text
            context: Optional marketing context

        Returns:
            The parsed analysis

        Raises:
            AnalyzerError: If the request fails or the reply is malformed
        """
        if not self._api_key:
            raise AnalyzerError("OPENAI_API_KEY is not configured")

        payload = {
            "model": self._model_name,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(text, context)},
            ],
            "temperature": 0.1,
            "max_tokens": 2000,
        }

        try:
            response = await self.client.post(
                f"{self._base_url}/chat/completions",
                json=payload,
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("openai request failed", model=self._model_name, error=str(e))
            raise AnalyzerError(f"OpenAI API error: {e}") from e

        try:
            choices = data.get("choices") or []
            content = choices[0].get("message", {}).get("content") if choices else None
        except (AttributeError, KeyError, TypeError) as e:
            logger.error("openai reply has unexpected shape", model=self._model_name, error=repr(e))
            raise AnalyzerError(f"OpenAI API returned an unexpected response shape: {e!r}") from e
        return parse_analysis(content)

    async def is_available(self) -> bool:
        """Check that an API key is configured.

        Avoids a billable call on every health check.
        """
        return bool(self._api_key)

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
