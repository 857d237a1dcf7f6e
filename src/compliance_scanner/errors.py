"""Exceptions raised by provider adapters and services."""


class AnalyzerError(RuntimeError):
    """The AI provider failed or returned an unusable analysis."""


class AuthProviderError(RuntimeError):
    """The auth provider rejected or failed a sign-in or refresh call.

    Attributes:
        status: HTTP status returned by the provider, if any
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
