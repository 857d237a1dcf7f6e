"""Outbound HTTP client for the compliance backend.

Holds the bearer token the session store pushes on login and refresh,
and satisfies the AuthTokenSink protocol.
"""

import httpx


class ApiClient:
    """Thin httpx wrapper carrying the session's bearer token.

    Example:
        ```python
        client = ApiClient("http://localhost:8000")
        client.set_auth_token(token)
        client.request("POST", "/analysis", json={"text": "..."})
        ```
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def set_auth_token(self, token: str) -> None:
        self._client.headers["Authorization"] = f"Bearer {token}"

    def clear_auth_token(self) -> None:
        self._client.headers.pop("Authorization", None)

    @property
    def auth_token(self) -> str | None:
        """Get the bearer token currently attached, if any."""
        header = self._client.headers.get("Authorization")
        return header.removeprefix("Bearer ") if header else None

    def request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Send a request and raise on HTTP error status.

        Raises:
            httpx.HTTPStatusError: If the response status is 4xx/5xx
        """
        response = self._client.request(method, path, **kwargs)
        response.raise_for_status()
        return response

    def close(self) -> None:
        self._client.close()
