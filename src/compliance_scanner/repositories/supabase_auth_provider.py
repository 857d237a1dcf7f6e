"""Supabase (GoTrue) implementation of AuthProvider.

Talks to the ``/auth/v1/token`` endpoint over httpx for password
sign-in and refresh-token exchange.
"""

from datetime import datetime, timedelta, timezone

import httpx

from compliance_scanner.config import settings
from compliance_scanner.entities import Role, User
from compliance_scanner.errors import AuthProviderError
from compliance_scanner.logging_config import get_logger
from compliance_scanner.protocols import SessionGrant

logger = get_logger(__name__)


def _parse_user(data: dict | None) -> User | None:
    if not data:
        return None
    metadata = data.get("user_metadata") or {}
    try:
        role = Role(metadata.get("role", Role.USER.value))
    except ValueError:
        role = Role.USER
    return User(id=str(data["id"]), email=data.get("email", ""), role=role)


def _parse_grant(data: dict) -> SessionGrant:
    if "expires_at" in data:
        expires_at = datetime.fromtimestamp(int(data["expires_at"]), tz=timezone.utc)
    else:
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=int(data.get("expires_in", 3600)))

    return SessionGrant(
        token=data["access_token"],
        refresh_token=data.get("refresh_token"),
        expires_at=expires_at,
        user=_parse_user(data.get("user")),
    )


class SupabaseAuthProvider:
    """Supabase GoTrue client.

    This class satisfies the AuthProvider protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        provider = SupabaseAuthProvider.create()
        grant = provider.sign_in("analyst@example.com", "secret")
        grant = provider.refresh(grant.refresh_token)
        ```
    """

    def __init__(
        self,
        url: str | None = None,
        anon_key: str | None = None,
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the Supabase auth provider.

        Args:
            url: Project URL. Defaults to settings.supabase_url.
            anon_key: Public anon key. Defaults to settings.supabase_anon_key.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self._url = (url or settings.supabase_url).rstrip("/")
        self._anon_key = anon_key or settings.supabase_anon_key or ""
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={"apikey": self._anon_key},
        )

    @classmethod
    def create(cls) -> "SupabaseAuthProvider":
        """Factory method using settings for URL and key."""
        return cls()

    def _token_request(self, grant_type: str, body: dict) -> SessionGrant:
        try:
            response = self._client.post(
                f"{self._url}/auth/v1/token",
                params={"grant_type": grant_type},
                json=body,
            )
        except httpx.HTTPError as e:
            raise AuthProviderError(f"Auth provider unreachable: {e}") from e

        if response.status_code >= 400:
            try:
                error_body = response.json()
            except ValueError:
                error_body = None
            if isinstance(error_body, dict):
                detail = error_body.get("error_description") or error_body.get("msg") or ""
            else:
                detail = response.text
            logger.warning("auth token request rejected", grant_type=grant_type, status=response.status_code)
            raise AuthProviderError(detail or "Authentication failed", status=response.status_code)

        try:
            return _parse_grant(response.json())
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("malformed auth token response", grant_type=grant_type, error=repr(e))
            raise AuthProviderError(f"Malformed auth response: {e!r}") from e

    def sign_in(self, email: str, password: str) -> SessionGrant:
        return self._token_request("password", {"email": email, "password": password})

    def refresh(self, refresh_token: str) -> SessionGrant:
        return self._token_request("refresh_token", {"refresh_token": refresh_token})

    def close(self) -> None:
        self._client.close()
