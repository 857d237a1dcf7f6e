"""Auth provider and outbound token holder protocols."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable

from compliance_scanner.entities import User


@dataclass(frozen=True)
class SessionGrant:
    """Tokens issued by the auth provider on sign-in or refresh.

    Attributes:
        token: Bearer access token
        refresh_token: Token used to obtain the next grant
        expires_at: When the access token stops being accepted
        user: The signed-in user, when the provider returns one
    """

    token: str
    refresh_token: str | None
    expires_at: datetime
    user: User | None = None


@runtime_checkable
class AuthProvider(Protocol):
    """Protocol for the hosted auth service."""

    def sign_in(self, email: str, password: str) -> SessionGrant:
        """Exchange credentials for a session grant.

        Raises:
            AuthProviderError: If the credentials are rejected
        """
        ...

    def refresh(self, refresh_token: str) -> SessionGrant:
        """Exchange a refresh token for a new session grant.

        Raises:
            AuthProviderError: If the refresh token is no longer valid
        """
        ...


@runtime_checkable
class AuthTokenSink(Protocol):
    """Outbound HTTP client that carries the bearer token.

    Both methods only mutate client headers; they must never dispatch
    actions, so they are safe to call from inside a middleware stage.
    """

    def set_auth_token(self, token: str) -> None:
        """Attach the bearer token to subsequent requests."""
        ...

    def clear_auth_token(self) -> None:
        """Stop sending a bearer token."""
        ...
