"""Authenticated session domain entities."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

DEFAULT_SESSION_TIMEOUT = timedelta(minutes=30)


class Role(str, Enum):
    """Roles a signed-in user may hold."""

    ADMIN = "admin"
    USER = "user"
    VIEWER = "viewer"


@dataclass(frozen=True)
class User:
    """The signed-in user as reported by the auth provider."""

    id: str
    email: str
    role: Role = Role.USER


@dataclass(frozen=True)
class AuthSession:
    """Client-side session state.

    Invariants:
        - is_authenticated implies token is not None
        - last_activity never moves backwards while authenticated

    Attributes:
        token: Bearer access token
        refresh_token: Token used to renew the access token
        token_expiry: When the access token expires
        is_authenticated: Whether a user is signed in
        last_activity: Last time a non-auth action was dispatched
        session_timeout: Inactivity window before forced logout
        user: The signed-in user
    """

    token: str | None = None
    refresh_token: str | None = None
    token_expiry: datetime | None = None
    is_authenticated: bool = False
    last_activity: datetime | None = None
    session_timeout: timedelta = DEFAULT_SESSION_TIMEOUT
    user: User | None = None

    def __post_init__(self) -> None:
        if self.is_authenticated and self.token is None:
            raise ValueError("An authenticated session must carry a token")

    @property
    def role(self) -> Role | None:
        return self.user.role if self.user else None
