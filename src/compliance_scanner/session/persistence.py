"""Session persistence across restarts.

Only the ``auth`` and ``ui`` slices are written. Every other slice
(documents, analysis, violations, dashboard) is always rehydrated empty
so that data is fetched fresh.
"""

import json
from datetime import datetime, timedelta
from typing import Any

import redis

from compliance_scanner.config import get_redis_client, settings
from compliance_scanner.entities import AuthSession, Notification, Role, User
from compliance_scanner.logging_config import get_logger

from .state import RootState, UiState
from .store import SessionStore

logger = get_logger(__name__)

PERSIST_VERSION = 1
PERSISTED_SLICES = ("auth", "ui")


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _from_iso(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def auth_to_dict(auth: AuthSession) -> dict[str, Any]:
    user = auth.user
    return {
        "token": auth.token,
        "refresh_token": auth.refresh_token,
        "token_expiry": _iso(auth.token_expiry),
        "is_authenticated": auth.is_authenticated,
        "last_activity": _iso(auth.last_activity),
        "session_timeout": auth.session_timeout.total_seconds(),
        "user": {"id": user.id, "email": user.email, "role": user.role.value} if user else None,
    }


def auth_from_dict(data: dict[str, Any]) -> AuthSession:
    user_data = data.get("user")
    user = (
        User(id=user_data["id"], email=user_data["email"], role=Role(user_data["role"]))
        if user_data
        else None
    )
    return AuthSession(
        token=data.get("token"),
        refresh_token=data.get("refresh_token"),
        token_expiry=_from_iso(data.get("token_expiry")),
        is_authenticated=bool(data.get("is_authenticated")),
        last_activity=_from_iso(data.get("last_activity")),
        session_timeout=timedelta(seconds=data["session_timeout"]),
        user=user,
    )


def ui_to_dict(ui: UiState) -> dict[str, Any]:
    return {
        "current_path": ui.current_path,
        "notifications": [
            {
                "type": n.type,
                "message": n.message,
                "title": n.title,
                "persistent": n.persistent,
                "duration": n.duration,
            }
            for n in ui.notifications
        ],
    }


def ui_from_dict(data: dict[str, Any]) -> UiState:
    return UiState(
        current_path=data.get("current_path", "/"),
        notifications=tuple(Notification(**n) for n in data.get("notifications", [])),
    )


def serialize_state(state: RootState) -> str:
    """Serialize the persisted slices of state to JSON."""
    return json.dumps(
        {
            "version": PERSIST_VERSION,
            "auth": auth_to_dict(state.auth),
            "ui": ui_to_dict(state.ui),
        }
    )


def deserialize_state(raw: str) -> RootState:
    """Rebuild a RootState from JSON; non-persisted slices start empty.

    Raises:
        ValueError: If the payload is unreadable or from another version
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Persisted session is not valid JSON: {e}") from e

    if data.get("version") != PERSIST_VERSION:
        raise ValueError(f"Unsupported persisted session version: {data.get('version')!r}")

    try:
        return RootState(auth=auth_from_dict(data["auth"]), ui=ui_from_dict(data["ui"]))
    except (KeyError, TypeError) as e:
        raise ValueError(f"Persisted session is malformed: {e}") from e


class SessionPersistor:
    """Stores the persisted slices in Redis under a single key.

    Example:
        ```python
        persistor = SessionPersistor()
        store = SessionStore.create(..., initial_state=persistor.load())
        persistor.attach(store)
        ```
    """

    def __init__(self, redis_client: redis.Redis | None = None, key: str | None = None) -> None:
        self._client = redis_client or get_redis_client()
        self._key = key or settings.session_persist_key

    def save(self, state: RootState) -> None:
        self._client.set(self._key, serialize_state(state))

    def load(self, default: RootState | None = None) -> RootState:
        """Rehydrate persisted state.

        Args:
            default: State returned when nothing usable is stored.

        Returns:
            The rehydrated state, or default (a fresh RootState if None)
        """
        fallback = default or RootState()
        raw = self._client.get(self._key)
        if raw is None:
            return fallback
        try:
            state = deserialize_state(raw)
        except ValueError as e:
            logger.warning("discarding persisted session", error=str(e))
            return fallback
        return state

    def purge(self) -> None:
        self._client.delete(self._key)

    def attach(self, store: SessionStore):
        """Save on every state change; returns the unsubscribe function."""
        return store.subscribe(self.save)
