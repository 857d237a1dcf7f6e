"""Session state store and its middleware chain.

Usage:
    ```python
    from compliance_scanner.session import SessionStore, login_user

    store = SessionStore.create(token_sink=api_client, auth_provider=provider)
    login_user(store, provider, "analyst@example.com", "secret")
    ```
"""

from .actions import Action, ActionType
from .middleware import (
    GUARDED_ACTIONS,
    ActivityExpiryGuard,
    ActivityTracker,
    ApiErrorNotifier,
    PermissionGate,
    TokenRefreshHandler,
)
from .persistence import SessionPersistor
from .state import RootState
from .store import SessionStore
from .thunks import login_user, logout_user
from .timers import ThreadingRefreshScheduler

__all__ = [
    "Action",
    "ActionType",
    "ActivityExpiryGuard",
    "ActivityTracker",
    "ApiErrorNotifier",
    "GUARDED_ACTIONS",
    "PermissionGate",
    "RootState",
    "SessionPersistor",
    "SessionStore",
    "ThreadingRefreshScheduler",
    "TokenRefreshHandler",
    "login_user",
    "logout_user",
]
