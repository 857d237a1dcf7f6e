"""Session middleware stages.

Chain order (see ``SessionStore.create``):

1. ActivityExpiryGuard - touches activity, refreshes or expires the token,
   enforces the inactivity timeout
2. TokenRefreshHandler - reacts to login/refresh/logout outcomes and owns
   the refresh timer
3. PermissionGate - drops guarded actions the user's role may not perform
4. ApiErrorNotifier - turns rejected requests into error notifications
5. ActivityTracker - appends dashboard activity after trackable actions
"""

import uuid
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from compliance_scanner.entities import ActivityItem, Notification, Role
from compliance_scanner.errors import AuthProviderError
from compliance_scanner.logging_config import get_logger
from compliance_scanner.protocols import AuthProvider, AuthTokenSink, RefreshScheduler, TimerHandle

from .actions import (
    Action,
    ActionType,
    add_activity_item,
    logout,
    navigate,
    refresh_fulfilled,
    refresh_rejected,
    refresh_token,
    show_notification,
    unauthorized,
    update_activity,
)
from .state import RootState

if TYPE_CHECKING:
    from .store import SessionStore

logger = get_logger(__name__)

Forward = Callable[[Action], Any]

REFRESH_MARGIN = timedelta(minutes=5)
REFRESH_LEAD = timedelta(minutes=15)
LOGIN_PATH = "/login"
EXPIRED_LOGIN_PATH = "/login?expired=true"

SESSION_EXPIRED_MESSAGE = "Your session has expired due to inactivity. Please log in again."
PERMISSION_DENIED_MESSAGE = "You do not have permission to perform this action."


class ActivityExpiryGuard:
    """Stage 1: activity stamp, token expiry and inactivity timeout.

    Runs for every non-auth action. Decisions use the state as it was
    before the action, so the activity stamp dispatched here does not
    hide an inactivity timeout.
    """

    def __init__(self, refresh_margin: timedelta = REFRESH_MARGIN) -> None:
        self._refresh_margin = refresh_margin

    def __call__(self, store: "SessionStore", action: Action, forward: Forward) -> Any:
        if action.is_auth_action:
            return forward(action)

        auth = store.get_state().auth
        now = store.now()

        if auth.is_authenticated:
            store.dispatch(update_activity())

        if auth.token and auth.token_expiry:
            time_until_expiry = auth.token_expiry - now
            if timedelta(0) < time_until_expiry < self._refresh_margin:
                store.dispatch(refresh_token())
            elif time_until_expiry <= timedelta(0):
                logger.info("access token expired, logging out")
                store.dispatch(logout())
                return forward(action)

        if auth.is_authenticated and auth.last_activity:
            if now - auth.last_activity > auth.session_timeout:
                logger.info("session timed out", idle_seconds=(now - auth.last_activity).total_seconds())
                store.dispatch(logout())
                store.dispatch(
                    show_notification(
                        Notification(type="warning", message=SESSION_EXPIRED_MESSAGE, persistent=True)
                    )
                )
                return forward(action)

        return forward(action)


class TokenRefreshHandler:
    """Stage 2: login/refresh/logout outcomes and refresh scheduling.

    Holds at most one pending refresh timer. The timer is cancelled on
    logout and replaced on every new grant; its callback also re-checks
    that the session is still authenticated when it fires.

    Each login and logout starts a new session generation. Refresh
    outcomes carry the generation they were started in and are dropped
    when it is no longer current.
    """

    def __init__(
        self,
        token_sink: AuthTokenSink,
        auth_provider: AuthProvider,
        scheduler: RefreshScheduler,
        refresh_lead: timedelta = REFRESH_LEAD,
    ) -> None:
        self._sink = token_sink
        self._provider = auth_provider
        self._scheduler = scheduler
        self._refresh_lead = refresh_lead
        self._pending: TimerHandle | None = None
        self._refresh_in_flight = False
        self._generation = 0

    def __call__(self, store: "SessionStore", action: Action, forward: Forward) -> Any:
        kind = action.kind

        if kind in (ActionType.REFRESH_FULFILLED, ActionType.REFRESH_REJECTED) and self._is_stale(action):
            logger.debug("dropping refresh outcome from an ended session", action=action.type)
            return action

        if kind is ActionType.REFRESH_TOKEN:
            result = forward(action)
            self._start_refresh(store)
            return result

        if kind is ActionType.LOGIN_FULFILLED or kind is ActionType.REFRESH_FULFILLED:
            if kind is ActionType.REFRESH_FULFILLED and not store.get_state().auth.is_authenticated:
                # A refresh that lands after logout must not revive the token
                return forward(action)
            if kind is ActionType.LOGIN_FULFILLED:
                self._new_generation()
            grant = action.payload
            self._sink.set_auth_token(grant.token)
            result = forward(action)
            if grant.expires_at:
                self._schedule_refresh(store, grant.expires_at)
            return result

        if kind is ActionType.REFRESH_REJECTED:
            result = forward(action)
            store.dispatch(logout())
            if LOGIN_PATH not in store.get_state().ui.current_path:
                store.dispatch(navigate(EXPIRED_LOGIN_PATH))
            return result

        if kind is ActionType.LOGOUT:
            self._sink.clear_auth_token()
            self.cancel_pending()
            self._new_generation()

        return forward(action)

    def cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _new_generation(self) -> None:
        self._generation += 1
        self._refresh_in_flight = False

    def _is_stale(self, action: Action) -> bool:
        session = (action.meta or {}).get("session")
        return session is not None and session != self._generation

    @property
    def has_pending_refresh(self) -> bool:
        return self._pending is not None

    def _schedule_refresh(self, store: "SessionStore", expires_at: datetime) -> None:
        self.cancel_pending()
        delay = (expires_at - self._refresh_lead - store.now()).total_seconds()
        if delay <= 0:
            return

        def fire() -> None:
            self._pending = None
            if store.get_state().auth.is_authenticated:
                store.dispatch(refresh_token())

        self._pending = self._scheduler.call_later(delay, fire)
        logger.debug("token refresh scheduled", delay_seconds=round(delay))

    def _start_refresh(self, store: "SessionStore") -> None:
        auth = store.get_state().auth
        if not auth.is_authenticated or not auth.refresh_token:
            return
        if self._refresh_in_flight:
            return

        self._refresh_in_flight = True
        refresh_token_value = auth.refresh_token
        generation = self._generation

        def run() -> None:
            try:
                grant = self._provider.refresh(refresh_token_value)
            except AuthProviderError as e:
                logger.warning("token refresh failed", error=str(e), status=e.status)
                outcome = refresh_rejected(str(e), status=e.status, session=generation)
            else:
                outcome = refresh_fulfilled(grant, session=generation)
            finally:
                if generation == self._generation:
                    self._refresh_in_flight = False
            store.dispatch(outcome)

        self._scheduler.call_later(0, run)


# Guarded actions and the roles allowed to perform them. Actions not
# listed here are permitted for everyone.
GUARDED_ACTIONS: dict[ActionType, frozenset[Role]] = {
    ActionType.BATCH_DELETE_DOCUMENTS: frozenset({Role.ADMIN}),
    ActionType.BATCH_ANALYZE_DOCUMENTS: frozenset({Role.ADMIN, Role.USER}),
    ActionType.BATCH_UPDATE_VIOLATIONS: frozenset({Role.ADMIN}),
    ActionType.EXPORT_SYSTEM_REPORT: frozenset({Role.ADMIN}),
}


class PermissionGate:
    """Stage 3: role check for guarded actions.

    A denied action is never forwarded; the caller gets an
    UNAUTHORIZED_ACTION wrapper and an error notification is shown.
    Without a signed-in user there is no role, so guarded actions are
    denied.
    """

    def __init__(self, permissions: dict[ActionType, frozenset[Role]] | None = None) -> None:
        self._permissions = GUARDED_ACTIONS if permissions is None else permissions

    def allowed_roles(self, action: Action) -> frozenset[Role] | None:
        """Roles allowed to perform action, or None when it is not guarded."""
        kind = action.kind
        return self._permissions.get(kind) if kind is not None else None

    def __call__(self, store: "SessionStore", action: Action, forward: Forward) -> Any:
        allowed = self.allowed_roles(action)
        if allowed is None:
            return forward(action)

        role = store.get_state().auth.role
        if role in allowed:
            return forward(action)

        logger.warning("blocked unauthorized action", action=action.type, role=role.value if role else None)
        store.dispatch(
            show_notification(Notification(type="error", message=PERMISSION_DENIED_MESSAGE, duration=5000))
        )
        return unauthorized(action)


ACTIVITY_TYPES: dict[ActionType, str] = {
    ActionType.UPLOAD_DOCUMENT_FULFILLED: "document_uploaded",
    ActionType.ANALYZE_DOCUMENT_FULFILLED: "analysis_completed",
    ActionType.UPDATE_VIOLATION_STATUS: "violation_updated",
    ActionType.DELETE_DOCUMENT_FULFILLED: "document_deleted",
}

GENERIC_ACTIVITY_TYPE = "user_action"
GENERIC_ACTIVITY_TITLE = "User performed an action"


def classify_activity(action: Action) -> str:
    return ACTIVITY_TYPES.get(action.kind, GENERIC_ACTIVITY_TYPE)


def activity_title(action: Action) -> str:
    """Human title for an activity entry.

    Raises:
        AttributeError, TypeError: If the payload is not a mapping where
            one is expected; callers fall back to the generic title
    """
    kind = action.kind
    if kind is ActionType.UPLOAD_DOCUMENT_FULFILLED:
        name = action.payload.get("name") if action.payload is not None else None
        return f"Uploaded document: {name or 'Unknown'}"
    if kind is ActionType.ANALYZE_DOCUMENT_FULFILLED:
        return "Analyzed document for compliance"
    if kind is ActionType.UPDATE_VIOLATION_STATUS:
        return "Updated violation status"
    if kind is ActionType.DELETE_DOCUMENT_FULFILLED:
        return "Deleted document"
    return GENERIC_ACTIVITY_TITLE


def activity_metadata(action: Action, state: RootState) -> dict[str, Any]:
    payload = action.payload
    document_id = payload.get("id") if isinstance(payload, dict) else None
    if document_id is None and action.meta:
        document_id = action.meta.get("arg")
    return {"document_id": document_id, "path": state.ui.current_path}


class ActivityTracker:
    """Stage 4: dashboard activity feed for trackable actions.

    Runs after the action is applied. Telemetry must never break the
    action pipeline, so malformed payloads fall back to generic labels.
    """

    def __call__(self, store: "SessionStore", action: Action, forward: Forward) -> Any:
        result = forward(action)

        if action.kind not in ACTIVITY_TYPES:
            return result

        state = store.get_state()
        user = state.auth.user
        if not state.auth.is_authenticated or user is None:
            return result

        try:
            title = activity_title(action)
            metadata = activity_metadata(action, state)
        except (AttributeError, TypeError) as e:
            logger.warning("activity metadata unavailable", action=action.type, error=str(e))
            title = GENERIC_ACTIVITY_TITLE
            metadata = {"path": state.ui.current_path}

        now = store.now()
        item = ActivityItem(
            id=f"activity_{int(now.timestamp() * 1000)}_{uuid.uuid4().hex[:9]}",
            type=classify_activity(action),
            title=title,
            timestamp=now.isoformat(),
            user_id=user.id,
            metadata=metadata,
        )
        store.dispatch(add_activity_item(item))
        return result


# Rejections already surfaced elsewhere
SILENT_REJECTIONS = frozenset({ActionType.LOGIN_REJECTED.value, ActionType.REFRESH_REJECTED.value})

NOT_FOUND_MESSAGES = {
    "documents": "The requested document was not found. It may have been deleted.",
    "analysis": "The analysis results were not found. The analysis may still be processing.",
    "violations": "The violation details were not found.",
    "dashboard": "The dashboard data is currently unavailable.",
    "auth": "User account not found.",
}

OPERATION_TITLES = {
    "uploadDocument": "Upload Failed",
    "fetchDocuments": "Loading Failed",
    "deleteDocument": "Delete Failed",
    "analyzeDocument": "Analysis Failed",
    "fetchAnalysisResults": "Results Loading Failed",
    "loginUser": "Login Failed",
    "registerUser": "Registration Failed",
    "updateUserProfile": "Profile Update Failed",
}


def normalize_error(error: Any) -> dict[str, Any]:
    """Coerce a rejection's error into {message, status}."""
    if isinstance(error, str):
        return {"message": error, "status": None}
    if isinstance(error, dict):
        return {
            "message": error.get("message") or "An unexpected error occurred",
            "status": error.get("status"),
        }
    return {"message": "An unexpected error occurred", "status": None}


def error_notification(error: dict[str, Any], action_type: str) -> Notification:
    """Build the notification for a normalized error."""
    service, _, rest = action_type.partition("/")
    operation = rest.split("/")[0]
    status = error["status"]
    message = error["message"]

    if status == 400:
        return Notification(type="error", title="Invalid Request", message=message, duration=6000)
    if status == 401:
        return Notification(
            type="error", title="Authentication Required", message="Please log in to continue.", persistent=True
        )
    if status == 403:
        return Notification(type="error", title="Access Denied", message=PERMISSION_DENIED_MESSAGE, duration=5000)
    if status == 404:
        return Notification(
            type="error",
            title="Not Found",
            message=NOT_FOUND_MESSAGES.get(service, "The requested resource was not found."),
            duration=5000,
        )
    if status == 409:
        return Notification(type="error", title="Conflict", message=message, duration=6000)
    if status == 422:
        return Notification(type="error", title="Validation Error", message=message, duration=6000)
    if status == 429:
        return Notification(
            type="warning",
            title="Rate Limited",
            message="Too many requests. Please wait a moment before trying again.",
            duration=5000,
        )
    if status in (500, 502, 503, 504):
        return Notification(
            type="error",
            title="Server Error",
            message="A server error occurred. Our team has been notified. Please try again later.",
            duration=8000,
        )
    if status in (0, None):
        return Notification(
            type="warning",
            title="Connection Error",
            message="Unable to connect to the server. Please check your internet connection.",
            duration=6000,
        )
    return Notification(
        type="error",
        title=OPERATION_TITLES.get(operation, "Operation Failed"),
        message=message,
        duration=6000,
    )


class ApiErrorNotifier:
    """Stage 5: error notifications for rejected requests."""

    def __call__(self, store: "SessionStore", action: Action, forward: Forward) -> Any:
        if action.is_rejected and action.type not in SILENT_REJECTIONS:
            error = normalize_error(action.error if action.error is not None else action.payload)
            logger.warning("request rejected", action=action.type, status=error["status"])
            store.dispatch(show_notification(error_notification(error, action.type)))
        return forward(action)
