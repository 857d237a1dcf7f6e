"""Session store actions.

Every action the store understands is a member of the closed ActionType
enumeration; permission, classification and reducer tables are keyed by
it. Actions with other type strings still flow through the store but no
table applies to them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from compliance_scanner.entities import ActivityItem, Notification
from compliance_scanner.protocols import SessionGrant

AUTH_PREFIX = "auth/"


class ActionType(str, Enum):
    # auth
    LOGIN_FULFILLED = "auth/loginUser/fulfilled"
    LOGIN_REJECTED = "auth/loginUser/rejected"
    REFRESH_TOKEN = "auth/refreshToken"
    REFRESH_FULFILLED = "auth/refreshToken/fulfilled"
    REFRESH_REJECTED = "auth/refreshToken/rejected"
    LOGOUT = "auth/logout"
    UPDATE_ACTIVITY = "auth/updateActivity"

    # ui
    SHOW_NOTIFICATION = "ui/showNotification"
    CLEAR_NOTIFICATIONS = "ui/clearNotifications"
    NAVIGATE = "ui/navigate"

    # dashboard
    ADD_ACTIVITY_ITEM = "dashboard/addActivityItem"
    EXPORT_SYSTEM_REPORT = "dashboard/exportSystemReport"

    # documents
    UPLOAD_DOCUMENT_FULFILLED = "documents/uploadDocument/fulfilled"
    DELETE_DOCUMENT_FULFILLED = "documents/deleteDocument/fulfilled"
    BATCH_DELETE_DOCUMENTS = "documents/batchDeleteDocuments"

    # analysis
    ANALYZE_DOCUMENT_FULFILLED = "analysis/analyzeDocument/fulfilled"
    ANALYZE_DOCUMENT_REJECTED = "analysis/analyzeDocument/rejected"
    BATCH_ANALYZE_DOCUMENTS = "analysis/batchAnalyzeDocuments"

    # violations
    UPDATE_VIOLATION_STATUS = "violations/updateViolationStatus"
    BATCH_UPDATE_VIOLATIONS = "violations/batchUpdateViolations"

    UNAUTHORIZED_ACTION = "UNAUTHORIZED_ACTION"


@dataclass(frozen=True)
class Action:
    """A dispatched state-change request.

    Attributes:
        type: Action type string (ActionType members are stored by value)
        payload: Action data
        meta: Extra data such as the thunk argument ("arg")
        error: Error details for rejected actions
    """

    type: str
    payload: Any = None
    meta: dict[str, Any] | None = None
    error: Any = None

    def __post_init__(self) -> None:
        if isinstance(self.type, ActionType):
            object.__setattr__(self, "type", self.type.value)

    @property
    def kind(self) -> ActionType | None:
        """The matching ActionType, or None for foreign action types."""
        try:
            return ActionType(self.type)
        except ValueError:
            return None

    @property
    def is_auth_action(self) -> bool:
        return self.type.startswith(AUTH_PREFIX)

    @property
    def is_rejected(self) -> bool:
        return self.type.endswith("/rejected")


def login_fulfilled(grant: SessionGrant) -> Action:
    return Action(ActionType.LOGIN_FULFILLED, payload=grant)


def login_rejected(message: str, status: int | None = None) -> Action:
    return Action(ActionType.LOGIN_REJECTED, error={"message": message, "status": status})


def refresh_token() -> Action:
    return Action(ActionType.REFRESH_TOKEN)


def refresh_fulfilled(grant: SessionGrant, session: int | None = None) -> Action:
    return Action(ActionType.REFRESH_FULFILLED, payload=grant, meta=_session_meta(session))


def refresh_rejected(message: str, status: int | None = None, session: int | None = None) -> Action:
    return Action(
        ActionType.REFRESH_REJECTED,
        meta=_session_meta(session),
        error={"message": message, "status": status},
    )


def _session_meta(session: int | None) -> dict[str, Any] | None:
    return None if session is None else {"session": session}


def logout() -> Action:
    return Action(ActionType.LOGOUT)


def update_activity() -> Action:
    return Action(ActionType.UPDATE_ACTIVITY)


def show_notification(notification: Notification) -> Action:
    return Action(ActionType.SHOW_NOTIFICATION, payload=notification)


def navigate(path: str) -> Action:
    return Action(ActionType.NAVIGATE, payload=path)


def add_activity_item(item: ActivityItem) -> Action:
    return Action(ActionType.ADD_ACTIVITY_ITEM, payload=item)


def unauthorized(original: Action, reason: str = "Insufficient permissions") -> Action:
    """Wrap a denied action; returned to the caller instead of being applied."""
    return Action(ActionType.UNAUTHORIZED_ACTION, payload=original, error=reason)
