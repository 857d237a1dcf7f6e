"""Pure reducers: (state, action, now) -> new state.

Each slice reducer returns the same object when the action does not
concern it, so callers can compare by identity. Payloads missing the
fields a reducer needs leave the slice unchanged.
"""

from dataclasses import replace
from datetime import datetime
from typing import Any

from compliance_scanner.entities import AuthSession

from .actions import Action, ActionType
from .state import (
    AnalysisState,
    DashboardState,
    DocumentsState,
    RootState,
    UiState,
    ViolationsState,
)

ACTIVITY_FEED_LIMIT = 50


def auth_reducer(state: AuthSession, action: Action, now: datetime) -> AuthSession:
    kind = action.kind

    if kind is ActionType.LOGIN_FULFILLED:
        grant = action.payload
        return AuthSession(
            token=grant.token,
            refresh_token=grant.refresh_token,
            token_expiry=grant.expires_at,
            is_authenticated=True,
            last_activity=now,
            session_timeout=state.session_timeout,
            user=grant.user,
        )

    if kind is ActionType.REFRESH_FULFILLED:
        # Refresh only extends an existing session
        if not state.is_authenticated:
            return state
        grant = action.payload
        return replace(
            state,
            token=grant.token,
            refresh_token=grant.refresh_token or state.refresh_token,
            token_expiry=grant.expires_at,
            user=grant.user or state.user,
        )

    if kind in (ActionType.LOGOUT, ActionType.LOGIN_REJECTED):
        return AuthSession(session_timeout=state.session_timeout)

    if kind is ActionType.UPDATE_ACTIVITY:
        if not state.is_authenticated:
            return state
        if state.last_activity is not None and state.last_activity >= now:
            return state
        return replace(state, last_activity=now)

    return state


def ui_reducer(state: UiState, action: Action, now: datetime) -> UiState:
    kind = action.kind

    if kind is ActionType.SHOW_NOTIFICATION:
        return replace(state, notifications=state.notifications + (action.payload,))
    if kind is ActionType.CLEAR_NOTIFICATIONS:
        return replace(state, notifications=())
    if kind is ActionType.NAVIGATE:
        return replace(state, current_path=action.payload)
    return state


def dashboard_reducer(state: DashboardState, action: Action, now: datetime) -> DashboardState:
    kind = action.kind

    if kind is ActionType.ADD_ACTIVITY_ITEM:
        feed = (action.payload,) + state.activity_feed
        return replace(state, activity_feed=feed[:ACTIVITY_FEED_LIMIT])
    if kind is ActionType.EXPORT_SYSTEM_REPORT:
        return replace(state, last_export=now.isoformat())
    return state


def _mapping(payload: Any) -> dict[str, Any]:
    return payload if isinstance(payload, dict) else {}


def _ids(payload: dict[str, Any]) -> list[Any]:
    ids = payload.get("ids")
    return list(ids) if isinstance(ids, (list, tuple)) else []


def documents_reducer(state: DocumentsState, action: Action, now: datetime) -> DocumentsState:
    kind = action.kind
    payload = _mapping(action.payload)

    if kind is ActionType.UPLOAD_DOCUMENT_FULFILLED:
        document_id = payload.get("id")
        if document_id is None:
            return state
        return DocumentsState(items={**state.items, document_id: dict(payload)})

    if kind is ActionType.DELETE_DOCUMENT_FULFILLED:
        document_id = payload.get("id") or (action.meta or {}).get("arg")
        if document_id not in state.items:
            return state
        return DocumentsState(items={k: v for k, v in state.items.items() if k != document_id})

    if kind is ActionType.BATCH_DELETE_DOCUMENTS:
        doomed = set(_ids(payload))
        return DocumentsState(items={k: v for k, v in state.items.items() if k not in doomed})

    return state


def analysis_reducer(state: AnalysisState, action: Action, now: datetime) -> AnalysisState:
    kind = action.kind
    payload = _mapping(action.payload)

    if kind is ActionType.ANALYZE_DOCUMENT_FULFILLED:
        document_id = payload.get("document_id") or payload.get("id")
        if document_id is None:
            return state
        return replace(
            state,
            results={**state.results, document_id: dict(payload)},
            queued=tuple(q for q in state.queued if q != document_id),
        )

    if kind is ActionType.BATCH_ANALYZE_DOCUMENTS:
        new_ids = tuple(i for i in _ids(payload) if i not in state.queued)
        return replace(state, queued=state.queued + new_ids)

    return state


def violations_reducer(state: ViolationsState, action: Action, now: datetime) -> ViolationsState:
    kind = action.kind
    payload = _mapping(action.payload)
    status = payload.get("status")
    if status is None:
        return state

    if kind is ActionType.UPDATE_VIOLATION_STATUS:
        violation_id = payload.get("id")
        if violation_id is None:
            return state
        return ViolationsState(statuses={**state.statuses, violation_id: status})

    if kind is ActionType.BATCH_UPDATE_VIOLATIONS:
        updates = {violation_id: status for violation_id in _ids(payload)}
        return ViolationsState(statuses={**state.statuses, **updates})

    return state


def root_reducer(state: RootState, action: Action, now: datetime) -> RootState:
    """Apply an action to every slice."""
    return RootState(
        auth=auth_reducer(state.auth, action, now),
        ui=ui_reducer(state.ui, action, now),
        dashboard=dashboard_reducer(state.dashboard, action, now),
        documents=documents_reducer(state.documents, action, now),
        analysis=analysis_reducer(state.analysis, action, now),
        violations=violations_reducer(state.violations, action, now),
    )
