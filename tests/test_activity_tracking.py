"""
Tests for dashboard activity tracking.
"""

import re

from conftest import sign_in

from compliance_scanner.session import Action, ActionType
from compliance_scanner.session.middleware import GENERIC_ACTIVITY_TITLE, activity_title, classify_activity

ACTIVITY_ID = re.compile(r"^activity_\d+_[0-9a-f]{9}$")


def test_upload_is_tracked(store, clock):
    sign_in(store, clock)
    store.dispatch(Action("ui/navigate", payload="/documents"))

    store.dispatch(Action(ActionType.UPLOAD_DOCUMENT_FULFILLED, payload={"id": "d1", "name": "brochure.pdf"}))

    [item] = store.get_state().dashboard.activity_feed
    assert ACTIVITY_ID.match(item.id)
    assert item.type == "document_uploaded"
    assert item.title == "Uploaded document: brochure.pdf"
    assert item.timestamp == clock().isoformat()
    assert item.user_id == "user-1"
    assert item.metadata == {"document_id": "d1", "path": "/documents"}


def test_newest_activity_first(store, clock):
    sign_in(store, clock)
    store.dispatch(Action(ActionType.UPLOAD_DOCUMENT_FULFILLED, payload={"id": "d1", "name": "a.pdf"}))
    store.dispatch(Action(ActionType.ANALYZE_DOCUMENT_FULFILLED, payload={"id": "d1", "document_id": "d1"}))

    feed = store.get_state().dashboard.activity_feed
    assert [item.type for item in feed] == ["analysis_completed", "document_uploaded"]
    assert feed[0].title == "Analyzed document for compliance"


def test_not_tracked_when_anonymous(store):
    store.dispatch(Action(ActionType.UPLOAD_DOCUMENT_FULFILLED, payload={"id": "d1", "name": "a.pdf"}))
    assert store.get_state().dashboard.activity_feed == ()


def test_untracked_actions_are_ignored(store, clock):
    sign_in(store, clock)
    store.dispatch(Action("ui/navigate", payload="/x"))
    assert store.get_state().dashboard.activity_feed == ()


def test_missing_name_uses_unknown():
    action = Action(ActionType.UPLOAD_DOCUMENT_FULFILLED, payload={"id": "d1"})
    assert activity_title(action) == "Uploaded document: Unknown"


def test_malformed_payload_falls_back_to_generic_title(store, clock):
    sign_in(store, clock)
    recorded = []
    store.subscribe(lambda state: recorded.append(state))

    result = store.dispatch(Action(ActionType.UPLOAD_DOCUMENT_FULFILLED, payload="not-a-mapping"))

    assert result.type == ActionType.UPLOAD_DOCUMENT_FULFILLED.value
    state = store.get_state()
    assert state.documents.items == {}
    [item] = state.dashboard.activity_feed
    assert item.title == GENERIC_ACTIVITY_TITLE
    assert item.type == "document_uploaded"
    assert item.metadata == {"path": state.ui.current_path}
    # Two state notifications: the upload, then the activity item
    assert len(recorded) == 2


def test_upload_without_id_is_tracked_but_not_stored(store, clock):
    sign_in(store, clock)

    store.dispatch(Action(ActionType.UPLOAD_DOCUMENT_FULFILLED, payload={"name": "a.pdf"}))

    state = store.get_state()
    assert state.documents.items == {}
    [item] = state.dashboard.activity_feed
    assert item.title == "Uploaded document: a.pdf"
    assert item.metadata["document_id"] is None


def test_violation_update_without_payload_is_tracked(store, clock):
    sign_in(store, clock)

    store.dispatch(Action(ActionType.UPDATE_VIOLATION_STATUS))

    state = store.get_state()
    assert state.violations.statuses == {}
    [item] = state.dashboard.activity_feed
    assert item.type == "violation_updated"


def test_classification():
    assert classify_activity(Action(ActionType.DELETE_DOCUMENT_FULFILLED)) == "document_deleted"
    assert classify_activity(Action(ActionType.UPDATE_VIOLATION_STATUS)) == "violation_updated"
    assert classify_activity(Action("other/thing")) == "user_action"
