"""
Tests for API error notifications.
"""

import pytest

from compliance_scanner.session import Action
from compliance_scanner.session.middleware import NOT_FOUND_MESSAGES, error_notification, normalize_error


@pytest.mark.parametrize(
    "status, title, kind",
    [
        (400, "Invalid Request", "error"),
        (401, "Authentication Required", "error"),
        (403, "Access Denied", "error"),
        (404, "Not Found", "error"),
        (409, "Conflict", "error"),
        (422, "Validation Error", "error"),
        (429, "Rate Limited", "warning"),
        (500, "Server Error", "error"),
        (503, "Server Error", "error"),
        (None, "Connection Error", "warning"),
        (0, "Connection Error", "warning"),
    ],
)
def test_notification_by_status(status, title, kind):
    notification = error_notification({"message": "boom", "status": status}, "documents/uploadDocument/rejected")
    assert notification.title == title
    assert notification.type == kind


def test_unauthenticated_notification_is_persistent():
    notification = error_notification({"message": "x", "status": 401}, "documents/fetchDocuments/rejected")
    assert notification.persistent is True


def test_not_found_message_depends_on_service():
    notification = error_notification({"message": "x", "status": 404}, "analysis/fetchAnalysisResults/rejected")
    assert notification.message == NOT_FOUND_MESSAGES["analysis"]


def test_unknown_status_uses_operation_title():
    notification = error_notification({"message": "File too large", "status": 413}, "documents/uploadDocument/rejected")
    assert notification.title == "Upload Failed"
    assert notification.message == "File too large"


def test_normalize_error():
    assert normalize_error("plain") == {"message": "plain", "status": None}
    assert normalize_error({"status": 500}) == {"message": "An unexpected error occurred", "status": 500}
    assert normalize_error(RuntimeError("x"))["message"] == "An unexpected error occurred"


def test_rejected_action_shows_notification(store):
    store.dispatch(Action("documents/deleteDocument/rejected", error={"message": "gone", "status": 404}))

    [notification] = store.get_state().ui.notifications
    assert notification.title == "Not Found"
    assert notification.message == NOT_FOUND_MESSAGES["documents"]


def test_login_rejection_is_silent(store):
    store.dispatch(Action("auth/loginUser/rejected", error={"message": "bad", "status": 400}))
    assert store.get_state().ui.notifications == ()


def test_fulfilled_actions_do_not_notify(store):
    store.dispatch(Action("documents/fetchDocuments/fulfilled", payload=[]))
    assert store.get_state().ui.notifications == ()
