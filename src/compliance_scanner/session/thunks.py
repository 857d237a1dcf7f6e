"""Request helpers that call the auth provider and dispatch the outcome."""

from compliance_scanner.errors import AuthProviderError
from compliance_scanner.logging_config import get_logger
from compliance_scanner.protocols import AuthProvider

from .actions import Action, login_fulfilled, login_rejected, logout
from .store import SessionStore

logger = get_logger(__name__)


def login_user(store: SessionStore, provider: AuthProvider, email: str, password: str) -> Action:
    """Sign in and dispatch ``auth/loginUser/fulfilled`` or ``/rejected``.

    Returns:
        The dispatched outcome action
    """
    try:
        grant = provider.sign_in(email, password)
    except AuthProviderError as e:
        logger.info("login rejected", email=email, status=e.status)
        action = login_rejected(str(e) or "Login failed", status=e.status)
    else:
        logger.info("login succeeded", user_id=grant.user.id if grant.user else None)
        action = login_fulfilled(grant)
    store.dispatch(action)
    return action


def logout_user(store: SessionStore) -> None:
    store.dispatch(logout())
