"""Session store with an ordered middleware chain.

Every dispatched action runs through the middleware in a fixed order
before the root reducer applies it. A middleware may inspect state,
dispatch derived actions (which re-enter the chain from the top),
forward the action, or return something else instead of forwarding.
"""

import threading
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

from compliance_scanner.config import settings
from compliance_scanner.entities import AuthSession
from compliance_scanner.protocols import AuthProvider, AuthTokenSink, RefreshScheduler

from .actions import Action
from .middleware import (
    ActivityExpiryGuard,
    ActivityTracker,
    ApiErrorNotifier,
    PermissionGate,
    TokenRefreshHandler,
)
from .reducers import root_reducer
from .state import RootState
from .timers import ThreadingRefreshScheduler

Clock = Callable[[], datetime]
Forward = Callable[[Action], Any]
Reducer = Callable[[RootState, Action, datetime], RootState]
Listener = Callable[[RootState], None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionMiddleware(Protocol):
    """One stage of the dispatch chain."""

    def __call__(self, store: "SessionStore", action: Action, forward: Forward) -> Any:
        ...


class SessionStore:
    """State container applying actions through a middleware chain.

    Dispatch is serialized by a reentrant lock, so refresh callbacks
    arriving from timer threads keep dispatch order and middleware can
    dispatch from inside a stage.

    Example:
        ```python
        store = SessionStore.create(token_sink=api_client, auth_provider=provider)
        login_user(store, provider, "analyst@example.com", "secret")
        store.dispatch(Action("documents/uploadDocument/fulfilled", payload={...}))
        ```
    """

    def __init__(
        self,
        reducer: Reducer = root_reducer,
        middleware: Sequence[SessionMiddleware] = (),
        initial_state: RootState | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._reducer = reducer
        self._state = initial_state or RootState()
        self._clock = clock
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []
        self._chain = self._build_chain(list(middleware))

    @classmethod
    def create(
        cls,
        token_sink: AuthTokenSink,
        auth_provider: AuthProvider,
        scheduler: RefreshScheduler | None = None,
        clock: Clock = utc_now,
        initial_state: RootState | None = None,
    ) -> "SessionStore":
        """Factory wiring the standard middleware chain.

        Order: activity/expiry guard, token refresh handler, permission
        gate, API error notifier, activity tracker.

        Args:
            token_sink: Outbound HTTP client receiving the bearer token.
            auth_provider: Service used for token refresh.
            scheduler: Timer source. Defaults to threading timers.
            clock: Source of the current time.
            initial_state: Starting (e.g. rehydrated) state.

        Returns:
            Configured SessionStore
        """
        if initial_state is None:
            timeout = timedelta(minutes=settings.session_timeout_minutes)
            initial_state = RootState(auth=AuthSession(session_timeout=timeout))

        middleware = [
            ActivityExpiryGuard(),
            TokenRefreshHandler(
                token_sink=token_sink,
                auth_provider=auth_provider,
                scheduler=scheduler or ThreadingRefreshScheduler(),
            ),
            PermissionGate(),
            ApiErrorNotifier(),
            ActivityTracker(),
        ]
        return cls(middleware=middleware, initial_state=initial_state, clock=clock)

    def _build_chain(self, middleware: list[SessionMiddleware]) -> Forward:
        forward: Forward = self._apply
        for stage in reversed(middleware):
            forward = self._link(stage, forward)
        return forward

    def _link(self, stage: SessionMiddleware, forward: Forward) -> Forward:
        return lambda action: stage(self, action, forward)

    def _apply(self, action: Action) -> Action:
        self._state = self._reducer(self._state, action, self._clock())
        for listener in list(self._listeners):
            listener(self._state)
        return action

    def dispatch(self, action: Action) -> Any:
        """Run an action through the middleware chain.

        Returns:
            Whatever the chain returns: the applied action, or a
            replacement such as an UNAUTHORIZED_ACTION wrapper
        """
        with self._lock:
            return self._chain(action)

    def get_state(self) -> RootState:
        return self._state

    def now(self) -> datetime:
        return self._clock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener with the new state after every applied action.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
