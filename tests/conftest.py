"""
Shared fakes and fixtures for the test suite.
"""

import fnmatch
from datetime import datetime, timedelta, timezone

import pytest
import redis

from compliance_scanner.entities import AuthSession, Role, User
from compliance_scanner.errors import AnalyzerError, AuthProviderError
from compliance_scanner.models import ComplianceAnalysis
from compliance_scanner.protocols import SessionGrant
from compliance_scanner.session import RootState, SessionStore
from compliance_scanner.session.actions import login_fulfilled

START = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)

SAMPLE_ANALYSIS = {
    "complianceScore": 72,
    "overallStatus": "needs_review",
    "violations": [
        {
            "category": "Misleading Claims",
            "title": "Guaranteed returns",
            "description": "The text promises guaranteed returns.",
            "severity": "high",
            "confidence": 0.9,
            "suggestion": "Remove the guarantee.",
        }
    ],
    "confidence": 0.85,
}


class FakeClock:
    """Settable clock for the session store."""

    def __init__(self, start: datetime = START) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


class FakeTimer:
    """Settable monotonic timer for the cache."""

    def __init__(self) -> None:
        self.current = 0.0

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class ManualHandle:
    def __init__(self, due: datetime, callback) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """RefreshScheduler that only runs callbacks when told to."""

    def __init__(self, clock: FakeClock) -> None:
        self._clock = clock
        self.handles: list[ManualHandle] = []

    def call_later(self, delay: float, callback) -> ManualHandle:
        handle = ManualHandle(self._clock() + timedelta(seconds=delay), callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[ManualHandle]:
        return [h for h in self.handles if not h.cancelled]

    def run_due(self) -> int:
        """Run every callback due at the current clock time."""
        ran = 0
        while True:
            due = [h for h in self.handles if not h.cancelled and h.due <= self._clock()]
            if not due:
                return ran
            for handle in due:
                self.handles.remove(handle)
                handle.callback()
                ran += 1


class RecordingTokenSink:
    def __init__(self) -> None:
        self.token: str | None = None
        self.history: list[str | None] = []

    def set_auth_token(self, token: str) -> None:
        self.token = token
        self.history.append(token)

    def clear_auth_token(self) -> None:
        self.token = None
        self.history.append(None)


class FakeAuthProvider:
    """AuthProvider issuing numbered tokens."""

    def __init__(self, clock: FakeClock, lifetime: timedelta = timedelta(hours=1)) -> None:
        self._clock = clock
        self.lifetime = lifetime
        self.fail_refresh = False
        self.refresh_calls = 0
        self.user = User(id="user-1", email="analyst@example.com", role=Role.USER)

    def sign_in(self, email: str, password: str) -> SessionGrant:
        if password != "secret":
            raise AuthProviderError("Invalid login credentials", status=400)
        return SessionGrant(
            token="token-0",
            refresh_token="refresh-0",
            expires_at=self._clock() + self.lifetime,
            user=self.user,
        )

    def refresh(self, refresh_token: str) -> SessionGrant:
        self.refresh_calls += 1
        if self.fail_refresh:
            raise AuthProviderError("Invalid Refresh Token", status=400)
        return SessionGrant(
            token=f"token-{self.refresh_calls}",
            refresh_token=f"refresh-{self.refresh_calls}",
            expires_at=self._clock() + self.lifetime,
        )


class FakeAnalyzer:
    """ComplianceAnalyzer returning a canned analysis."""

    def __init__(self, result: dict | None = None, available: bool = True) -> None:
        self.result = result or SAMPLE_ANALYSIS
        self.available = available
        self.fail = False
        self.calls: list[tuple[str, str | None]] = []

    @property
    def model_name(self) -> str:
        return "fake-model"

    async def analyze(self, text: str, context: str | None = None) -> ComplianceAnalysis:
        self.calls.append((text, context))
        if self.fail:
            raise AnalyzerError("provider exploded")
        return ComplianceAnalysis.model_validate(self.result)

    async def is_available(self) -> bool:
        return self.available


class FakeRedis:
    """The subset of redis.Redis used by the repositories (decoded strings)."""

    def __init__(self, available: bool = True) -> None:
        self.data: dict[str, str] = {}
        self.expiries: dict[str, int | None] = {}
        self.available = available

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self.data[key] = value
        self.expiries[key] = ex
        return True

    def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                self.expiries.pop(key, None)
                removed += 1
        return removed

    def scan_iter(self, match: str = "*"):
        return iter([k for k in list(self.data) if fnmatch.fnmatchcase(k, match)])

    def strlen(self, key: str) -> int:
        return len(self.data.get(key, ""))

    def ping(self) -> bool:
        if not self.available:
            raise redis.ConnectionError("connection refused")
        return True


class Recorder:
    """Middleware stage recording every action that reaches it."""

    def __init__(self) -> None:
        self.seen: list[str] = []

    def __call__(self, store, action, forward):
        self.seen.append(action.type)
        return forward(action)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timer():
    return FakeTimer()


@pytest.fixture
def scheduler(clock):
    return ManualScheduler(clock)


@pytest.fixture
def token_sink():
    return RecordingTokenSink()


@pytest.fixture
def auth_provider(clock):
    return FakeAuthProvider(clock)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def store(token_sink, auth_provider, scheduler, clock):
    """SessionStore with the standard chain, manual timers and a fake clock."""
    return SessionStore.create(
        token_sink=token_sink,
        auth_provider=auth_provider,
        scheduler=scheduler,
        clock=clock,
        initial_state=RootState(auth=AuthSession(session_timeout=timedelta(minutes=30))),
    )


def grant_for(clock: FakeClock, minutes: float, role: Role = Role.USER) -> SessionGrant:
    return SessionGrant(
        token="token-0",
        refresh_token="refresh-0",
        expires_at=clock() + timedelta(minutes=minutes),
        user=User(id="user-1", email="analyst@example.com", role=role),
    )


def sign_in(store: SessionStore, clock: FakeClock, minutes: float = 60, role: Role = Role.USER) -> None:
    """Log in directly with a grant expiring in the given number of minutes."""
    store.dispatch(login_fulfilled(grant_for(clock, minutes, role)))
