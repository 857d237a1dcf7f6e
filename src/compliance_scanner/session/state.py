"""Session store state slices."""

from dataclasses import dataclass, field
from typing import Any

from compliance_scanner.entities import ActivityItem, AuthSession, Notification


@dataclass(frozen=True)
class UiState:
    notifications: tuple[Notification, ...] = ()
    current_path: str = "/"


@dataclass(frozen=True)
class DashboardState:
    activity_feed: tuple[ActivityItem, ...] = ()
    last_export: str | None = None


@dataclass(frozen=True)
class DocumentsState:
    items: dict[str, dict[str, Any]] = field(default_factory=dict)


@dataclass(frozen=True)
class AnalysisState:
    results: dict[str, dict[str, Any]] = field(default_factory=dict)
    queued: tuple[str, ...] = ()


@dataclass(frozen=True)
class ViolationsState:
    statuses: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RootState:
    """The whole store state. Slices are replaced, never mutated."""

    auth: AuthSession = field(default_factory=AuthSession)
    ui: UiState = field(default_factory=UiState)
    dashboard: DashboardState = field(default_factory=DashboardState)
    documents: DocumentsState = field(default_factory=DocumentsState)
    analysis: AnalysisState = field(default_factory=AnalysisState)
    violations: ViolationsState = field(default_factory=ViolationsState)
