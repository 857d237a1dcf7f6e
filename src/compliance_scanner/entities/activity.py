"""UI notification and dashboard activity entities."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Notification:
    """A user-visible message queued on the ui slice.

    Attributes:
        type: "info", "warning" or "error"
        message: Body text
        title: Optional heading
        persistent: Stays until dismissed when True
        duration: Auto-dismiss delay in milliseconds (ignored when persistent)
    """

    type: str
    message: str
    title: str | None = None
    persistent: bool = False
    duration: int | None = None


@dataclass(frozen=True)
class ActivityItem:
    """An entry in the dashboard activity feed."""

    id: str
    type: str
    title: str
    timestamp: str
    user_id: str
    metadata: dict[str, Any] = field(default_factory=dict)
