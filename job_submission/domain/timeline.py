"""Workflow timeline events recorded by the submission controller."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable


@dataclass(frozen=True)
class WorkflowTimelineEvent:
    """One recorded workflow transition or fetch outcome.

    Attributes:
        stage: Workflow stage, e.g. `load_specs` or `submit`.
        status: Outcome marker, e.g. `started`, `failed` or `discarded`.
        at_utc: Timezone-aware recording time.
        details: Structured details such as the resulting state or error payload.
    """

    stage: str
    status: str
    at_utc: datetime
    details: dict[str, Any] = field(default_factory=dict)

    def event_to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "stage": self.stage,
            "status": self.status,
            "at_utc": self.at_utc.isoformat(),
        }
        if self.details:
            payload["details"] = dict(self.details)
        return payload


def domain_build_stage_event(
    stage: str,
    status: str,
    details: dict[str, Any] | None = None,
    clock: Callable[[], datetime] | None = None,
) -> WorkflowTimelineEvent:
    """Build one timeline event stamped with the current UTC time.

    Args:
        stage: Workflow stage name.
        status: Stage status marker.
        details: Optional structured details; copied so later mutation is not recorded.
        clock: Optional time source returning an aware datetime (used by tests).

    Returns:
        WorkflowTimelineEvent: Immutable timeline event.

    Raises:
        ValueError: Raised when stage or status is blank, or the clock returns a naive datetime.
    """

    if not stage.strip() or not status.strip():
        raise ValueError("stage and status must not be blank")

    recorded_at = clock() if clock is not None else datetime.now(timezone.utc)
    if recorded_at.tzinfo is None:
        raise ValueError("timeline clock must return a timezone-aware datetime")

    return WorkflowTimelineEvent(
        stage=stage,
        status=status,
        at_utc=recorded_at.astimezone(timezone.utc),
        details=dict(details or {}),
    )
