"""In-memory registry of submission workflows addressed by the session API."""

from __future__ import annotations

import logging
from typing import Callable
from uuid import uuid4

from job_submission.workflow import JobSubmissionWorkflow, WorkflowHints

LOGGER = logging.getLogger(__name__)


class SubmissionSessionNotFoundError(LookupError):
    """Raised when a submission session identifier is unknown."""


class SubmissionSessionRegistry:
    """Keep one workflow per submission session for the lifetime of the process."""

    def __init__(self, workflow_factory: Callable[[WorkflowHints], JobSubmissionWorkflow]):
        if workflow_factory is None:
            raise ValueError("workflow_factory must not be None")
        self._workflow_factory = workflow_factory
        self._sessions: dict[str, JobSubmissionWorkflow] = {}

    def session_create(self, hints: WorkflowHints) -> tuple[str, JobSubmissionWorkflow]:
        """Create and register a workflow for a new submission.

        Args:
            hints: Start-up hints for the workflow.

        Returns:
            tuple[str, JobSubmissionWorkflow]: Session identifier and its workflow.

        Raises:
            ValueError: Raised when the factory rejects the hints.
        """

        session_id = str(uuid4())
        workflow = self._workflow_factory(hints)
        self._sessions[session_id] = workflow
        LOGGER.info(
            "Created submission session session_id=%s based_on=%s spec=%s",
            session_id,
            hints.based_on_job_id,
            hints.initial_spec_id,
        )
        return session_id, workflow

    def session_get(self, session_id: str) -> JobSubmissionWorkflow:
        """Return the workflow of an existing session.

        Args:
            session_id: Session identifier.

        Returns:
            JobSubmissionWorkflow: Registered workflow.

        Raises:
            SubmissionSessionNotFoundError: Raised for unknown identifiers.
        """

        workflow = self._sessions.get(session_id)
        if workflow is None:
            raise SubmissionSessionNotFoundError(f"submission session not found: {session_id}")
        return workflow

    def session_count(self) -> int:
        return len(self._sessions)
