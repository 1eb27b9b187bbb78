"""Workflow controller that owns the current submission state and performs fetches."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Final

from job_submission.adapters import JobApiClientPort, JobApiError, PendingRequestTracker
from job_submission.domain import JobRequest, WorkflowTimelineEvent, domain_build_stage_event, request_update_visit

from .errors import WorkflowStateError
from .states import (
    STEP_CURRENT_SPEC,
    STEP_JOB_DETAILS,
    STEP_JOB_INPUTS,
    STEP_ORIGINAL_SPEC,
    EditingState,
    LoadingExistingJobState,
    LoadingSpecsState,
    LoadingSpecState,
    WorkflowHints,
    WorkflowState,
)
from .transitions import (
    transition_begin_submit,
    transition_change_field,
    transition_change_job_name,
    transition_change_spec,
    transition_clear_field_values,
    transition_existing_job_failed,
    transition_existing_job_loaded,
    transition_import_field_values,
    transition_retry,
    transition_spec_failed,
    transition_spec_loaded,
    transition_specs_failed,
    transition_specs_loaded,
    transition_start,
    transition_submit_failed,
    transition_submit_succeeded,
)

LOGGER = logging.getLogger(__name__)

REQUEST_DOWNLOAD_FILENAME: Final[str] = "request.json"


@dataclass(frozen=True)
class WorkflowContext:
    """Collaborators handed explicitly to one workflow instance.

    Attributes:
        client: Backend job service client.
        pending_request_tracker: Optional tracker reporting in-flight requests.
    """

    client: JobApiClientPort
    pending_request_tracker: PendingRequestTracker | None = None


class JobSubmissionWorkflow:
    """Single owner of one submission's state.

    Fetch results are applied only when the state that started the fetch is
    still current; results for superseded states are logged and dropped.
    """

    def __init__(self, context: WorkflowContext, hints: WorkflowHints | None = None):
        """Initialize the workflow in LoadingSpecs.

        Args:
            context: Explicit collaborators.
            hints: Optional start-up hints.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when context or its client is missing.
        """

        if context is None:
            raise ValueError("context must not be None")
        if context.client is None:
            raise ValueError("context.client must not be None")

        self._context = context
        self._state: WorkflowState = transition_start(hints)
        self._timeline: list[WorkflowTimelineEvent] = []
        self._workflow_record("workflow", "started", {"state": self._state.state_name})

    def workflow_state(self) -> WorkflowState:
        return self._state

    def workflow_timeline(self) -> list[dict[str, object]]:
        """Return the recorded transition timeline as JSON-ready payloads.

        Returns:
            list[dict[str, object]]: Structured stage events, oldest first.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return [event.event_to_payload() for event in self._timeline]

    def workflow_is_busy(self) -> bool:
        tracker = self._context.pending_request_tracker
        return tracker is not None and tracker.tracker_is_busy()

    async def workflow_run(self) -> WorkflowState:
        """Drive pending fetches until the workflow settles.

        The workflow settles in Editing, NoSpecsAvailable, Submitted, or in a
        loading state holding a fetch error that waits for `workflow_retry`.

        Returns:
            WorkflowState: Settled state.

        Raises:
            RuntimeError: This method does not raise runtime errors; fetch failures are stored in state.
        """

        while True:
            state = self._state
            if isinstance(state, LoadingSpecsState) and state.error is None:
                applied = await self._workflow_load_specs(state)
            elif isinstance(state, LoadingExistingJobState) and state.error is None:
                applied = await self._workflow_load_existing_job(state)
            elif isinstance(state, LoadingSpecState) and state.error is None:
                applied = await self._workflow_load_spec(state)
            else:
                return state
            if not applied:
                return self._state

    async def workflow_retry(self) -> WorkflowState:
        """Re-run the failed fetch of the current loading state from its first step.

        Returns:
            WorkflowState: Settled state after the retry.

        Raises:
            WorkflowStateError: Raised when the current state has no failed fetch.
        """

        state = self._state
        self._workflow_apply(state, transition_retry(state), "retry", "requested")
        return await self.workflow_run()

    def workflow_change_job_name(self, job_name: str) -> EditingState:
        state = self._workflow_require_editing("change the job name")
        next_state = transition_change_job_name(state, job_name)
        self._workflow_apply_edit(state, next_state, "edit_name")
        return next_state

    def workflow_change_input(self, expected_input_id: str, raw_edit: Any) -> EditingState:
        """Apply one field edit and recompute the aggregate.

        Args:
            expected_input_id: Edited field.
            raw_edit: Raw edit payload.

        Returns:
            EditingState: Updated editing state.

        Raises:
            WorkflowStateError: Raised outside Editing or while submitting.
            UnknownExpectedInputError: Raised for undeclared fields.
            InvalidEditError: Raised for unsupported edit payloads.
        """

        state = self._workflow_require_editing("edit an input")
        next_state = transition_change_field(state, expected_input_id, raw_edit)
        self._workflow_apply_edit(state, next_state, "edit_input", {"input_id": expected_input_id})
        return next_state

    def workflow_import_input_values(self, expected_input_id: str, text: str) -> EditingState:
        state = self._workflow_require_editing("import input values")
        next_state = transition_import_field_values(state, expected_input_id, text)
        self._workflow_apply_edit(state, next_state, "import_values", {"input_id": expected_input_id})
        return next_state

    def workflow_clear_input_values(self, expected_input_id: str) -> EditingState:
        state = self._workflow_require_editing("clear input values")
        next_state = transition_clear_field_values(state, expected_input_id)
        self._workflow_apply_edit(state, next_state, "clear_values", {"input_id": expected_input_id})
        return next_state

    async def workflow_change_spec(self, spec_id: str) -> WorkflowState:
        """Select another spec and load it.

        Args:
            spec_id: Newly selected spec.

        Returns:
            WorkflowState: Settled state after loading the spec.

        Raises:
            WorkflowStateError: Raised outside Editing or while submitting.
            ValueError: Raised when spec_id is blank.
        """

        normalized_spec_id = spec_id.strip()
        if not normalized_spec_id:
            raise ValueError("spec_id must not be blank")
        state = self._workflow_require_editing("change the spec")
        next_state = transition_change_spec(state, normalized_spec_id)
        self._workflow_apply(state, next_state, "change_spec", "requested", {"spec_id": normalized_spec_id})
        return await self.workflow_run()

    async def workflow_submit(self) -> WorkflowState:
        """Submit the aggregate's request once.

        Submitting while the aggregate holds errors, or while a submission is
        already in flight, is logged and ignored.

        Returns:
            WorkflowState: Submitted on success, Editing with `submission_error` on failure.

        Raises:
            WorkflowStateError: Raised outside Editing.
        """

        state = self._workflow_require_editing("submit", allow_submitting=True)
        if state.is_submitting:
            LOGGER.error("Incorrect state detected: submit requested while already submitting; skipping")
            return state

        request = self._workflow_submittable_request(state)
        if request is None:
            LOGGER.error("Incorrect state detected: attempted to submit a request with errors; skipping")
            return state

        submitting_state = transition_begin_submit(state)
        self._workflow_apply(state, submitting_state, "submit", "started", {"spec_id": request.spec})
        try:
            created = await self._context.client.client_submit_job_request(request)
        except JobApiError as error:
            LOGGER.warning("Job submission failed code=%s message=%s", error.code, error.message)
            self._workflow_apply(
                submitting_state,
                transition_submit_failed(submitting_state, error),
                "submit",
                "failed",
                error.error_to_payload(),
            )
            return self._state

        LOGGER.info("Job submitted job_id=%s", created.id)
        self._workflow_apply(
            submitting_state,
            transition_submit_succeeded(submitting_state, created),
            "submit",
            "succeeded",
            {"job_id": created.id},
        )
        return self._state

    def workflow_download_request(self) -> str | None:
        """Render the aggregate's request as pretty-printed JSON for download.

        Returns:
            str | None: JSON text, or None (logged) when the aggregate holds errors.

        Raises:
            WorkflowStateError: Raised outside Editing.
        """

        state = self._workflow_require_editing("download the request", allow_submitting=True)
        request = self._workflow_submittable_request(state)
        if request is None:
            LOGGER.error("Incorrect state detected: attempted to download a request when errors present; skipping")
            return None
        return json.dumps(request.request_to_payload(), indent=2)

    async def _workflow_load_specs(self, state: LoadingSpecsState) -> bool:
        self._workflow_record("load_specs", "started")
        try:
            summaries = await self._context.client.client_fetch_job_spec_summaries()
        except JobApiError as error:
            LOGGER.warning("Loading spec summaries failed code=%s message=%s", error.code, error.message)
            return self._workflow_apply(
                state, transition_specs_failed(state, error), "load_specs", "failed", error.error_to_payload()
            )
        return self._workflow_apply(
            state, transition_specs_loaded(state, summaries), "load_specs", "succeeded", {"count": len(summaries)}
        )

    async def _workflow_load_existing_job(self, state: LoadingExistingJobState) -> bool:
        client = self._context.client
        self._workflow_record("load_existing_job", "started", {"job_id": state.job_id})
        step = STEP_JOB_DETAILS
        try:
            details = await client.client_fetch_job_details(state.job_id)
            step = STEP_JOB_INPUTS
            inputs = await client.client_fetch_job_inputs(state.job_id)
            step = STEP_ORIGINAL_SPEC
            original_spec = await client.client_fetch_job_spec_for_job(state.job_id)
            step = STEP_CURRENT_SPEC
            current_spec = await client.client_fetch_job_spec(original_spec.id)
        except JobApiError as error:
            LOGGER.warning(
                "Loading existing job failed job_id=%s step=%s code=%s message=%s",
                state.job_id,
                step,
                error.code,
                error.message,
            )
            return self._workflow_apply(
                state,
                transition_existing_job_failed(state, step, error),
                "load_existing_job",
                "failed",
                {"step": step, **error.error_to_payload()},
            )
        return self._workflow_apply(
            state,
            transition_existing_job_loaded(state, details, inputs, original_spec, current_spec),
            "load_existing_job",
            "succeeded",
            {"job_id": state.job_id, "spec_id": current_spec.id},
        )

    async def _workflow_load_spec(self, state: LoadingSpecState) -> bool:
        spec_id = state.loading_target_spec_id()
        self._workflow_record("load_spec", "started", {"spec_id": spec_id})
        try:
            spec = await self._context.client.client_fetch_job_spec(spec_id)
        except JobApiError as error:
            LOGGER.warning("Loading spec failed spec_id=%s code=%s message=%s", spec_id, error.code, error.message)
            return self._workflow_apply(
                state, transition_spec_failed(state, error), "load_spec", "failed", {"spec_id": spec_id, **error.error_to_payload()}
            )
        return self._workflow_apply(state, transition_spec_loaded(state, spec), "load_spec", "succeeded", {"spec_id": spec.id})

    def _workflow_apply(
        self,
        origin_state: WorkflowState,
        next_state: WorkflowState,
        stage: str,
        status: str,
        details: dict[str, Any] | None = None,
    ) -> bool:
        """Replace the current state when origin_state is still current.

        Args:
            origin_state: State the result belongs to.
            next_state: Replacement state.
            stage: Timeline stage name.
            status: Timeline status marker.
            details: Optional timeline details.

        Returns:
            bool: True when applied, False when the result was stale and discarded.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        if self._state is not origin_state:
            LOGGER.info(
                "Discarding stale %s result: state changed from %s to %s",
                stage,
                origin_state.state_name,
                self._state.state_name,
            )
            self._workflow_record(stage, "discarded", {"reason": "stale"})
            return False

        self._state = next_state
        event_details = {"state": next_state.state_name}
        if details:
            event_details.update(details)
        self._workflow_record(stage, status, event_details)
        return True

    def _workflow_apply_edit(
        self,
        origin_state: EditingState,
        next_state: EditingState,
        stage: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        if not self._workflow_apply(origin_state, next_state, stage, "applied", details):
            raise WorkflowStateError(f"{stage} was discarded because the submission changed concurrently")

    def _workflow_record(self, stage: str, status: str, details: dict[str, Any] | None = None) -> None:
        self._timeline.append(domain_build_stage_event(stage=stage, status=status, details=details))

    def _workflow_require_editing(self, operation: str, allow_submitting: bool = False) -> EditingState:
        state = self._state
        if not isinstance(state, EditingState):
            raise WorkflowStateError(f"cannot {operation} in state {state.state_name}")
        if state.is_submitting and not allow_submitting:
            raise WorkflowStateError(f"cannot {operation} while the request is being submitted")
        return state

    @staticmethod
    def _workflow_submittable_request(state: EditingState) -> JobRequest | None:
        return request_update_visit(state.aggregate, on_value=lambda request: request, on_errors=lambda errors: None)
