"""Workflow state values for the job submission state machine.

Exactly one state is current at a time. States are immutable; transitions
replace the current state wholesale.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final, Union

from job_submission.adapters import JobApiError
from job_submission.domain import (
    DEFAULT_JOB_NAME,
    JobRequest,
    JobRequestEditorUpdate,
    JobSpec,
    JobSpecSummary,
)
from job_submission.editors import FieldEditorState

STATE_LOADING_SPECS: Final[str] = "loading_specs"
STATE_NO_SPECS_AVAILABLE: Final[str] = "no_specs_available"
STATE_LOADING_EXISTING_JOB: Final[str] = "loading_existing_job"
STATE_LOADING_SPEC: Final[str] = "loading_spec"
STATE_EDITING: Final[str] = "editing"
STATE_SUBMITTED: Final[str] = "submitted"

STEP_JOB_DETAILS: Final[str] = "job_details"
STEP_JOB_INPUTS: Final[str] = "job_inputs"
STEP_ORIGINAL_SPEC: Final[str] = "original_spec"
STEP_CURRENT_SPEC: Final[str] = "current_spec"


@dataclass(frozen=True)
class WorkflowHints:
    """Optional start-up hints supplied by the caller.

    Attributes:
        based_on_job_id: Existing job whose request should pre-populate the draft.
        initial_spec_id: Spec to load first when no existing job is given.
    """

    based_on_job_id: str | None = None
    initial_spec_id: str | None = None


@dataclass(frozen=True)
class LoadingSpecsState:
    """Fetching the list of spec summaries.

    Attributes:
        hints: Start-up hints carried to the next state.
        error: Last fetch failure, None while loading.
    """

    hints: WorkflowHints = field(default_factory=WorkflowHints)
    error: JobApiError | None = None

    state_name = STATE_LOADING_SPECS


@dataclass(frozen=True)
class NoSpecsAvailableState:
    """Backend exposes no specs; nothing can be submitted."""

    state_name = STATE_NO_SPECS_AVAILABLE


@dataclass(frozen=True)
class LoadingExistingJobState:
    """Fetching an existing job, its inputs and its specs, strictly in sequence.

    Attributes:
        job_id: Existing job identifier.
        summaries: Spec summaries fetched earlier.
        failed_step: Step that failed last, None while loading.
        error: Last fetch failure, None while loading.
    """

    job_id: str
    summaries: tuple[JobSpecSummary, ...]
    failed_step: str | None = None
    error: JobApiError | None = None

    state_name = STATE_LOADING_EXISTING_JOB


@dataclass(frozen=True)
class LoadingSpecState:
    """Fetching one full spec.

    Attributes:
        summaries: Spec summaries fetched earlier.
        draft: Draft request carried into the editor.
        spec_id: Explicitly selected spec, if any.
        initial_spec_id: Spec hint used when nothing was selected explicitly.
        error: Last fetch failure, None while loading.
    """

    summaries: tuple[JobSpecSummary, ...]
    draft: JobRequest
    spec_id: str | None = None
    initial_spec_id: str | None = None
    error: JobApiError | None = None

    state_name = STATE_LOADING_SPEC

    def loading_target_spec_id(self) -> str:
        """Return the spec to fetch: explicit selection, else hint, else first summary.

        Returns:
            str: Spec identifier.

        Raises:
            ValueError: Raised when no selection, hint or summary is available.
        """

        if self.spec_id:
            return self.spec_id
        if self.initial_spec_id:
            return self.initial_spec_id
        if not self.summaries:
            raise ValueError("no spec can be selected: summaries are empty")
        return self.summaries[0].id


@dataclass(frozen=True)
class EditingState:
    """Editing the draft request against a loaded spec.

    Attributes:
        summaries: Spec summaries for spec re-selection.
        spec: Loaded spec.
        suggested: Draft the editors were initialized from.
        job_name: Current job name.
        fields: Editor state per expected input id, in spec order.
        aggregate: Live combined request update.
        is_submitting: True while a submission is in flight.
        submission_error: Last submission failure.
    """

    summaries: tuple[JobSpecSummary, ...]
    spec: JobSpec
    suggested: JobRequest
    job_name: str
    fields: dict[str, FieldEditorState]
    aggregate: JobRequestEditorUpdate
    is_submitting: bool = False
    submission_error: JobApiError | None = None

    state_name = STATE_EDITING


@dataclass(frozen=True)
class SubmittedState:
    """Job was created; the caller should navigate to it.

    Attributes:
        job_id: Created job identifier.
        navigation_path: Route of the created job, `/jobs/<id>`.
    """

    job_id: str
    navigation_path: str

    state_name = STATE_SUBMITTED


WorkflowState = Union[
    LoadingSpecsState,
    NoSpecsAvailableState,
    LoadingExistingJobState,
    LoadingSpecState,
    EditingState,
    SubmittedState,
]


def state_blank_draft() -> JobRequest:
    return JobRequest(spec=None, name=DEFAULT_JOB_NAME, inputs={})
