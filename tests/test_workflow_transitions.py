"""Regression tests for pure workflow state transitions."""
# pylint: disable=duplicate-code

from __future__ import annotations

import pytest

from job_submission.adapters import JobApiConnectionError, JobApiNotFoundError
from job_submission.domain import (
    DEFAULT_JOB_NAME,
    ExpectedInput,
    JobCreatedResponse,
    JobDetails,
    JobRequest,
    JobSpec,
    JobSpecSummary,
    SelectOption,
    input_update_errors,
    input_update_value,
    request_update_value,
)
from job_submission.editors import InvalidEditError
from job_submission.workflow import (
    STEP_JOB_INPUTS,
    EditingState,
    LoadingExistingJobState,
    LoadingSpecsState,
    LoadingSpecState,
    NoSpecsAvailableState,
    SubmittedState,
    UnknownExpectedInputError,
    WorkflowHints,
    WorkflowStateError,
)
from job_submission.workflow.transitions import (
    transition_begin_submit,
    transition_change_field,
    transition_change_job_name,
    transition_change_spec,
    transition_clear_field_values,
    transition_enter_editing,
    transition_existing_job_failed,
    transition_existing_job_loaded,
    transition_import_field_values,
    transition_retry,
    transition_spec_loaded,
    transition_specs_loaded,
    transition_start,
    transition_submit_failed,
    transition_submit_succeeded,
)

SUMMARIES = (JobSpecSummary(id="s1", name="First"), JobSpecSummary(id="s2", name="Second"))
SPEC = JobSpec(
    id="s1",
    name="First",
    description="",
    expected_inputs=(
        ExpectedInput(id="x", type="string"),
        ExpectedInput(id="y", type="int"),
        ExpectedInput(id="z", type="select", options=(SelectOption(id="a", name="A"), SelectOption(id="b", name="B"))),
        ExpectedInput(id="samples", type="string[]"),
    ),
)


def _editing_state() -> EditingState:
    return transition_enter_editing(SUMMARIES, SPEC, JobRequest(spec="s1", name="job", inputs={}))


def test_workflow_transition_specs_loaded_prefers_based_on_hint() -> None:
    """Route to LoadingExistingJob whenever a based-on hint exists, even without summaries.

    Returns:
        None: Assertions validate routing after summaries load.

    Raises:
        AssertionError: Raised when routing is incorrect.
    """

    based_on_state = transition_start(WorkflowHints(based_on_job_id="job-7"))

    assert isinstance(transition_specs_loaded(based_on_state, []), LoadingExistingJobState)
    assert isinstance(transition_specs_loaded(transition_start(), []), NoSpecsAvailableState)

    loading_spec_state = transition_specs_loaded(transition_start(WorkflowHints(initial_spec_id="s2")), list(SUMMARIES))
    assert isinstance(loading_spec_state, LoadingSpecState)
    assert loading_spec_state.draft == JobRequest(spec=None, name=DEFAULT_JOB_NAME, inputs={})
    assert loading_spec_state.spec_id is None
    assert loading_spec_state.loading_target_spec_id() == "s2"


def test_workflow_transition_start_strips_blank_hints() -> None:
    state = transition_start(WorkflowHints(based_on_job_id=" \t", initial_spec_id=" s2 "))

    assert state.hints == WorkflowHints(based_on_job_id=None, initial_spec_id="s2")
    assert transition_start().hints == WorkflowHints()


def test_workflow_loading_target_spec_id_precedence() -> None:
    draft = JobRequest(spec=None)

    assert LoadingSpecState(SUMMARIES, draft, spec_id="s2", initial_spec_id="s9").loading_target_spec_id() == "s2"
    assert LoadingSpecState(SUMMARIES, draft, initial_spec_id="s9").loading_target_spec_id() == "s9"
    assert LoadingSpecState(SUMMARIES, draft).loading_target_spec_id() == "s1"
    with pytest.raises(ValueError, match="summaries are empty"):
        LoadingSpecState((), draft).loading_target_spec_id()


def test_workflow_transition_existing_job_loaded_coerces_old_inputs() -> None:
    """Build editors for the current spec from the old job's name and inputs.

    Returns:
        None: Assertions validate coercion of carried inputs.

    Raises:
        AssertionError: Raised when carried inputs are not coerced.
    """

    state = LoadingExistingJobState(job_id="job-7", summaries=SUMMARIES)
    original_spec = JobSpec(id="s1-v1", name="First", description="", expected_inputs=())

    editing_state = transition_existing_job_loaded(
        state,
        JobDetails(id="job-7", name="nightly"),
        {"x": "old", "y": "abc", "z": "removed", "samples": ["p", "q"]},
        original_spec,
        SPEC,
    )

    assert editing_state.job_name == "nightly"
    assert editing_state.suggested.spec == "s1-v1"
    assert editing_state.fields["x"].update == input_update_value("old")
    assert editing_state.fields["y"].update == input_update_errors(["abc: is not a number"])
    assert editing_state.fields["z"].value == "a"
    assert editing_state.fields["z"].coercion_warning is not None
    assert editing_state.fields["samples"].update == input_update_value(["p", "q"])


def test_workflow_transition_spec_loaded_clears_draft_inputs() -> None:
    state = LoadingSpecState(
        summaries=SUMMARIES,
        draft=JobRequest(spec="s2", name="keep-me", inputs={"x": "dropped"}),
        spec_id="s1",
    )

    editing_state = transition_spec_loaded(state, SPEC)

    assert editing_state.suggested == JobRequest(spec="s1", name="keep-me", inputs={})
    assert editing_state.fields["x"].value == ""


def test_workflow_transition_retry_clears_errors_and_requires_a_failure() -> None:
    """Clear recorded fetch failures and reject retries without one.

    Returns:
        None: Assertions validate retry transitions.

    Raises:
        AssertionError: Raised when retry semantics are incorrect.
    """

    failed_state = transition_existing_job_failed(
        LoadingExistingJobState(job_id="job-7", summaries=SUMMARIES),
        STEP_JOB_INPUTS,
        JobApiNotFoundError("missing", code=404),
    )

    retried_state = transition_retry(failed_state)

    assert failed_state.failed_step == STEP_JOB_INPUTS
    assert retried_state == LoadingExistingJobState(job_id="job-7", summaries=SUMMARIES)
    assert transition_retry(LoadingSpecsState(error=JobApiConnectionError())).error is None
    with pytest.raises(WorkflowStateError, match="nothing to retry in state loading_specs"):
        transition_retry(LoadingSpecsState())


def test_workflow_transition_change_field_recomputes_aggregate() -> None:
    """Recompute the aggregate from every field after one edit.

    Returns:
        None: Assertions validate field edits.

    Raises:
        AssertionError: Raised when aggregation does not follow edits.
    """

    state = _editing_state()
    state = transition_change_field(state, "y", "12")
    state = transition_change_job_name(state, "renamed")

    assert state.aggregate == request_update_value(
        JobRequest(spec="s1", name="renamed", inputs={"x": "", "y": 12, "z": "a", "samples": []})
    )
    with pytest.raises(UnknownExpectedInputError, match="ghost: is not an input of spec s1"):
        transition_change_field(state, "ghost", "1")


def test_workflow_transition_import_and_clear_only_apply_to_string_arrays() -> None:
    state = transition_import_field_values(_editing_state(), "samples", "a\nb")

    assert state.fields["samples"].value == ["a", "b"]
    assert transition_clear_field_values(state, "samples").fields["samples"].value == []
    with pytest.raises(InvalidEditError, match="only string\\[\\] inputs"):
        transition_import_field_values(state, "x", "a")


def test_workflow_transition_change_spec_carries_request_or_suggested_draft() -> None:
    """Carry the complete request forward, or the suggested draft while errors exist.

    Returns:
        None: Assertions validate draft carry-over on spec reselection.

    Raises:
        AssertionError: Raised when the wrong draft is carried.
    """

    valid_state = transition_change_field(_editing_state(), "y", "3")
    invalid_state = transition_change_field(_editing_state(), "y", "three")

    carried_valid = transition_change_spec(valid_state, "s2")
    carried_invalid = transition_change_spec(invalid_state, "s2")

    assert carried_valid.spec_id == "s2"
    assert carried_valid.draft.inputs["y"] == 3
    assert carried_invalid.draft == invalid_state.suggested


def test_workflow_transition_submit_lifecycle() -> None:
    """Lock edits while submitting, then settle in Submitted or back in Editing.

    Returns:
        None: Assertions validate submission transitions.

    Raises:
        AssertionError: Raised when submission transitions are incorrect.
    """

    submitting_state = transition_begin_submit(transition_change_field(_editing_state(), "y", "1"))

    with pytest.raises(WorkflowStateError, match="being submitted"):
        transition_change_field(submitting_state, "x", "late edit")

    failed_state = transition_submit_failed(submitting_state, JobApiConnectionError())
    assert failed_state.is_submitting is False
    assert failed_state.submission_error is not None
    assert failed_state.aggregate == submitting_state.aggregate

    submitted_state = transition_submit_succeeded(submitting_state, JobCreatedResponse(id="job-42"))
    assert submitted_state == SubmittedState(job_id="job-42", navigation_path="/jobs/job-42")
