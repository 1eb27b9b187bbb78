"""Pure transition functions between workflow states.

Every function takes the current state plus the event payload and returns
the next state. None of them perform I/O; the controller owns fetching and
decides which transition to apply.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping

from job_submission.adapters import JobApiError
from job_submission.domain import (
    JobCreatedResponse,
    JobDetails,
    JobRequest,
    JobSpec,
    JobSpecSummary,
    request_update_visit,
)
from job_submission.editors import (
    MISSING_SUGGESTION,
    FieldEditorState,
    InvalidEditError,
    StringArrayInputEditor,
    editor_for_expected_input,
)

from .aggregator import aggregator_recompute
from .errors import UnknownExpectedInputError, WorkflowStateError
from .states import (
    EditingState,
    LoadingExistingJobState,
    LoadingSpecsState,
    LoadingSpecState,
    NoSpecsAvailableState,
    SubmittedState,
    WorkflowHints,
    WorkflowState,
    state_blank_draft,
)


def transition_start(hints: WorkflowHints | None = None) -> LoadingSpecsState:
    """Enter LoadingSpecs with hint ids stripped; blank hint ids count as absent."""

    if hints is None:
        return LoadingSpecsState(hints=WorkflowHints())
    return LoadingSpecsState(
        hints=WorkflowHints(
            based_on_job_id=_normalize_hint(hints.based_on_job_id),
            initial_spec_id=_normalize_hint(hints.initial_spec_id),
        )
    )


def transition_specs_loaded(state: LoadingSpecsState, summaries: list[JobSpecSummary]) -> WorkflowState:
    """Leave LoadingSpecs after the summaries arrived.

    Args:
        state: Current LoadingSpecs state.
        summaries: Fetched spec summaries.

    Returns:
        WorkflowState: LoadingExistingJob when a based-on hint exists,
        NoSpecsAvailable for an empty list, else LoadingSpec with a blank draft.

    Raises:
        RuntimeError: This function does not raise runtime errors.
    """

    summaries_tuple = tuple(summaries)
    if state.hints.based_on_job_id:
        return LoadingExistingJobState(
            job_id=state.hints.based_on_job_id,
            summaries=summaries_tuple,
        )
    if not summaries_tuple:
        return NoSpecsAvailableState()
    return LoadingSpecState(
        summaries=summaries_tuple,
        draft=state_blank_draft(),
        spec_id=None,
        initial_spec_id=state.hints.initial_spec_id,
    )


def transition_specs_failed(state: LoadingSpecsState, error: JobApiError) -> LoadingSpecsState:
    return replace(state, error=error)


def transition_existing_job_loaded(
    state: LoadingExistingJobState,
    details: JobDetails,
    inputs: Mapping[str, Any],
    original_spec: JobSpec,
    current_spec: JobSpec,
) -> EditingState:
    """Enter Editing from a fully loaded existing job.

    The draft keeps the spec id the job was submitted against, the old job
    name and the old inputs; editors are built for the current spec and
    coerce every old input.

    Args:
        state: Current LoadingExistingJob state.
        details: Existing job details.
        inputs: Inputs the job was submitted with.
        original_spec: Spec at submission time.
        current_spec: Current version of that spec.

    Returns:
        EditingState: Editing state for the current spec.

    Raises:
        RuntimeError: This function does not raise runtime errors.
    """

    draft = JobRequest(spec=original_spec.id, name=details.name, inputs=dict(inputs))
    return transition_enter_editing(state.summaries, current_spec, draft)


def transition_existing_job_failed(state: LoadingExistingJobState, failed_step: str, error: JobApiError) -> LoadingExistingJobState:
    return replace(state, failed_step=failed_step, error=error)


def transition_spec_loaded(state: LoadingSpecState, spec: JobSpec) -> EditingState:
    """Enter Editing after a spec fetch; the draft adopts the spec and drops its inputs."""

    draft = replace(state.draft, spec=spec.id, inputs={})
    return transition_enter_editing(state.summaries, spec, draft)


def transition_spec_failed(state: LoadingSpecState, error: JobApiError) -> LoadingSpecState:
    return replace(state, error=error)


def transition_retry(state: WorkflowState) -> WorkflowState:
    """Clear a recorded fetch error so the owning state fetches again from its first step.

    Args:
        state: Current state.

    Returns:
        WorkflowState: Same state kind without the error.

    Raises:
        WorkflowStateError: Raised when the state has no failed fetch to retry.
    """

    if isinstance(state, LoadingSpecsState) and state.error is not None:
        return replace(state, error=None)
    if isinstance(state, LoadingExistingJobState) and state.error is not None:
        return replace(state, failed_step=None, error=None)
    if isinstance(state, LoadingSpecState) and state.error is not None:
        return replace(state, error=None)
    raise WorkflowStateError(f"nothing to retry in state {state.state_name}")


def transition_enter_editing(
    summaries: tuple[JobSpecSummary, ...],
    spec: JobSpec,
    suggested: JobRequest,
) -> EditingState:
    """Build an Editing state by initializing one editor per expected input.

    Args:
        summaries: Spec summaries.
        spec: Loaded spec.
        suggested: Draft whose inputs are offered to the editors.

    Returns:
        EditingState: Editing state with a freshly computed aggregate.

    Raises:
        RuntimeError: This function does not raise runtime errors.
    """

    fields: dict[str, FieldEditorState] = {}
    for expected_input in spec.expected_inputs:
        editor = editor_for_expected_input(expected_input)
        suggested_value = suggested.inputs.get(expected_input.id, MISSING_SUGGESTION)
        fields[expected_input.id] = editor.editor_initialize(expected_input, suggested_value)

    return EditingState(
        summaries=summaries,
        spec=spec,
        suggested=suggested,
        job_name=suggested.name,
        fields=fields,
        aggregate=aggregator_recompute(suggested.name, _fields_to_updates(fields), spec),
    )


def transition_change_job_name(state: EditingState, job_name: str) -> EditingState:
    _require_not_submitting(state)
    return replace(
        state,
        job_name=job_name,
        aggregate=aggregator_recompute(job_name, _fields_to_updates(state.fields), state.spec),
    )


def transition_change_field(state: EditingState, expected_input_id: str, raw_edit: Any) -> EditingState:
    """Apply one edit to one field, then recompute the aggregate.

    Args:
        state: Current Editing state.
        expected_input_id: Edited field.
        raw_edit: Raw edit payload.

    Returns:
        EditingState: State with the new field state and aggregate.

    Raises:
        UnknownExpectedInputError: Raised when the spec does not declare the field.
        InvalidEditError: Raised when the editor rejects the payload shape.
        WorkflowStateError: Raised while a submission is in flight.
    """

    _require_not_submitting(state)
    expected_input = _require_expected_input(state, expected_input_id)
    editor = editor_for_expected_input(expected_input)
    field_state = editor.editor_apply_edit(expected_input, state.fields[expected_input_id], raw_edit)
    return _replace_field(state, expected_input_id, field_state)


def transition_import_field_values(state: EditingState, expected_input_id: str, text: str) -> EditingState:
    """Append values imported from a text file to a `string[]` field."""

    _require_not_submitting(state)
    expected_input = _require_expected_input(state, expected_input_id)
    editor = editor_for_expected_input(expected_input)
    if not isinstance(editor, StringArrayInputEditor):
        raise InvalidEditError(f"{expected_input_id}: only string[] inputs accept imported values")
    field_state = editor.editor_import_values(expected_input, state.fields[expected_input_id], text)
    return _replace_field(state, expected_input_id, field_state)


def transition_clear_field_values(state: EditingState, expected_input_id: str) -> EditingState:
    _require_not_submitting(state)
    expected_input = _require_expected_input(state, expected_input_id)
    editor = editor_for_expected_input(expected_input)
    if not isinstance(editor, StringArrayInputEditor):
        raise InvalidEditError(f"{expected_input_id}: only string[] inputs can be cleared")
    field_state = editor.editor_clear_values(expected_input, state.fields[expected_input_id])
    return _replace_field(state, expected_input_id, field_state)


def transition_change_spec(state: EditingState, spec_id: str) -> LoadingSpecState:
    """Leave Editing to load another spec.

    The aggregate's request is carried forward when it is complete; otherwise
    the draft the editors were initialized from is carried with the current
    job name.

    Args:
        state: Current Editing state.
        spec_id: Newly selected spec.

    Returns:
        LoadingSpecState: Loading state targeting spec_id.

    Raises:
        WorkflowStateError: Raised while a submission is in flight.
    """

    _require_not_submitting(state)
    draft = request_update_visit(
        state.aggregate,
        on_value=lambda request: request,
        on_errors=lambda errors: replace(state.suggested, name=state.job_name),
    )
    return LoadingSpecState(summaries=state.summaries, draft=draft, spec_id=spec_id)


def transition_begin_submit(state: EditingState) -> EditingState:
    return replace(state, is_submitting=True, submission_error=None)


def transition_submit_succeeded(state: EditingState, created: JobCreatedResponse) -> SubmittedState:
    return SubmittedState(job_id=created.id, navigation_path=f"/jobs/{created.id}")


def transition_submit_failed(state: EditingState, error: JobApiError) -> EditingState:
    return replace(state, is_submitting=False, submission_error=error)


def _require_not_submitting(state: EditingState) -> None:
    if state.is_submitting:
        raise WorkflowStateError("the request cannot change while it is being submitted")


def _require_expected_input(state: EditingState, expected_input_id: str):
    expected_input = state.spec.spec_find_expected_input(expected_input_id)
    if expected_input is None:
        raise UnknownExpectedInputError(f"{expected_input_id}: is not an input of spec {state.spec.id}")
    return expected_input


def _replace_field(state: EditingState, expected_input_id: str, field_state: FieldEditorState) -> EditingState:
    fields = dict(state.fields)
    fields[expected_input_id] = field_state
    return replace(
        state,
        fields=fields,
        aggregate=aggregator_recompute(state.job_name, _fields_to_updates(fields), state.spec),
    )


def _fields_to_updates(fields: Mapping[str, FieldEditorState]):
    return {input_id: field_state.update for input_id, field_state in fields.items()}


def _normalize_hint(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None
