"""JSON payload builders for workflow states exposed by the session API."""

from __future__ import annotations

from typing import Any

from job_submission.adapters import JobApiError
from job_submission.domain import (
    InputEditorUpdate,
    JobRequestEditorUpdate,
    input_update_visit,
    request_update_visit,
)
from job_submission.editors import FieldEditorState, QuerySelection, query_selection_to_payload
from job_submission.workflow import (
    EditingState,
    LoadingExistingJobState,
    LoadingSpecsState,
    LoadingSpecState,
    SubmittedState,
    WorkflowState,
)


def api_serialize_workflow_state(state: WorkflowState) -> dict[str, Any]:
    """Serialize one workflow state into a JSON-compatible payload.

    Args:
        state: Workflow state.

    Returns:
        dict[str, Any]: Payload whose `state` key names the state kind.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    payload: dict[str, Any] = {"state": state.state_name}

    if isinstance(state, LoadingSpecsState):
        payload["error"] = api_serialize_api_error(state.error)
    elif isinstance(state, LoadingExistingJobState):
        payload["job_id"] = state.job_id
        payload["failed_step"] = state.failed_step
        payload["error"] = api_serialize_api_error(state.error)
    elif isinstance(state, LoadingSpecState):
        payload["spec_id"] = state.spec_id or state.initial_spec_id
        payload["draft"] = state.draft.request_to_payload()
        payload["error"] = api_serialize_api_error(state.error)
    elif isinstance(state, EditingState):
        payload["spec"] = {
            "id": state.spec.id,
            "name": state.spec.name,
            "description": state.spec.description,
        }
        payload["specs"] = [
            {"id": summary.id, "name": summary.name, "description": summary.description}
            for summary in state.summaries
        ]
        payload["job_name"] = state.job_name
        payload["fields"] = [api_serialize_field_state(field_state) for field_state in state.fields.values()]
        payload["aggregate"] = api_serialize_request_update(state.aggregate)
        payload["is_submitting"] = state.is_submitting
        payload["submission_error"] = api_serialize_api_error(state.submission_error)
    elif isinstance(state, SubmittedState):
        payload["job_id"] = state.job_id
        payload["navigation_path"] = state.navigation_path

    return payload


def api_serialize_field_state(field_state: FieldEditorState) -> dict[str, Any]:
    value = field_state.value
    if isinstance(value, QuerySelection):
        value = query_selection_to_payload(value)
    return {
        "id": field_state.expected_input_id,
        "kind": field_state.editor_kind,
        "value": value,
        "coercion_warning": field_state.coercion_warning,
        "update": api_serialize_input_update(field_state.update),
        "details": field_state.details,
    }


def api_serialize_input_update(update: InputEditorUpdate) -> dict[str, Any]:
    return input_update_visit(
        update,
        on_value=lambda value: {"kind": "value", "value": value},
        on_missing=lambda: {"kind": "missing"},
        on_errors=lambda errors: {"kind": "errors", "errors": errors},
    )


def api_serialize_request_update(update: JobRequestEditorUpdate) -> dict[str, Any]:
    return request_update_visit(
        update,
        on_value=lambda request: {"kind": "value", "request": request.request_to_payload()},
        on_errors=lambda errors: {"kind": "errors", "errors": errors},
    )


def api_serialize_api_error(error: JobApiError | None) -> dict[str, object] | None:
    if error is None:
        return None
    return error.error_to_payload()
