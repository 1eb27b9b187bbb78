"""Combine per-field input updates into one job request update."""

from __future__ import annotations

from typing import Any, Mapping

from job_submission.domain import (
    InputEditorUpdate,
    JobRequest,
    JobRequestEditorUpdate,
    JobSpec,
    input_update_missing,
    input_update_visit,
    request_update_errors,
    request_update_value,
)

from .errors import AggregatorInvariantError

JOB_NAME_FIELD_ID = "name"


def aggregator_recompute(
    job_name: str,
    inputs: Mapping[str, InputEditorUpdate],
    spec: JobSpec,
) -> JobRequestEditorUpdate:
    """Recompute the request update from the full current set of field updates.

    Fields are visited in the spec's declared order. A declared field with no
    entry in `inputs` counts as missing. Missing fields are only reported
    when the field has no non-empty declared default; a blank job name is
    reported first as `name: is missing`.

    Args:
        job_name: Current job name.
        inputs: Mapping from expected input id to its latest update.
        spec: Spec the request is being built against.

    Returns:
        JobRequestEditorUpdate: Value with the submittable request, or Errors
        with missing messages followed by erroneous messages.

    Raises:
        AggregatorInvariantError: Raised when inputs name undeclared fields or a
            field lands in both the missing and erroneous partitions.
    """

    declared_ids = {expected_input.id for expected_input in spec.expected_inputs}
    undeclared_ids = sorted(input_id for input_id in inputs if input_id not in declared_ids)
    if undeclared_ids:
        raise AggregatorInvariantError(
            f"inputs not declared by spec {spec.id}: {', '.join(undeclared_ids)}"
        )

    collected_inputs: dict[str, Any] = {}
    missing_ids: list[str] = []
    erroneous: list[tuple[str, list[str]]] = []

    for expected_input in spec.expected_inputs:
        update = inputs.get(expected_input.id, input_update_missing())
        variant, payload = input_update_visit(
            update,
            on_value=lambda value: ("value", value),
            on_missing=lambda: ("missing", None),
            on_errors=lambda errors: ("errors", errors),
        )
        if variant == "value":
            collected_inputs[expected_input.id] = payload
        elif variant == "missing":
            if not expected_input.expected_input_has_default():
                missing_ids.append(expected_input.id)
        else:
            erroneous.append((expected_input.id, payload))

    overlapping_ids = set(missing_ids) & {input_id for input_id, _ in erroneous}
    if overlapping_ids:
        raise AggregatorInvariantError(
            f"inputs both missing and erroneous: {', '.join(sorted(overlapping_ids))}"
        )

    missing_messages = [f"{input_id}: is missing" for input_id in missing_ids]
    if not job_name.strip():
        missing_messages.insert(0, f"{JOB_NAME_FIELD_ID}: is missing")
    erroneous_messages = [f"{input_id}: {','.join(errors)}" for input_id, errors in erroneous]

    if missing_messages or erroneous_messages:
        return request_update_errors(missing_messages + erroneous_messages)
    return request_update_value(JobRequest(spec=spec.id, name=job_name, inputs=collected_inputs))
