"""Regression tests for combining field updates into one request update."""

from __future__ import annotations

import pytest

from job_submission.domain import (
    ExpectedInput,
    JobRequest,
    JobSpec,
    input_update_errors,
    input_update_missing,
    input_update_value,
    request_update_errors,
    request_update_value,
)
from job_submission.workflow import AggregatorInvariantError, aggregator_recompute

SPEC = JobSpec(
    id="align",
    name="Align",
    description="",
    expected_inputs=(
        ExpectedInput(id="reads", type="string"),
        ExpectedInput(id="threshold", type="int"),
        ExpectedInput(id="seed", type="int", default=5),
        ExpectedInput(id="ratio", type="float"),
    ),
)


def test_workflow_aggregator_lists_missing_before_erroneous_in_spec_order() -> None:
    """Report the job name first, then missing fields, then erroneous fields.

    Returns:
        None: Assertions validate error ordering.

    Raises:
        AssertionError: Raised when ordering or messages are incorrect.
    """

    update = aggregator_recompute(
        job_name="  ",
        inputs={
            "ratio": input_update_errors(["x: is not a number", "second"]),
            "reads": input_update_value("r1"),
            "threshold": input_update_missing(),
            "seed": input_update_missing(),
        },
        spec=SPEC,
    )

    assert update == request_update_errors(
        ["name: is missing", "threshold: is missing", "ratio: x: is not a number,second"]
    )


def test_workflow_aggregator_builds_request_and_omits_defaulted_missing_inputs() -> None:
    """Return a Value request when every field is valid or defaulted.

    Returns:
        None: Assertions validate the submittable request.

    Raises:
        AssertionError: Raised when the request is incorrect.
    """

    update = aggregator_recompute(
        job_name="nightly",
        inputs={
            "reads": input_update_value(""),
            "threshold": input_update_value(3),
            "seed": input_update_missing(),
            "ratio": input_update_value("0.10000000000000000001"),
        },
        spec=SPEC,
    )

    assert update == request_update_value(
        JobRequest(
            spec="align",
            name="nightly",
            inputs={"reads": "", "threshold": 3, "ratio": "0.10000000000000000001"},
        )
    )


def test_workflow_aggregator_treats_absent_fields_as_missing() -> None:
    update = aggregator_recompute(job_name="job", inputs={"reads": input_update_value("r")}, spec=SPEC)

    assert update == request_update_errors(["threshold: is missing", "ratio: is missing"])


def test_workflow_aggregator_rejects_undeclared_inputs() -> None:
    """Raise when updates reference fields the spec does not declare.

    Returns:
        None: Assertions validate invariant enforcement.

    Raises:
        AssertionError: Raised when undeclared inputs are accepted.
    """

    with pytest.raises(AggregatorInvariantError, match="not declared by spec align: ghost"):
        aggregator_recompute(job_name="job", inputs={"ghost": input_update_value(1)}, spec=SPEC)


def test_workflow_aggregator_is_order_independent() -> None:
    inputs = {
        "reads": input_update_value("r"),
        "threshold": input_update_errors(["bad"]),
        "ratio": input_update_missing(),
    }
    reversed_inputs = dict(reversed(list(inputs.items())))

    assert aggregator_recompute("job", inputs, SPEC) == aggregator_recompute("job", reversed_inputs, SPEC)
