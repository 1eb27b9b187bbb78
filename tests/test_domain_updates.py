"""Regression tests for input and request update variants."""

from __future__ import annotations

import pytest

from job_submission.domain import (
    ExpectedInput,
    JobRequest,
    input_update_errors,
    input_update_missing,
    input_update_value,
    input_update_visit,
    request_update_errors,
    request_update_value,
    request_update_visit,
)


def _describe(update) -> str:
    return input_update_visit(
        update,
        on_value=lambda value: f"value:{value}",
        on_missing=lambda: "missing",
        on_errors=lambda errors: "errors:" + "|".join(errors),
    )


def test_domain_input_update_visit_dispatches_each_variant() -> None:
    """Invoke exactly the handler matching the held variant.

    Returns:
        None: Assertions validate dispatch.

    Raises:
        AssertionError: Raised when dispatch is incorrect.
    """

    assert _describe(input_update_value(0)) == "value:0"
    assert _describe(input_update_missing()) == "missing"
    assert _describe(input_update_errors(["a", "b"])) == "errors:a|b"


def test_domain_input_update_visit_rejects_foreign_values() -> None:
    with pytest.raises(TypeError, match="unsupported input editor update"):
        _describe("not-an-update")


def test_domain_request_update_visit_dispatches_each_variant() -> None:
    """Invoke the value or errors handler of a request update.

    Returns:
        None: Assertions validate dispatch.

    Raises:
        AssertionError: Raised when dispatch is incorrect.
    """

    request = JobRequest(spec="s", name="n", inputs={})

    assert request_update_visit(request_update_value(request), on_value=lambda r: r.spec, on_errors=len) == "s"
    assert request_update_visit(request_update_errors(["x"]), on_value=lambda r: r.spec, on_errors=len) == 1


@pytest.mark.parametrize(
    ("default_value", "expected"),
    [
        (None, False),
        ("", False),
        ([], False),
        ({}, False),
        (0, True),
        (False, True),
        ("text", True),
        (["a"], True),
    ],
)
def test_domain_expected_input_has_default(default_value: object, expected: bool) -> None:
    """Treat None and empty containers as no default; falsy scalars count.

    Args:
        default_value: Declared default.
        expected: Expected result.

    Returns:
        None: Assertions validate default detection.

    Raises:
        AssertionError: Raised when default detection is incorrect.
    """

    assert ExpectedInput(id="x", type="string", default=default_value).expected_input_has_default() is expected
