"""Regression tests for backend payload parsing into domain models."""

from __future__ import annotations

import pytest

from job_submission.domain import (
    DEFAULT_JOB_NAME,
    domain_parse_job_created_response,
    domain_parse_job_details,
    domain_parse_job_outputs,
    domain_parse_job_request,
    domain_parse_job_spec,
    domain_parse_job_spec_summaries,
)


def test_domain_parse_job_spec_keeps_declared_input_order_and_unknown_types() -> None:
    """Parse expected inputs in declared order and keep unknown type tags intact.

    Returns:
        None: Assertions validate parsed spec structure.

    Raises:
        AssertionError: Raised when parsing drops or reorders fields.
    """

    spec = domain_parse_job_spec(
        {
            "id": "align",
            "name": "Align reads",
            "description": "Aligns reads",
            "expectedInputs": [
                {"id": "reads", "type": "string[]", "default": ["a"]},
                {"id": "threshold", "type": "int", "min": 1, "max": "10"},
                {"id": "mode", "type": "select", "options": [{"id": "fast"}, {"id": "slow", "name": "Slow"}]},
                {"id": "payload", "type": "blob"},
            ],
        }
    )

    assert [expected_input.id for expected_input in spec.expected_inputs] == ["reads", "threshold", "mode", "payload"]
    threshold = spec.spec_find_expected_input("threshold")
    assert threshold is not None
    assert threshold.min_value == 1
    assert threshold.max_value == 10
    mode = spec.spec_find_expected_input("mode")
    assert mode is not None
    assert [option.name for option in mode.options] == ["fast", "Slow"]
    assert spec.spec_find_expected_input("payload").type == "blob"


def test_domain_parse_job_spec_rejects_duplicate_expected_input_ids() -> None:
    """Reject specs that declare the same expected input id twice.

    Returns:
        None: Assertions validate duplicate detection.

    Raises:
        AssertionError: Raised when duplicates are accepted.
    """

    with pytest.raises(ValueError, match="duplicate expected input id=x"):
        domain_parse_job_spec(
            {
                "id": "spec",
                "expectedInputs": [{"id": "x", "type": "string"}, {"id": "x", "type": "int"}],
            }
        )


@pytest.mark.parametrize(
    ("expected_input_payload", "field_name"),
    [
        ({"id": "mode", "type": "select", "options": 5}, "options"),
        ({"id": "query", "type": "sql", "tables": "people"}, "tables"),
        ({"id": "query", "type": "sql", "tables": [{"id": "people", "columns": 3}]}, "columns"),
    ],
)
def test_domain_parse_job_spec_rejects_non_list_collections(expected_input_payload: dict, field_name: str) -> None:
    with pytest.raises(ValueError, match=f"`{field_name}` must be a list"):
        domain_parse_job_spec({"id": "spec", "expectedInputs": [expected_input_payload]})


def test_domain_parse_job_spec_parses_constrained_query_tables() -> None:
    spec = domain_parse_job_spec(
        {
            "id": "query-spec",
            "expectedInputs": [
                {
                    "id": "query",
                    "type": "sql",
                    "tables": [
                        {
                            "id": "people",
                            "columns": [{"id": "age", "type": "int"}, {"id": "name"}],
                        }
                    ],
                }
            ],
        }
    )

    table = spec.expected_inputs[0].tables[0]
    assert table.name == "people"
    assert [(column.id, column.type) for column in table.columns] == [("age", "int"), ("name", "string")]
    assert table.table_find_column("missing") is None


def test_domain_parse_job_spec_summaries_requires_entries_list() -> None:
    """Parse summary collections and reject payloads without entries.

    Returns:
        None: Assertions validate collection contract handling.

    Raises:
        AssertionError: Raised when collection contract checks are incorrect.
    """

    summaries = domain_parse_job_spec_summaries({"entries": [{"id": "a", "name": "A"}, {"id": "b"}]})

    assert [summary.id for summary in summaries] == ["a", "b"]
    assert summaries[1].name == ""
    with pytest.raises(ValueError, match="entries list"):
        domain_parse_job_spec_summaries({"items": []})


def test_domain_parse_job_details_flattens_links_and_orders_timestamps() -> None:
    details = domain_parse_job_details(
        {
            "id": "job-1",
            "name": "nightly",
            "owner": "analyst",
            "timestamps": [{"status": "submitted", "time": "t1"}, {"status": "running", "time": "t2"}],
            "_links": {"inputs": {"href": "/v1/jobs/job-1/inputs"}, "broken": "not-a-link"},
        }
    )

    assert details.job_latest_status() == "running"
    assert details.links == {"inputs": "/v1/jobs/job-1/inputs"}


def test_domain_parse_job_created_response_and_outputs() -> None:
    """Parse submit responses and output listings.

    Returns:
        None: Assertions validate created id and output metadata.

    Raises:
        AssertionError: Raised when parsing is incorrect.
    """

    created = domain_parse_job_created_response({"id": "job-9", "_links": {"self": {"href": "/v1/jobs/job-9"}}})
    outputs = domain_parse_job_outputs(
        {
            "entries": [
                {
                    "id": "report",
                    "size": 42,
                    "mimeType": "text/plain",
                    "_links": {"self": {"href": "/v1/jobs/job-9/outputs/report"}},
                }
            ]
        }
    )

    assert created.id == "job-9"
    assert outputs[0].size == 42
    assert outputs[0].mime_type == "text/plain"
    assert outputs[0].href == "/v1/jobs/job-9/outputs/report"
    with pytest.raises(ValueError, match="missing required field `id`"):
        domain_parse_job_created_response({})


def test_domain_parse_job_request_defaults_blank_name() -> None:
    request = domain_parse_job_request({"spec": "align", "name": "  ", "inputs": {"x": 1}})

    assert request.name == DEFAULT_JOB_NAME
    assert request.request_to_payload() == {"spec": "align", "name": DEFAULT_JOB_NAME, "inputs": {"x": 1}}
    with pytest.raises(ValueError, match="inputs must be an object"):
        domain_parse_job_request({"spec": "align", "inputs": [1]})
