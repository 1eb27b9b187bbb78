"""Shared backend payload parsing helpers.

This module centralizes conversion of decoded JSON payloads into domain models
so the HTTP adapter, the session API and tests share one deterministic
contract for spec, job and request shapes.
"""

from __future__ import annotations

from typing import Any

from .models import (
    DEFAULT_JOB_NAME,
    ColumnSchema,
    ExpectedInput,
    JobCreatedResponse,
    JobDetails,
    JobOutput,
    JobRequest,
    JobSpec,
    JobSpecSummary,
    JobTimestamp,
    SelectOption,
    TableSchema,
)


def domain_parse_job_spec_summary(payload: object) -> JobSpecSummary:
    """Parse one spec summary payload.

    Args:
        payload: Decoded JSON object.

    Returns:
        JobSpecSummary: Parsed summary.

    Raises:
        ValueError: Raised when required fields are missing or malformed.
    """

    mapping = _domain_require_mapping(payload, context_label="job spec summary")
    return JobSpecSummary(
        id=_domain_require_text(mapping, "id", context_label="job spec summary"),
        name=_domain_optional_text(mapping.get("name")) or "",
        description=_domain_optional_text(mapping.get("description")) or "",
    )


def domain_parse_job_spec_summaries(payload: object) -> list[JobSpecSummary]:
    """Parse a spec summary collection (`{"entries": [...]}`).

    Args:
        payload: Decoded JSON object.

    Returns:
        list[JobSpecSummary]: Parsed summaries in backend order.

    Raises:
        ValueError: Raised when the collection shape is invalid.
    """

    entries = _domain_require_entries(payload, context_label="job spec summaries")
    return [domain_parse_job_spec_summary(entry) for entry in entries]


def domain_parse_job_spec(payload: object) -> JobSpec:
    """Parse one full job spec payload.

    Args:
        payload: Decoded JSON object.

    Returns:
        JobSpec: Parsed spec with ordered expected inputs.

    Raises:
        ValueError: Raised when required fields are missing or duplicated.
    """

    mapping = _domain_require_mapping(payload, context_label="job spec")
    raw_expected_inputs = _domain_optional_list(mapping, "expectedInputs", context_label="job spec")

    expected_inputs = tuple(domain_parse_expected_input(entry) for entry in raw_expected_inputs)
    seen_ids: set[str] = set()
    for expected_input in expected_inputs:
        if expected_input.id in seen_ids:
            raise ValueError(f"job spec declares duplicate expected input id={expected_input.id}")
        seen_ids.add(expected_input.id)

    return JobSpec(
        id=_domain_require_text(mapping, "id", context_label="job spec"),
        name=_domain_optional_text(mapping.get("name")) or "",
        description=_domain_optional_text(mapping.get("description")) or "",
        expected_inputs=expected_inputs,
    )


def domain_parse_expected_input(payload: object) -> ExpectedInput:
    """Parse one expected input payload, keeping unknown type tags intact.

    Args:
        payload: Decoded JSON object.

    Returns:
        ExpectedInput: Parsed expected input.

    Raises:
        ValueError: Raised when id or type is missing.
    """

    mapping = _domain_require_mapping(payload, context_label="expected input")
    raw_options = _domain_optional_list(mapping, "options", context_label="expected input")
    raw_tables = _domain_optional_list(mapping, "tables", context_label="expected input")
    return ExpectedInput(
        id=_domain_require_text(mapping, "id", context_label="expected input"),
        type=_domain_require_text(mapping, "type", context_label="expected input"),
        name=_domain_optional_text(mapping.get("name")),
        description=_domain_optional_text(mapping.get("description")),
        default=mapping.get("default"),
        min_value=_domain_optional_number(mapping.get("min")),
        max_value=_domain_optional_number(mapping.get("max")),
        options=tuple(_domain_parse_select_option(entry) for entry in raw_options),
        tables=tuple(_domain_parse_table_schema(entry) for entry in raw_tables),
        raw_payload=dict(mapping),
    )


def domain_parse_job_details(payload: object) -> JobDetails:
    """Parse one job details payload.

    Args:
        payload: Decoded JSON object.

    Returns:
        JobDetails: Parsed job details.

    Raises:
        ValueError: Raised when required fields are missing.
    """

    mapping = _domain_require_mapping(payload, context_label="job details")
    raw_timestamps = _domain_optional_list(mapping, "timestamps", context_label="job details")
    timestamps = tuple(
        JobTimestamp(
            status=str(entry.get("status", "")),
            time=str(entry.get("time", "")),
            message=_domain_optional_text(entry.get("message")),
        )
        for entry in raw_timestamps
        if isinstance(entry, dict)
    )
    return JobDetails(
        id=_domain_require_text(mapping, "id", context_label="job details"),
        name=_domain_optional_text(mapping.get("name")) or DEFAULT_JOB_NAME,
        owner=_domain_optional_text(mapping.get("owner")) or "",
        timestamps=timestamps,
        links=_domain_parse_links(mapping.get("_links")),
    )


def domain_parse_job_created_response(payload: object) -> JobCreatedResponse:
    """Parse the response returned after submitting a job request.

    Args:
        payload: Decoded JSON object.

    Returns:
        JobCreatedResponse: Created job identifier and links.

    Raises:
        ValueError: Raised when the job id is missing.
    """

    mapping = _domain_require_mapping(payload, context_label="job created response")
    return JobCreatedResponse(
        id=_domain_require_text(mapping, "id", context_label="job created response"),
        links=_domain_parse_links(mapping.get("_links")),
    )


def domain_parse_job_outputs(payload: object) -> list[JobOutput]:
    """Parse a job output collection (`{"entries": [...]}`).

    Args:
        payload: Decoded JSON object.

    Returns:
        list[JobOutput]: Parsed outputs.

    Raises:
        ValueError: Raised when the collection shape is invalid.
    """

    outputs: list[JobOutput] = []
    for entry in _domain_require_entries(payload, context_label="job outputs"):
        mapping = _domain_require_mapping(entry, context_label="job output")
        href = _domain_parse_links(mapping.get("_links")).get("self")
        outputs.append(
            JobOutput(
                id=_domain_require_text(mapping, "id", context_label="job output"),
                size=int(mapping.get("size") or 0),
                mime_type=_domain_optional_text(mapping.get("mimeType")),
                name=_domain_optional_text(mapping.get("name")),
                description=_domain_optional_text(mapping.get("description")),
                href=href,
            )
        )
    return outputs


def domain_parse_job_request(payload: object) -> JobRequest:
    """Parse a job request payload such as a downloaded draft.

    Args:
        payload: Decoded JSON object.

    Returns:
        JobRequest: Parsed request; name falls back to the default job name.

    Raises:
        ValueError: Raised when inputs is not an object.
    """

    mapping = _domain_require_mapping(payload, context_label="job request")
    inputs = mapping.get("inputs") or {}
    if not isinstance(inputs, dict):
        raise ValueError("job request inputs must be an object")
    return JobRequest(
        spec=_domain_optional_text(mapping.get("spec")),
        name=_domain_optional_text(mapping.get("name")) or DEFAULT_JOB_NAME,
        inputs=dict(inputs),
    )


def _domain_parse_select_option(payload: object) -> SelectOption:
    mapping = _domain_require_mapping(payload, context_label="select option")
    option_id = _domain_require_text(mapping, "id", context_label="select option")
    return SelectOption(
        id=option_id,
        name=_domain_optional_text(mapping.get("name")) or option_id,
        description=_domain_optional_text(mapping.get("description")),
    )


def _domain_parse_table_schema(payload: object) -> TableSchema:
    mapping = _domain_require_mapping(payload, context_label="table schema")
    columns = []
    for entry in _domain_optional_list(mapping, "columns", context_label="table schema"):
        column_mapping = _domain_require_mapping(entry, context_label="column schema")
        column_id = _domain_require_text(column_mapping, "id", context_label="column schema")
        columns.append(
            ColumnSchema(
                id=column_id,
                name=_domain_optional_text(column_mapping.get("name")) or column_id,
                description=_domain_optional_text(column_mapping.get("description")) or "",
                type=_domain_optional_text(column_mapping.get("type")) or "string",
            )
        )
    table_id = _domain_require_text(mapping, "id", context_label="table schema")
    return TableSchema(
        id=table_id,
        name=_domain_optional_text(mapping.get("name")) or table_id,
        description=_domain_optional_text(mapping.get("description")) or "",
        columns=tuple(columns),
    )


def _domain_parse_links(payload: object) -> dict[str, str]:
    """Flatten a `{rel: {href}}` link map into `{rel: href}`."""

    if not isinstance(payload, dict):
        return {}
    links: dict[str, str] = {}
    for relation, link in payload.items():
        if isinstance(link, dict) and isinstance(link.get("href"), str):
            links[str(relation)] = link["href"]
    return links


def _domain_require_mapping(payload: object, context_label: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValueError(f"{context_label} payload must be an object")
    return payload


def _domain_require_entries(payload: object, context_label: str) -> list[Any]:
    mapping = _domain_require_mapping(payload, context_label=context_label)
    entries = mapping.get("entries")
    if not isinstance(entries, list):
        raise ValueError(f"{context_label} payload must contain an entries list")
    return entries


def _domain_optional_list(mapping: dict[str, Any], key: str, context_label: str) -> list[Any]:
    value = mapping.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{context_label} field `{key}` must be a list")
    return value


def _domain_require_text(mapping: dict[str, Any], key: str, context_label: str) -> str:
    value = _domain_optional_text(mapping.get(key))
    if value is None:
        raise ValueError(f"{context_label} payload missing required field `{key}`")
    return value


def _domain_optional_text(value: object | None) -> str | None:
    if value is None or not isinstance(value, str):
        return None
    normalized_value = value.strip()
    if not normalized_value:
        return None
    return normalized_value


def _domain_optional_number(value: object | None) -> int | float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
        try:
            return float(value)
        except ValueError:
            return None
    return None
