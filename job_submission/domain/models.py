"""Typed domain models shared across runtime layers.

This module provides immutable data contracts for job specifications, job
requests and backend job records exchanged between the adapter, editor and
workflow layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final

DEFAULT_JOB_NAME: Final[str] = "default"


@dataclass(frozen=True)
class SelectOption:
    """One choice exposed by an enumerated-option expected input.

    Attributes:
        id: Option identifier submitted as the input value.
        name: Display name.
        description: Optional human-readable description.
    """

    id: str
    name: str
    description: str | None = None


@dataclass(frozen=True)
class ColumnSchema:
    """Column exposed by a constrained-query table.

    Attributes:
        id: Column identifier used in generated queries.
        name: Display name.
        description: Human-readable description.
        type: Column datatype label (e.g. `int`, `string`, `enum`, `string[]`).
    """

    id: str
    name: str
    description: str
    type: str


@dataclass(frozen=True)
class TableSchema:
    """Table exposed by a constrained-query expected input.

    Attributes:
        id: Table identifier used in generated queries.
        name: Display name.
        description: Human-readable description.
        columns: Ordered columns exposed by the table.
    """

    id: str
    name: str
    description: str
    columns: tuple[ColumnSchema, ...]

    def table_find_column(self, column_id: str) -> ColumnSchema | None:
        """Return the column with the given identifier, if declared.

        Args:
            column_id: Column identifier.

        Returns:
            ColumnSchema | None: Matching column or None.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        for column in self.columns:
            if column.id == column_id:
                return column
        return None


@dataclass(frozen=True)
class ExpectedInput:
    """One named, typed field declared by a job specification.

    Attributes:
        id: Identifier unique within the owning spec.
        type: Declared type tag (`string`, `int`, `select`, ...).
        name: Optional display name.
        description: Optional human-readable description.
        default: Declared default value, None when absent.
        min_value: Optional declared numeric lower bound.
        max_value: Optional declared numeric upper bound.
        options: Options for enumerated-option inputs.
        tables: Tables for constrained-query inputs.
        raw_payload: Original wire payload for fields not modelled above.
    """

    id: str
    type: str
    name: str | None = None
    description: str | None = None
    default: Any = None
    min_value: int | float | None = None
    max_value: int | float | None = None
    options: tuple[SelectOption, ...] = ()
    tables: tuple[TableSchema, ...] = ()
    raw_payload: dict[str, Any] = field(default_factory=dict, compare=False)

    def expected_input_display_name(self) -> str:
        """Return display label, falling back to the identifier.

        Returns:
            str: Name when declared, otherwise id.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return self.name or self.id

    def expected_input_has_default(self) -> bool:
        """Return whether a non-empty default value is declared.

        Returns:
            bool: False for None, empty strings and empty containers.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        if self.default is None:
            return False
        if isinstance(self.default, (str, list, tuple, dict)):
            return len(self.default) > 0
        return True


@dataclass(frozen=True)
class JobSpecSummary:
    """Summary of a job spec returned by spec listing endpoints.

    Attributes:
        id: Spec identifier.
        name: Display name.
        description: Human-readable description.
    """

    id: str
    name: str
    description: str = ""


@dataclass(frozen=True)
class JobSpec:
    """Full job specification including its expected inputs.

    Attributes:
        id: Spec identifier.
        name: Display name.
        description: Human-readable description.
        expected_inputs: Ordered expected inputs.
    """

    id: str
    name: str
    description: str
    expected_inputs: tuple[ExpectedInput, ...]

    def spec_find_expected_input(self, expected_input_id: str) -> ExpectedInput | None:
        """Return the expected input with the given identifier, if declared.

        Args:
            expected_input_id: Expected input identifier.

        Returns:
            ExpectedInput | None: Matching expected input or None.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        for expected_input in self.expected_inputs:
            if expected_input.id == expected_input_id:
                return expected_input
        return None


@dataclass(frozen=True)
class JobRequest:
    """Job request draft or submittable request.

    Attributes:
        spec: Spec identifier, None before a spec is chosen.
        name: Human-readable job name.
        inputs: Mapping from expected input id to raw value.
    """

    spec: str | None
    name: str = DEFAULT_JOB_NAME
    inputs: dict[str, Any] = field(default_factory=dict)

    def request_to_payload(self) -> dict[str, Any]:
        """Return the JSON payload accepted by the backend submit endpoint.

        Returns:
            dict[str, Any]: `{spec, name, inputs}` payload.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return {"spec": self.spec, "name": self.name, "inputs": dict(self.inputs)}


@dataclass(frozen=True)
class JobTimestamp:
    """One status transition recorded for a job.

    Attributes:
        status: Job status label.
        time: Timestamp text as reported by the backend.
        message: Optional status message.
    """

    status: str
    time: str
    message: str | None = None


@dataclass(frozen=True)
class JobDetails:
    """Details of an existing job on the backend.

    Attributes:
        id: Job identifier.
        name: Job name given at submission.
        owner: Submitting user identifier.
        timestamps: Ordered status timestamps.
        links: REST link map keyed by relation name.
    """

    id: str
    name: str
    owner: str = ""
    timestamps: tuple[JobTimestamp, ...] = ()
    links: dict[str, str] = field(default_factory=dict, compare=False)

    def job_latest_status(self) -> str | None:
        """Return the most recent status label, if any.

        Returns:
            str | None: Last timestamp status or None.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        if not self.timestamps:
            return None
        return self.timestamps[-1].status


@dataclass(frozen=True)
class JobCreatedResponse:
    """Response to a successful job submission.

    Attributes:
        id: Identifier of the created job.
        links: REST link map keyed by relation name.
    """

    id: str
    links: dict[str, str] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class JobOutput:
    """Metadata of one output file produced by a job.

    Attributes:
        id: Output identifier.
        size: Output size in bytes.
        mime_type: Optional MIME type.
        name: Optional display name.
        description: Optional description.
        href: Relative REST path to the output data.
    """

    id: str
    size: int
    mime_type: str | None = None
    name: str | None = None
    description: str | None = None
    href: str | None = None
