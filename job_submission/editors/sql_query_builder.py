"""Structured table/column/filter selection rendered to constrained query text.

Queries are never typed by hand. A `QuerySelection` names one table, the
columns to extract (in the order they were picked) and at most one filter
per column; `query_render` turns it into the text submitted for `sql`
inputs.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Any, Final

from job_submission.domain import ColumnSchema, TableSchema

FILTER_UNFILTERED: Final[str] = "unfiltered"
FILTER_EQUALS: Final[str] = "equals"
FILTER_GREATER_THAN: Final[str] = "greaterThan"
FILTER_LESS_THAN: Final[str] = "lessThan"
FILTER_BETWEEN: Final[str] = "between"
FILTER_IN: Final[str] = "in"

_ALL_FILTER_KINDS: Final[tuple[str, ...]] = (
    FILTER_UNFILTERED,
    FILTER_EQUALS,
    FILTER_GREATER_THAN,
    FILTER_LESS_THAN,
    FILTER_BETWEEN,
    FILTER_IN,
)
_NUMERIC_COLUMN_TYPES: Final[frozenset[str]] = frozenset(
    {"byte", "short", "int", "integer", "long", "float", "double", "decimal"}
)
_TEXT_COLUMN_FILTER_KINDS: Final[tuple[str, ...]] = (FILTER_UNFILTERED, FILTER_EQUALS, FILTER_IN)
_OTHER_COLUMN_FILTER_KINDS: Final[tuple[str, ...]] = (FILTER_UNFILTERED, FILTER_EQUALS)
_NUMERIC_LITERAL_PATTERN: Final[re.Pattern[str]] = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


@dataclass(frozen=True)
class ColumnFilter:
    """One where-clause condition on a single column.

    Attributes:
        kind: Filter kind (`equals`, `greaterThan`, `lessThan`, `between`, `in`, `unfiltered`).
        value: Comparison value for `equals`, `greaterThan` and `lessThan`.
        minimum: Exclusive lower bound for `between`.
        maximum: Exclusive upper bound for `between`.
        values: Candidate values for `in`.
    """

    kind: str
    value: str | None = None
    minimum: str | None = None
    maximum: str | None = None
    values: tuple[str, ...] = ()


@dataclass(frozen=True)
class QuerySelection:
    """Table, extracted columns and per-column filters for one query.

    Attributes:
        table_id: Selected table identifier.
        columns: Extracted column identifiers in pick order.
        filters: Filter per column identifier in the order they were set.
    """

    table_id: str
    columns: tuple[str, ...] = ()
    filters: dict[str, ColumnFilter] = field(default_factory=dict)


def query_find_table(tables: tuple[TableSchema, ...], table_id: str) -> TableSchema:
    """Return the declared table with the given identifier.

    Args:
        tables: Declared tables.
        table_id: Table identifier.

    Returns:
        TableSchema: Matching table.

    Raises:
        ValueError: Raised when the table is not declared.
    """

    for table in tables:
        if table.id == table_id:
            return table
    raise ValueError(f"{table_id}: is not one of the available tables")


def query_initial_selection(tables: tuple[TableSchema, ...]) -> QuerySelection:
    """Return the first table with no columns and no filters.

    Raises:
        ValueError: Raised when no tables are declared.
    """

    if not tables:
        raise ValueError("has no tables to query")
    return QuerySelection(table_id=tables[0].id)


def query_select_table(tables: tuple[TableSchema, ...], table_id: str) -> QuerySelection:
    query_find_table(tables, table_id)
    return QuerySelection(table_id=table_id)


def query_toggle_column(table: TableSchema, selection: QuerySelection, column_id: str) -> QuerySelection:
    """Add or remove one column from the extracted set.

    Args:
        table: Selected table.
        selection: Current selection.
        column_id: Column identifier.

    Returns:
        QuerySelection: Selection with the column toggled.

    Raises:
        ValueError: Raised when the column is not declared by the table.
    """

    _query_require_column(table, column_id)
    if column_id in selection.columns:
        return replace(selection, columns=tuple(column for column in selection.columns if column != column_id))
    return replace(selection, columns=selection.columns + (column_id,))


def query_select_all_columns(table: TableSchema, selection: QuerySelection) -> QuerySelection:
    return replace(selection, columns=tuple(column.id for column in table.columns))


def query_clear_columns(selection: QuerySelection) -> QuerySelection:
    return replace(selection, columns=())


def query_allowed_filter_kinds(column_type: str) -> tuple[str, ...]:
    """Return filter kinds permitted for a column datatype.

    Args:
        column_type: Column type text, optionally suffixed with `?`.

    Returns:
        tuple[str, ...]: Permitted filter kinds; empty for array columns.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    normalized_type = column_type.replace("?", "").strip()
    if "[" in normalized_type:
        return ()
    if normalized_type == "byte":
        return tuple(kind for kind in _ALL_FILTER_KINDS if kind != FILTER_GREATER_THAN)
    if normalized_type in _NUMERIC_COLUMN_TYPES:
        return _ALL_FILTER_KINDS
    if normalized_type in {"string", "char"} or "enum" in normalized_type:
        return _TEXT_COLUMN_FILTER_KINDS
    return _OTHER_COLUMN_FILTER_KINDS


def query_set_filter(
    table: TableSchema,
    selection: QuerySelection,
    column_id: str,
    column_filter: ColumnFilter,
) -> QuerySelection:
    """Set (or with `unfiltered`, remove) the filter of one column.

    Args:
        table: Selected table.
        selection: Current selection.
        column_id: Filtered column identifier.
        column_filter: New filter.

    Returns:
        QuerySelection: Selection with the filter applied.

    Raises:
        ValueError: Raised for unknown columns, disallowed kinds and malformed values.
    """

    column = _query_require_column(table, column_id)
    allowed_kinds = query_allowed_filter_kinds(column.type)
    if column_filter.kind not in allowed_kinds:
        raise ValueError(f"{column_id}: filter '{column_filter.kind}' is not allowed for {column.type} columns")
    if column_filter.kind == FILTER_UNFILTERED:
        return query_remove_filter(selection, column_id)

    query_render_filter(column, column_filter)
    filters = dict(selection.filters)
    filters[column_id] = column_filter
    return replace(selection, filters=filters)


def query_remove_filter(selection: QuerySelection, column_id: str) -> QuerySelection:
    if column_id not in selection.filters:
        return selection
    filters = {key: value for key, value in selection.filters.items() if key != column_id}
    return replace(selection, filters=filters)


def query_render_filter(column: ColumnSchema, column_filter: ColumnFilter) -> str | None:
    """Render one filter as a where-clause condition.

    Args:
        column: Filtered column.
        column_filter: Filter to render.

    Returns:
        str | None: Condition text, or None for `unfiltered`.

    Raises:
        ValueError: Raised when a required value is missing or malformed.
    """

    kind = column_filter.kind
    if kind == FILTER_UNFILTERED:
        return None
    if kind == FILTER_EQUALS:
        return f"{column.id} = {_query_literal(column, column_filter.value)}"
    if kind == FILTER_GREATER_THAN:
        return f"{column.id} > {_query_literal(column, column_filter.value)}"
    if kind == FILTER_LESS_THAN:
        return f"{column.id} < {_query_literal(column, column_filter.value)}"
    if kind == FILTER_BETWEEN:
        minimum = _query_literal(column, column_filter.minimum)
        maximum = _query_literal(column, column_filter.maximum)
        return f"{minimum} < {column.id} and {column.id} < {maximum}"
    if kind == FILTER_IN:
        if not column_filter.values:
            raise ValueError(f"{column.id}: 'in' filter needs at least one value")
        literals = ", ".join(_query_literal(column, value) for value in column_filter.values)
        return f"{column.id} IN ({literals})"
    raise ValueError(f"{column.id}: unknown filter kind '{kind}'")


def query_render(table: TableSchema, selection: QuerySelection) -> str:
    """Render the selection as query text.

    Args:
        table: Selected table.
        selection: Current selection.

    Returns:
        str: `select ...\\nfrom ...` with an optional where clause, terminated by `;`.

    Raises:
        ValueError: Raised when the selection references undeclared columns.
    """

    conditions = []
    for column_id, column_filter in selection.filters.items():
        condition = query_render_filter(_query_require_column(table, column_id), column_filter)
        if condition is not None:
            conditions.append(condition)

    where_clause = "\nwhere " + " and\n".join(conditions) if conditions else ""
    return f"select {', '.join(selection.columns)}\nfrom {table.id}{where_clause};"


def query_parse_selection(tables: tuple[TableSchema, ...], payload: Any) -> QuerySelection:
    """Build a validated selection from a structured edit payload.

    Args:
        tables: Declared tables.
        payload: `{"table": id, "columns": [...], "filters": {column_id: {...}}}`.

    Returns:
        QuerySelection: Validated selection.

    Raises:
        ValueError: Raised when the payload is malformed or references undeclared items.
    """

    if isinstance(payload, QuerySelection):
        payload = query_selection_to_payload(payload)
    if not isinstance(payload, dict):
        raise ValueError("query selection must be an object")

    table_id = payload.get("table")
    if not isinstance(table_id, str):
        raise ValueError("query selection must name a table")
    table = query_find_table(tables, table_id)
    selection = QuerySelection(table_id=table.id)

    raw_columns = payload.get("columns", [])
    if not isinstance(raw_columns, list) or not all(isinstance(column_id, str) for column_id in raw_columns):
        raise ValueError("query columns must be a list of column ids")
    for column_id in raw_columns:
        if column_id not in selection.columns:
            selection = query_toggle_column(table, selection, column_id)

    raw_filters = payload.get("filters", {})
    if not isinstance(raw_filters, dict):
        raise ValueError("query filters must be an object keyed by column id")
    for column_id, raw_filter in raw_filters.items():
        selection = query_set_filter(table, selection, column_id, _query_parse_filter(column_id, raw_filter))
    return selection


def query_selection_to_payload(selection: QuerySelection) -> dict[str, Any]:
    """Return the JSON-compatible form accepted by `query_parse_selection`."""

    filters: dict[str, Any] = {}
    for column_id, column_filter in selection.filters.items():
        filter_payload: dict[str, Any] = {"kind": column_filter.kind}
        if column_filter.value is not None:
            filter_payload["value"] = column_filter.value
        if column_filter.minimum is not None:
            filter_payload["min"] = column_filter.minimum
        if column_filter.maximum is not None:
            filter_payload["max"] = column_filter.maximum
        if column_filter.values:
            filter_payload["values"] = list(column_filter.values)
        filters[column_id] = filter_payload
    return {"table": selection.table_id, "columns": list(selection.columns), "filters": filters}


def _query_parse_filter(column_id: str, payload: Any) -> ColumnFilter:
    if not isinstance(payload, dict) or not isinstance(payload.get("kind"), str):
        raise ValueError(f"{column_id}: filter must be an object with a kind")

    raw_values = payload.get("values", [])
    if not isinstance(raw_values, list):
        raise ValueError(f"{column_id}: filter values must be a list")
    return ColumnFilter(
        kind=payload["kind"],
        value=_query_optional_text(payload.get("value")),
        minimum=_query_optional_text(payload.get("min")),
        maximum=_query_optional_text(payload.get("max")),
        values=tuple(str(value) for value in raw_values),
    )


def _query_optional_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("filter values must be text or numbers")
    return str(value)


def _query_require_column(table: TableSchema, column_id: str) -> ColumnSchema:
    column = table.table_find_column(column_id)
    if column is None:
        raise ValueError(f"{column_id}: is not a column of {table.id}")
    return column


def _query_literal(column: ColumnSchema, value: str | None) -> str:
    if value is None or value == "":
        raise ValueError(f"{column.id}: filter value is missing")
    if column.type.replace("?", "").strip() in _NUMERIC_COLUMN_TYPES:
        if not _NUMERIC_LITERAL_PATTERN.fullmatch(value):
            raise ValueError(f"{value}: is not a number")
        return value
    escaped_value = value.replace("'", "''")
    return f"'{escaped_value}'"
