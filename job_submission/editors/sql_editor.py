"""Constrained-query editor for `sql` fields."""

from __future__ import annotations

from typing import Any

from job_submission.domain import ExpectedInput, input_update_errors, input_update_value

from .interfaces import MISSING_SUGGESTION, FieldEditorState
from .sql_query_builder import (
    QuerySelection,
    query_find_table,
    query_initial_selection,
    query_parse_selection,
    query_render,
    query_selection_to_payload,
)

SQL_RESET_WARNING = "This input has been reset because queries cannot be copied between requests."


class SqlInputEditor:
    """Editor whose value is a structured `QuerySelection`.

    Carried-over query text is never reused; the query is always rendered
    from the current selection.
    """

    editor_kind = "sql"

    def editor_initialize(self, expected_input: ExpectedInput, suggested_value: Any = MISSING_SUGGESTION) -> FieldEditorState:
        warning = None if suggested_value is MISSING_SUGGESTION else SQL_RESET_WARNING
        try:
            selection = query_initial_selection(expected_input.tables)
        except ValueError as error:
            return FieldEditorState(
                expected_input_id=expected_input.id,
                editor_kind=self.editor_kind,
                value=None,
                update=input_update_errors([str(error)]),
                coercion_warning=warning,
            )
        return self._editor_state(expected_input, selection, warning)

    def editor_apply_edit(self, expected_input: ExpectedInput, state: FieldEditorState, raw_edit: Any) -> FieldEditorState:
        """Replace the selection from a structured payload.

        Args:
            expected_input: Field declaration.
            state: Current editor state.
            raw_edit: `QuerySelection` or `{"table", "columns", "filters"}` payload.

        Returns:
            FieldEditorState: New state; Errors when the payload is raw text or invalid.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        if isinstance(raw_edit, str):
            return self._editor_error_state(
                expected_input,
                state,
                "queries are built from a table selection; raw query text is not accepted",
            )
        try:
            selection = query_parse_selection(expected_input.tables, raw_edit)
        except ValueError as error:
            return self._editor_error_state(expected_input, state, str(error))
        return self._editor_state(expected_input, selection, None)

    def _editor_state(self, expected_input: ExpectedInput, selection: QuerySelection, warning: str | None) -> FieldEditorState:
        table = query_find_table(expected_input.tables, selection.table_id)
        query_text = query_render(table, selection)
        return FieldEditorState(
            expected_input_id=expected_input.id,
            editor_kind=self.editor_kind,
            value=selection,
            update=input_update_value(query_text),
            coercion_warning=warning,
            details={
                "query": query_text,
                "selection": query_selection_to_payload(selection),
                "tables": [table.id for table in expected_input.tables],
            },
        )

    def _editor_error_state(self, expected_input: ExpectedInput, state: FieldEditorState, message: str) -> FieldEditorState:
        return FieldEditorState(
            expected_input_id=expected_input.id,
            editor_kind=self.editor_kind,
            value=state.value,
            update=input_update_errors([message]),
            details=dict(state.details),
        )
