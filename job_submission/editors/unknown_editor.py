"""Fallback editor for expected inputs whose type tag has no editor."""

from __future__ import annotations

from typing import Any

from job_submission.domain import ExpectedInput, input_update_errors

from .constants import SUPPORTED_TYPE_TAGS
from .interfaces import MISSING_SUGGESTION, FieldEditorState


class UnknownInputTypeEditor:
    """Editor that reports the unsupported type and ignores every edit."""

    editor_kind = "unknown"

    def editor_initialize(self, expected_input: ExpectedInput, suggested_value: Any = MISSING_SUGGESTION) -> FieldEditorState:
        return FieldEditorState(
            expected_input_id=expected_input.id,
            editor_kind=self.editor_kind,
            value=None,
            update=input_update_errors([f"{expected_input.id}: Has an unknown input type ({expected_input.type})"]),
            details={
                "description": (
                    f"{expected_input.id} has a type of '{expected_input.type}'. Although this datatype might be "
                    "supported by the job service, it is not supported by this client. Supported types are: "
                    f"{', '.join(SUPPORTED_TYPE_TAGS)}"
                )
            },
        )

    def editor_apply_edit(self, expected_input: ExpectedInput, state: FieldEditorState, raw_edit: Any) -> FieldEditorState:
        return state
