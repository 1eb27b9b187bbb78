"""Typed contracts shared by every input editor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final, Protocol

from job_submission.domain import ExpectedInput, InputEditorUpdate


class _MissingSuggestion:
    """Marker type for "no value was suggested for this field"."""

    _instance: _MissingSuggestion | None = None

    def __new__(cls) -> _MissingSuggestion:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING_SUGGESTION"

    def __bool__(self) -> bool:
        return False


MISSING_SUGGESTION: Final[_MissingSuggestion] = _MissingSuggestion()


class InvalidEditError(ValueError):
    """Raised when an edit payload has a shape the target editor cannot accept."""


@dataclass(frozen=True)
class FieldEditorState:
    """Snapshot of one input editor after initialization or an edit.

    Attributes:
        expected_input_id: Identifier of the edited expected input.
        editor_kind: Type tag the editor was selected for.
        value: Editor-owned current value (raw text for numerics, selection for queries).
        update: Input editor update derived from the current value.
        coercion_warning: One-shot warning produced while coercing a suggested value.
        details: Editor-specific presentation data (summaries, descriptions).
    """

    expected_input_id: str
    editor_kind: str
    value: Any
    update: InputEditorUpdate
    coercion_warning: str | None = None
    details: dict[str, Any] = field(default_factory=dict, compare=False)


class InputEditorPort(Protocol):
    """Port definition for per-type input coercion and validation."""

    editor_kind: str

    def editor_initialize(self, expected_input: ExpectedInput, suggested_value: Any = MISSING_SUGGESTION) -> FieldEditorState:
        """Coerce a previously-held value into the field's current constraints.

        Args:
            expected_input: Field declaration from the current spec.
            suggested_value: Carried-over value, or `MISSING_SUGGESTION`.

        Returns:
            FieldEditorState: Initial editor state, with a warning when the value was discarded.

        Raises:
            RuntimeError: Implementations do not raise runtime errors.
        """

    def editor_apply_edit(self, expected_input: ExpectedInput, state: FieldEditorState, raw_edit: Any) -> FieldEditorState:
        """Apply one user edit to an existing editor state.

        Args:
            expected_input: Field declaration from the current spec.
            state: Current editor state.
            raw_edit: Raw edit payload.

        Returns:
            FieldEditorState: New editor state without a coercion warning.

        Raises:
            InvalidEditError: Raised when raw_edit has an unsupported shape.
        """
