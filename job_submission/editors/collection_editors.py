"""Input editors for list-valued fields and uploaded files."""

from __future__ import annotations

import base64
import binascii
import re
from typing import Any, Final

from job_submission.domain import (
    ExpectedInput,
    input_update_missing,
    input_update_value,
)

from .constants import STR_ARRAY_INTERACTIVE_BREAKPOINT, STR_ARRAY_SUMMARY_PREVIEW_SIZE
from .interfaces import MISSING_SUGGESTION, FieldEditorState, InvalidEditError
from .rendering import editor_describe_value_type

_VALUE_SEPARATOR_PATTERN: Final[re.Pattern[str]] = re.compile(r"[\n,]")


def editor_split_text_block(text: str) -> list[str]:
    """Split a newline- or comma-separated text block into values.

    Args:
        text: Text block.

    Returns:
        list[str]: Values in order; empty text yields no values.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if not text:
        return []
    return _VALUE_SEPARATOR_PATTERN.split(text)


def editor_render_values_download(values: list[str]) -> str:
    """Render values as newline-terminated text for download.

    Args:
        values: String values.

    Returns:
        str: One value per line, each followed by a newline.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return "".join(f"{value}\n" for value in values)


def editor_summarize_values(values: list[str]) -> dict[str, Any]:
    """Return the read-only summary shown for large value lists.

    Args:
        values: String values.

    Returns:
        dict[str, Any]: `count` plus the first and last preview slices.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "count": len(values),
        "first": values[:STR_ARRAY_SUMMARY_PREVIEW_SIZE],
        "last": values[-STR_ARRAY_SUMMARY_PREVIEW_SIZE:] if values else [],
    }


class StringArrayInputEditor:
    """Editor for `string[]` fields.

    Lists shorter than `STR_ARRAY_INTERACTIVE_BREAKPOINT` are edited as a text
    block; longer lists are shown as a summary and only change through import,
    replacement or clearing.
    """

    editor_kind = "string[]"

    def editor_initialize(self, expected_input: ExpectedInput, suggested_value: Any = MISSING_SUGGESTION) -> FieldEditorState:
        if suggested_value is MISSING_SUGGESTION:
            default_value = expected_input.default
            values = list(default_value) if _is_string_list(default_value) else []
            return self._editor_state(expected_input, values, None)
        if not _is_string_list(suggested_value):
            return self._editor_state(
                expected_input,
                [],
                "This input has been reset because the existing value was not an array of string "
                f"(was {editor_describe_value_type(suggested_value)}).",
            )
        return self._editor_state(expected_input, list(suggested_value), None)

    def editor_apply_edit(self, expected_input: ExpectedInput, state: FieldEditorState, raw_edit: Any) -> FieldEditorState:
        """Replace the values from a text block or a list of strings.

        Args:
            expected_input: Field declaration.
            state: Current editor state.
            raw_edit: Text block (interactive mode only) or list of strings.

        Returns:
            FieldEditorState: New editor state.

        Raises:
            InvalidEditError: Raised for text edits on a summarized list or unsupported payloads.
        """

        if isinstance(raw_edit, str):
            if not self.editor_is_interactive(state):
                raise InvalidEditError(
                    f"{expected_input.id}: list has {len(state.value)} values and is read-only; import or clear instead"
                )
            return self._editor_state(expected_input, editor_split_text_block(raw_edit), None)
        if _is_string_list(raw_edit):
            return self._editor_state(expected_input, list(raw_edit), None)
        raise InvalidEditError(f"{expected_input.id}: string[] inputs accept a text block or a list of strings")

    def editor_import_values(self, expected_input: ExpectedInput, state: FieldEditorState, text: str) -> FieldEditorState:
        """Append values parsed from an imported text file.

        Args:
            expected_input: Field declaration.
            state: Current editor state.
            text: Imported file contents.

        Returns:
            FieldEditorState: State with the imported values appended.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        imported_values = editor_split_text_block(text.strip())
        return self._editor_state(expected_input, list(state.value) + imported_values, None)

    def editor_clear_values(self, expected_input: ExpectedInput, state: FieldEditorState) -> FieldEditorState:
        if not state.value:
            return state
        return self._editor_state(expected_input, [], None)

    def editor_download_text(self, state: FieldEditorState) -> str:
        return editor_render_values_download(state.value)

    def editor_is_interactive(self, state: FieldEditorState) -> bool:
        return len(state.value) < STR_ARRAY_INTERACTIVE_BREAKPOINT

    def _editor_state(self, expected_input: ExpectedInput, values: list[str], warning: str | None) -> FieldEditorState:
        interactive = len(values) < STR_ARRAY_INTERACTIVE_BREAKPOINT
        details: dict[str, Any] = {"interactive": interactive}
        if not interactive:
            details["summary"] = editor_summarize_values(values)
        return FieldEditorState(
            expected_input_id=expected_input.id,
            editor_kind=self.editor_kind,
            value=values,
            update=input_update_value(values),
            coercion_warning=warning,
            details=details,
        )


class FileInputEditor:
    """Editor for `file` fields holding `{filename, data}` with base64 data."""

    editor_kind = "file"

    def editor_initialize(self, expected_input: ExpectedInput, suggested_value: Any = MISSING_SUGGESTION) -> FieldEditorState:
        if suggested_value is MISSING_SUGGESTION or suggested_value is None:
            return self._editor_state(expected_input, None, None)
        if not editor_is_file_value(suggested_value):
            return self._editor_state(
                expected_input,
                None,
                "This input has been reset because the existing value was not a file "
                f"(was {editor_describe_value_type(suggested_value)}).",
            )
        return self._editor_state(expected_input, dict(suggested_value), None)

    def editor_apply_edit(self, expected_input: ExpectedInput, state: FieldEditorState, raw_edit: Any) -> FieldEditorState:
        if raw_edit is None:
            return self._editor_state(expected_input, None, None)
        return self._editor_state(expected_input, editor_coerce_file_edit(expected_input.id, raw_edit), None)

    def _editor_state(self, expected_input: ExpectedInput, file_value: dict[str, str] | None, warning: str | None) -> FieldEditorState:
        return FieldEditorState(
            expected_input_id=expected_input.id,
            editor_kind=self.editor_kind,
            value=file_value,
            update=input_update_missing() if file_value is None else input_update_value(file_value),
            coercion_warning=warning,
        )


class FileArrayInputEditor:
    """Editor for `file[]` fields holding a list of file values."""

    editor_kind = "file[]"

    def editor_initialize(self, expected_input: ExpectedInput, suggested_value: Any = MISSING_SUGGESTION) -> FieldEditorState:
        if suggested_value is MISSING_SUGGESTION or suggested_value is None:
            return self._editor_state(expected_input, [], None)
        if not isinstance(suggested_value, list) or not all(editor_is_file_value(item) for item in suggested_value):
            return self._editor_state(
                expected_input,
                [],
                "This input has been reset because the existing value was not an array of files "
                f"(was {editor_describe_value_type(suggested_value)}).",
            )
        return self._editor_state(expected_input, [dict(item) for item in suggested_value], None)

    def editor_apply_edit(self, expected_input: ExpectedInput, state: FieldEditorState, raw_edit: Any) -> FieldEditorState:
        if raw_edit is None:
            return self._editor_state(expected_input, [], None)
        if not isinstance(raw_edit, (list, tuple)):
            raise InvalidEditError(f"{expected_input.id}: file[] inputs accept a list of files")
        file_values = [editor_coerce_file_edit(expected_input.id, item) for item in raw_edit]
        return self._editor_state(expected_input, file_values, None)

    def _editor_state(self, expected_input: ExpectedInput, file_values: list[dict[str, str]], warning: str | None) -> FieldEditorState:
        return FieldEditorState(
            expected_input_id=expected_input.id,
            editor_kind=self.editor_kind,
            value=file_values,
            update=input_update_value(file_values) if file_values else input_update_missing(),
            coercion_warning=warning,
            details={"filenames": [file_value["filename"] for file_value in file_values]},
        )


def editor_is_file_value(value: Any) -> bool:
    """Return whether value is a well-formed `{filename, data}` file value.

    Args:
        value: Candidate value.

    Returns:
        bool: True for a mapping with a non-blank filename and valid base64 data.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if not isinstance(value, dict):
        return False
    filename = value.get("filename")
    data = value.get("data")
    if not isinstance(filename, str) or not filename.strip() or not isinstance(data, str):
        return False
    try:
        base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        return False
    return True


def editor_encode_file(filename: str, content: bytes) -> dict[str, str]:
    """Build a file value from raw bytes.

    Args:
        filename: File name shown to the backend.
        content: Raw file contents.

    Returns:
        dict[str, str]: `{filename, data}` with base64 data.

    Raises:
        ValueError: Raised when filename is blank.
    """

    normalized_filename = filename.strip()
    if not normalized_filename:
        raise ValueError("filename must not be blank")
    return {"filename": normalized_filename, "data": base64.b64encode(content).decode("ascii")}


def editor_coerce_file_edit(expected_input_id: str, raw_edit: Any) -> dict[str, str]:
    """Convert one file edit payload into a file value.

    Args:
        expected_input_id: Edited field identifier, used in error messages.
        raw_edit: `{filename, data}` mapping or `(filename, bytes)` pair.

    Returns:
        dict[str, str]: Well-formed file value.

    Raises:
        InvalidEditError: Raised when raw_edit is not a supported file payload.
    """

    if isinstance(raw_edit, tuple) and len(raw_edit) == 2 and isinstance(raw_edit[0], str) and isinstance(raw_edit[1], bytes):
        try:
            return editor_encode_file(raw_edit[0], raw_edit[1])
        except ValueError as error:
            raise InvalidEditError(f"{expected_input_id}: {error}") from error
    if editor_is_file_value(raw_edit):
        return {"filename": raw_edit["filename"], "data": raw_edit["data"]}
    raise InvalidEditError(f"{expected_input_id}: expected a file with a filename and base64 data")


def _is_string_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value)
