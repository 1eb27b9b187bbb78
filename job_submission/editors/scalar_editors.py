"""Input editors for single-valued text, numeric and enumerated-option fields.

Numeric editors keep the raw text the user typed as their value and derive
the input update from it. A parsed number that does not render back to the
same text (leading zeros, explicit plus signs, precision the binary value
cannot hold) is emitted as the raw text so nothing the user typed is lost.
"""

from __future__ import annotations

import re
from typing import Any, Final

from job_submission.domain import (
    ExpectedInput,
    InputEditorUpdate,
    input_update_errors,
    input_update_missing,
    input_update_value,
)

from .constants import F32_MAX, F32_MIN, F64_MAX, F64_MIN, I32_MAX, I32_MIN, I64_MAX, I64_MIN
from .interfaces import MISSING_SUGGESTION, FieldEditorState, InvalidEditError
from .rendering import editor_describe_value_type, editor_render_number

_INTEGER_PATTERN: Final[re.Pattern[str]] = re.compile(r"[+-]?[0-9]+")
_DECIMAL_PATTERN: Final[re.Pattern[str]] = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


class StringInputEditor:
    """Free-text editor; its update is always the current text."""

    editor_kind = "string"

    def editor_initialize(self, expected_input: ExpectedInput, suggested_value: Any = MISSING_SUGGESTION) -> FieldEditorState:
        if suggested_value is MISSING_SUGGESTION:
            default_value = expected_input.default if isinstance(expected_input.default, str) else ""
            return self._editor_state(expected_input, default_value, None)
        if not isinstance(suggested_value, str):
            return self._editor_state(
                expected_input,
                "",
                f"The supplied value was not a string (was {editor_describe_value_type(suggested_value)}). "
                "This field was reset",
            )
        return self._editor_state(expected_input, suggested_value, None)

    def editor_apply_edit(self, expected_input: ExpectedInput, state: FieldEditorState, raw_edit: Any) -> FieldEditorState:
        if not isinstance(raw_edit, str):
            raise InvalidEditError(f"{expected_input.id}: string inputs accept text edits only")
        return self._editor_state(expected_input, raw_edit, None)

    def _editor_state(self, expected_input: ExpectedInput, value: str, warning: str | None) -> FieldEditorState:
        return FieldEditorState(
            expected_input_id=expected_input.id,
            editor_kind=self.editor_kind,
            value=value,
            update=input_update_value(value),
            coercion_warning=warning,
        )


class _NumericInputEditor:
    """Shared raw-text validation for integer and decimal editors."""

    editor_kind: str = ""
    _native_min: int | float = 0
    _native_max: int | float = 0
    _min_article: str = "a"

    def editor_initialize(self, expected_input: ExpectedInput, suggested_value: Any = MISSING_SUGGESTION) -> FieldEditorState:
        """Coerce a suggested value to raw text and validate it.

        Args:
            expected_input: Field declaration.
            suggested_value: Carried-over value, or `MISSING_SUGGESTION`.

        Returns:
            FieldEditorState: Editor state holding raw text.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        if suggested_value is MISSING_SUGGESTION or suggested_value is None:
            return self._editor_state(expected_input, self._editor_default_text(expected_input), None)

        if isinstance(suggested_value, str):
            return self._editor_state(expected_input, suggested_value, None)
        if isinstance(suggested_value, (int, float)) and not isinstance(suggested_value, bool):
            return self._editor_state(expected_input, editor_render_number(suggested_value), None)
        return self._editor_state(
            expected_input,
            "",
            f"The supplied value was not a number (was {editor_describe_value_type(suggested_value)}). "
            "This field was reset",
        )

    def editor_apply_edit(self, expected_input: ExpectedInput, state: FieldEditorState, raw_edit: Any) -> FieldEditorState:
        if isinstance(raw_edit, str):
            return self._editor_state(expected_input, raw_edit, None)
        if isinstance(raw_edit, (int, float)) and not isinstance(raw_edit, bool):
            return self._editor_state(expected_input, editor_render_number(raw_edit), None)
        raise InvalidEditError(f"{expected_input.id}: {self.editor_kind} inputs accept text or number edits only")

    def editor_effective_bounds(self, expected_input: ExpectedInput) -> tuple[int | float, int | float]:
        """Return declared bounds narrowed by the type's native range.

        Args:
            expected_input: Field declaration.

        Returns:
            tuple[int | float, int | float]: Inclusive `(minimum, maximum)`.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        minimum = self._native_min if expected_input.min_value is None else max(expected_input.min_value, self._native_min)
        maximum = self._native_max if expected_input.max_value is None else min(expected_input.max_value, self._native_max)
        return minimum, maximum

    def editor_validate_text(self, expected_input: ExpectedInput, raw_value: str) -> InputEditorUpdate:
        """Derive the input update for one raw text value.

        Args:
            expected_input: Field declaration.
            raw_value: Raw text.

        Returns:
            InputEditorUpdate: Missing for empty text, Errors for invalid text, else Value.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        if not raw_value:
            return input_update_missing()

        parsed_value = self._editor_parse(raw_value)
        if parsed_value is None:
            return input_update_errors([f"{raw_value}: is not a number"])

        minimum, maximum = self.editor_effective_bounds(expected_input)
        if parsed_value < minimum:
            return input_update_errors(
                [
                    f"{raw_value}: too small: minimum value allowed for {self._min_article} {self.editor_kind} "
                    f"input is {editor_render_number(minimum)}"
                ]
            )
        if parsed_value > maximum:
            return input_update_errors(
                [
                    f"{raw_value}: too big: maximum value allowed for an {self.editor_kind} "
                    f"input is {editor_render_number(maximum)}"
                ]
            )

        if editor_render_number(parsed_value) != raw_value:
            return input_update_value(raw_value)
        return input_update_value(parsed_value)

    def _editor_parse(self, raw_value: str) -> int | float | None:
        raise NotImplementedError

    def _editor_default_text(self, expected_input: ExpectedInput) -> str:
        default_value = expected_input.default
        if isinstance(default_value, str):
            return default_value
        if isinstance(default_value, (int, float)) and not isinstance(default_value, bool):
            return editor_render_number(default_value)
        return ""

    def _editor_state(self, expected_input: ExpectedInput, raw_value: str, warning: str | None) -> FieldEditorState:
        return FieldEditorState(
            expected_input_id=expected_input.id,
            editor_kind=self.editor_kind,
            value=raw_value,
            update=self.editor_validate_text(expected_input, raw_value),
            coercion_warning=warning,
        )


class IntegerInputEditor(_NumericInputEditor):
    """Whole-number editor for `int` and `long` fields."""

    _min_article = "an"

    def __init__(self, type_tag: str):
        if type_tag == "int":
            self._native_min, self._native_max = I32_MIN, I32_MAX
        elif type_tag == "long":
            self._native_min, self._native_max = I64_MIN, I64_MAX
        else:
            raise ValueError(f"unsupported integer type tag: {type_tag}")
        self.editor_kind = type_tag

    def _editor_parse(self, raw_value: str) -> int | None:
        if not _INTEGER_PATTERN.fullmatch(raw_value):
            return None
        return int(raw_value)


class DecimalInputEditor(_NumericInputEditor):
    """Floating-point editor for `float` and `double` fields."""

    _min_article = "a"

    def __init__(self, type_tag: str):
        if type_tag == "float":
            self._native_min, self._native_max = F32_MIN, F32_MAX
        elif type_tag == "double":
            self._native_min, self._native_max = F64_MIN, F64_MAX
        else:
            raise ValueError(f"unsupported decimal type tag: {type_tag}")
        self.editor_kind = type_tag

    def _editor_parse(self, raw_value: str) -> float | None:
        if not _DECIMAL_PATTERN.fullmatch(raw_value):
            return None
        return float(raw_value)


class SelectInputEditor:
    """Enumerated-option editor; its value is the selected option id."""

    editor_kind = "select"

    def editor_initialize(self, expected_input: ExpectedInput, suggested_value: Any = MISSING_SUGGESTION) -> FieldEditorState:
        option_ids = [option.id for option in expected_input.options]
        if not option_ids:
            return self._editor_state(expected_input, None, input_update_errors(["has no options to select from"]), None)

        if suggested_value is MISSING_SUGGESTION:
            default_value = expected_input.default
            selected_id = default_value if default_value in option_ids else option_ids[0]
            return self._editor_state(expected_input, selected_id, input_update_value(selected_id), None)

        if suggested_value not in option_ids:
            return self._editor_state(
                expected_input,
                option_ids[0],
                input_update_value(option_ids[0]),
                f"This field was reset because the existing value, '{suggested_value}', is not one of the "
                f"available options. This is probably because '{suggested_value}' was removed from the job spec.",
            )

        return self._editor_state(expected_input, suggested_value, input_update_value(suggested_value), None)

    def editor_apply_edit(self, expected_input: ExpectedInput, state: FieldEditorState, raw_edit: Any) -> FieldEditorState:
        if not isinstance(raw_edit, str):
            raise InvalidEditError(f"{expected_input.id}: select inputs accept an option id only")

        option_ids = [option.id for option in expected_input.options]
        if raw_edit not in option_ids:
            return self._editor_state(
                expected_input,
                raw_edit,
                input_update_errors([f"{raw_edit} is not one of the available options"]),
                None,
            )
        return self._editor_state(expected_input, raw_edit, input_update_value(raw_edit), None)

    def _editor_state(
        self,
        expected_input: ExpectedInput,
        selected_id: str | None,
        update: InputEditorUpdate,
        warning: str | None,
    ) -> FieldEditorState:
        selected_option = next((option for option in expected_input.options if option.id == selected_id), None)
        return FieldEditorState(
            expected_input_id=expected_input.id,
            editor_kind=self.editor_kind,
            value=selected_id,
            update=update,
            coercion_warning=warning,
            details={"description": selected_option.description if selected_option is not None else None},
        )
