"""Regression tests for per-type input editor coercion and validation."""

from __future__ import annotations

import pytest

from job_submission.domain import (
    ExpectedInput,
    SelectOption,
    input_update_errors,
    input_update_missing,
    input_update_value,
    input_update_visit,
)
from job_submission.editors import (
    MISSING_SUGGESTION,
    STR_ARRAY_INTERACTIVE_BREAKPOINT,
    DecimalInputEditor,
    FileArrayInputEditor,
    FileInputEditor,
    IntegerInputEditor,
    InvalidEditError,
    SelectInputEditor,
    StringArrayInputEditor,
    StringInputEditor,
    UnknownInputTypeEditor,
    editor_describe_value_type,
    editor_encode_file,
    editor_for_expected_input,
    editor_is_file_value,
    editor_render_number,
    editor_split_text_block,
)


def test_editors_string_uses_default_and_resets_non_text_suggestions() -> None:
    """Initialize string fields from defaults and reset non-string carried values.

    Returns:
        None: Assertions validate string coercion.

    Raises:
        AssertionError: Raised when coercion is incorrect.
    """

    editor = StringInputEditor()
    expected_input = ExpectedInput(id="title", type="string", default="untitled")

    initial_state = editor.editor_initialize(expected_input)
    reset_state = editor.editor_initialize(expected_input, 5)

    assert initial_state.update == input_update_value("untitled")
    assert initial_state.coercion_warning is None
    assert reset_state.value == ""
    assert reset_state.update == input_update_value("")
    assert reset_state.coercion_warning == "The supplied value was not a string (was number). This field was reset"


def test_editors_string_rejects_non_text_edits() -> None:
    editor = StringInputEditor()
    expected_input = ExpectedInput(id="title", type="string")
    state = editor.editor_initialize(expected_input)

    with pytest.raises(InvalidEditError, match="title"):
        editor.editor_apply_edit(expected_input, state, ["a"])


@pytest.mark.parametrize(
    ("raw_text", "expected_update"),
    [
        ("", input_update_missing()),
        ("42", input_update_value(42)),
        ("007", input_update_value("007")),
        ("+5", input_update_value("+5")),
        ("4.5", input_update_errors(["4.5: is not a number"])),
        ("abc", input_update_errors(["abc: is not a number"])),
        ("50\n", input_update_errors(["50\n: is not a number"])),
        (" 50", input_update_errors([" 50: is not a number"])),
        ("\u0663\u0663", input_update_errors(["\u0663\u0663: is not a number"])),
        ("3", input_update_errors(["3: too small: minimum value allowed for an int input is 5"])),
        ("101", input_update_errors(["101: too big: maximum value allowed for an int input is 100"])),
    ],
)
def test_editors_integer_validates_raw_text(raw_text: str, expected_update: object) -> None:
    """Validate integer text against parseability and declared bounds.

    Args:
        raw_text: Edited text.
        expected_update: Expected input update.

    Returns:
        None: Assertions validate integer validation.

    Raises:
        AssertionError: Raised when validation is incorrect.
    """

    editor = IntegerInputEditor("int")
    expected_input = ExpectedInput(id="count", type="int", min_value=5, max_value=100)
    state = editor.editor_initialize(expected_input)

    edited_state = editor.editor_apply_edit(expected_input, state, raw_text)

    assert edited_state.value == raw_text
    assert edited_state.update == expected_update


def test_editors_integer_narrows_bounds_to_native_range() -> None:
    """Clamp declared bounds to the 32-bit range for `int` fields.

    Returns:
        None: Assertions validate native range enforcement.

    Raises:
        AssertionError: Raised when native bounds are not applied.
    """

    int_editor = IntegerInputEditor("int")
    long_editor = IntegerInputEditor("long")
    expected_input = ExpectedInput(id="count", type="int", max_value=10**12)

    assert int_editor.editor_effective_bounds(expected_input) == (-2147483647, 2147483647)
    assert int_editor.editor_validate_text(expected_input, "2147483648") == input_update_errors(
        ["2147483648: too big: maximum value allowed for an int input is 2147483647"]
    )
    assert long_editor.editor_validate_text(expected_input, "2147483648") == input_update_value(2147483648)


def test_editors_numeric_coerces_suggested_values() -> None:
    editor = IntegerInputEditor("long")
    expected_input = ExpectedInput(id="count", type="long", default=7)

    assert editor.editor_initialize(expected_input).value == "7"
    assert editor.editor_initialize(expected_input, 12).update == input_update_value(12)
    assert editor.editor_initialize(expected_input, "12").update == input_update_value(12)
    reset_state = editor.editor_initialize(expected_input, ["12"])
    assert reset_state.value == ""
    assert reset_state.update == input_update_missing()
    assert reset_state.coercion_warning == "The supplied value was not a number (was array). This field was reset"


@pytest.mark.parametrize(
    ("raw_text", "expected_update"),
    [
        ("1.5", input_update_value(1.5)),
        ("0.1", input_update_value(0.1)),
        ("1.0", input_update_value("1.0")),
        ("0.10000000000000000001", input_update_value("0.10000000000000000001")),
        ("-1", input_update_errors(["-1: too small: minimum value allowed for a float input is 0"])),
        ("1e39", input_update_errors(["1e39: too big: maximum value allowed for an float input is 3.402823e+38"])),
        ("1,5", input_update_errors(["1,5: is not a number"])),
        ("1.5\n", input_update_errors(["1.5\n: is not a number"])),
        ("\u0661.5", input_update_errors(["\u0661.5: is not a number"])),
    ],
)
def test_editors_decimal_preserves_text_that_does_not_round_trip(raw_text: str, expected_update: object) -> None:
    """Emit parsed floats only when they render back to the typed text.

    Args:
        raw_text: Edited text.
        expected_update: Expected input update.

    Returns:
        None: Assertions validate decimal validation.

    Raises:
        AssertionError: Raised when validation is incorrect.
    """

    editor = DecimalInputEditor("float")
    expected_input = ExpectedInput(id="ratio", type="float", min_value=0)
    state = editor.editor_initialize(expected_input)

    assert editor.editor_apply_edit(expected_input, state, raw_text).update == expected_update


def test_editors_select_defaults_and_resets_to_available_options() -> None:
    """Initialize select fields from defaults and reset unknown carried options.

    Returns:
        None: Assertions validate select coercion.

    Raises:
        AssertionError: Raised when coercion is incorrect.
    """

    editor = SelectInputEditor()
    expected_input = ExpectedInput(
        id="mode",
        type="select",
        default="slow",
        options=(SelectOption(id="fast", name="Fast", description="quick"), SelectOption(id="slow", name="Slow")),
    )

    assert editor.editor_initialize(expected_input).update == input_update_value("slow")

    reset_state = editor.editor_initialize(expected_input, "medium")
    assert reset_state.value == "fast"
    assert reset_state.details["description"] == "quick"
    assert reset_state.coercion_warning == (
        "This field was reset because the existing value, 'medium', is not one of the available options. "
        "This is probably because 'medium' was removed from the job spec."
    )

    edited_state = editor.editor_apply_edit(expected_input, reset_state, "turbo")
    assert edited_state.update == input_update_errors(["turbo is not one of the available options"])


def test_editors_select_without_options_reports_error() -> None:
    editor = SelectInputEditor()
    state = editor.editor_initialize(ExpectedInput(id="mode", type="select"))

    assert state.update == input_update_errors(["has no options to select from"])


def test_editors_string_array_switches_to_summary_at_breakpoint() -> None:
    """Summarize large lists and reject text edits once they are read-only.

    Returns:
        None: Assertions validate large-list handling.

    Raises:
        AssertionError: Raised when the breakpoint is not respected.
    """

    editor = StringArrayInputEditor()
    expected_input = ExpectedInput(id="samples", type="string[]")
    values = [str(index) for index in range(STR_ARRAY_INTERACTIVE_BREAKPOINT)]

    state = editor.editor_initialize(expected_input, values)

    assert state.details["interactive"] is False
    assert state.details["summary"] == {
        "count": STR_ARRAY_INTERACTIVE_BREAKPOINT,
        "first": ["0", "1", "2", "3", "4"],
        "last": ["495", "496", "497", "498", "499"],
    }
    with pytest.raises(InvalidEditError, match="read-only"):
        editor.editor_apply_edit(expected_input, state, "a,b")

    cleared_state = editor.editor_clear_values(expected_input, state)
    assert cleared_state.value == []
    assert cleared_state.details == {"interactive": True}


def test_editors_string_array_imports_and_downloads_values() -> None:
    editor = StringArrayInputEditor()
    expected_input = ExpectedInput(id="samples", type="string[]", default=["seed"])
    state = editor.editor_initialize(expected_input)

    imported_state = editor.editor_import_values(expected_input, state, "\nx\ny,z\n")

    assert imported_state.update == input_update_value(["seed", "x", "y", "z"])
    assert editor.editor_download_text(imported_state) == "seed\nx\ny\nz\n"
    assert editor.editor_apply_edit(expected_input, imported_state, "").value == []


def test_editors_string_array_resets_non_list_suggestions() -> None:
    editor = StringArrayInputEditor()
    state = editor.editor_initialize(ExpectedInput(id="samples", type="string[]"), {"a": 1})

    assert state.value == []
    assert state.coercion_warning == (
        "This input has been reset because the existing value was not an array of string (was object)."
    )


def test_editors_split_text_block_splits_on_newlines_and_commas() -> None:
    assert editor_split_text_block("") == []
    assert editor_split_text_block("a\nb,c") == ["a", "b", "c"]
    assert editor_split_text_block("a,,b") == ["a", "", "b"]


def test_editors_file_accepts_encoded_uploads_and_rejects_malformed_values() -> None:
    """Accept `(filename, bytes)` uploads and reject non-file payloads.

    Returns:
        None: Assertions validate file coercion.

    Raises:
        AssertionError: Raised when file coercion is incorrect.
    """

    editor = FileInputEditor()
    expected_input = ExpectedInput(id="upload", type="file")
    state = editor.editor_initialize(expected_input)

    uploaded_state = editor.editor_apply_edit(expected_input, state, ("notes.txt", b"hello"))

    assert state.update == input_update_missing()
    assert uploaded_state.update == input_update_value({"filename": "notes.txt", "data": "aGVsbG8="})
    assert editor_is_file_value(uploaded_state.value)
    assert not editor_is_file_value({"filename": "x", "data": "***"})
    with pytest.raises(InvalidEditError, match="upload"):
        editor.editor_apply_edit(expected_input, state, "notes.txt")
    assert editor.editor_initialize(expected_input, 3).coercion_warning == (
        "This input has been reset because the existing value was not a file (was number)."
    )


def test_editors_file_array_is_missing_until_a_file_is_added() -> None:
    editor = FileArrayInputEditor()
    expected_input = ExpectedInput(id="uploads", type="file[]")
    state = editor.editor_initialize(expected_input)

    edited_state = editor.editor_apply_edit(expected_input, state, [editor_encode_file("a.bin", b"\x00")])

    assert state.update == input_update_missing()
    assert edited_state.details["filenames"] == ["a.bin"]


def test_editors_unknown_type_reports_error_and_ignores_edits() -> None:
    """Route unknown type tags to the fallback editor.

    Returns:
        None: Assertions validate unknown type handling.

    Raises:
        AssertionError: Raised when unknown types are not reported.
    """

    expected_input = ExpectedInput(id="blob", type="blob")
    editor = editor_for_expected_input(expected_input)
    state = editor.editor_initialize(expected_input, MISSING_SUGGESTION)

    assert isinstance(editor, UnknownInputTypeEditor)
    assert state.update == input_update_errors(["blob: Has an unknown input type (blob)"])
    assert "string[]" in state.details["description"]
    assert editor.editor_apply_edit(expected_input, state, "anything") is state


@pytest.mark.parametrize(
    ("value", "expected"),
    [(1, "1"), (1.0, "1"), (0.5, "0.5"), (-2.0, "-2"), (1e21, "1e+21"), (2**63, "9223372036854775808")],
)
def test_editors_render_number(value: int | float, expected: str) -> None:
    assert editor_render_number(value) == expected


def test_editors_describe_value_type() -> None:
    assert [editor_describe_value_type(value) for value in (None, True, 1.5, "a", [1], {"a": 1})] == [
        "null",
        "boolean",
        "number",
        "string",
        "array",
        "object",
    ]


@pytest.mark.parametrize(
    ("expected_input", "suggested_value"),
    [
        (ExpectedInput(id="count", type="int", min_value=0), "12"),
        (ExpectedInput(id="count", type="long"), "007"),
        (ExpectedInput(id="ratio", type="double"), 0.25),
        (ExpectedInput(id="title", type="string"), "nightly"),
        (ExpectedInput(id="samples", type="string[]"), ["a", "b"]),
        (
            ExpectedInput(
                id="mode",
                type="select",
                options=(SelectOption(id="fast", name="Fast"), SelectOption(id="slow", name="Slow")),
            ),
            "slow",
        ),
    ],
)
def test_editors_recoercing_a_coerced_value_is_stable(expected_input: ExpectedInput, suggested_value: object) -> None:
    """Initialize twice and expect the second pass to change nothing.

    Args:
        expected_input: Field declaration.
        suggested_value: Carried-over value for the first pass.

    Returns:
        None: Assertions validate that coercion is idempotent.

    Raises:
        AssertionError: Raised when re-coercion warns or changes the value.
    """

    editor = editor_for_expected_input(expected_input)
    first_state = editor.editor_initialize(expected_input, suggested_value)
    coerced_value = input_update_visit(
        first_state.update,
        on_value=lambda value: value,
        on_missing=lambda: MISSING_SUGGESTION,
        on_errors=lambda errors: MISSING_SUGGESTION,
    )

    second_state = editor.editor_initialize(expected_input, coerced_value)

    assert first_state.coercion_warning is None
    assert second_state.coercion_warning is None
    assert second_state.update == first_state.update
