"""Type-tag lookup for input editors."""

from __future__ import annotations

from typing import Final

from job_submission.domain import ExpectedInput

from .collection_editors import FileArrayInputEditor, FileInputEditor, StringArrayInputEditor
from .constants import SUPPORTED_TYPE_TAGS
from .interfaces import InputEditorPort
from .scalar_editors import DecimalInputEditor, IntegerInputEditor, SelectInputEditor, StringInputEditor
from .sql_editor import SqlInputEditor
from .unknown_editor import UnknownInputTypeEditor

_EDITORS_BY_TYPE_TAG: Final[dict[str, InputEditorPort]] = {
    "string": StringInputEditor(),
    "select": SelectInputEditor(),
    "string[]": StringArrayInputEditor(),
    "sql": SqlInputEditor(),
    "int": IntegerInputEditor("int"),
    "long": IntegerInputEditor("long"),
    "float": DecimalInputEditor("float"),
    "double": DecimalInputEditor("double"),
    "file": FileInputEditor(),
    "file[]": FileArrayInputEditor(),
}
_UNKNOWN_EDITOR: Final[UnknownInputTypeEditor] = UnknownInputTypeEditor()

if tuple(_EDITORS_BY_TYPE_TAG) != SUPPORTED_TYPE_TAGS:
    raise RuntimeError("editor registry is out of sync with SUPPORTED_TYPE_TAGS")


def editor_for_expected_input(expected_input: ExpectedInput) -> InputEditorPort:
    """Return the editor responsible for an expected input's type tag.

    Args:
        expected_input: Field declaration.

    Returns:
        InputEditorPort: Matching editor, or the unknown-type editor.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return _EDITORS_BY_TYPE_TAG.get(expected_input.type, _UNKNOWN_EDITOR)


def editor_supported_type_tags() -> tuple[str, ...]:
    return SUPPORTED_TYPE_TAGS
