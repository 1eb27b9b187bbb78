"""Input editor package: per-type coercion and validation of expected inputs."""

from .collection_editors import (
	FileArrayInputEditor,
	FileInputEditor,
	StringArrayInputEditor,
	editor_encode_file,
	editor_is_file_value,
	editor_render_values_download,
	editor_split_text_block,
	editor_summarize_values,
)
from .constants import STR_ARRAY_INTERACTIVE_BREAKPOINT, SUPPORTED_TYPE_TAGS
from .interfaces import MISSING_SUGGESTION, FieldEditorState, InputEditorPort, InvalidEditError
from .registry import editor_for_expected_input, editor_supported_type_tags
from .rendering import editor_describe_value_type, editor_render_number
from .scalar_editors import DecimalInputEditor, IntegerInputEditor, SelectInputEditor, StringInputEditor
from .sql_editor import SQL_RESET_WARNING, SqlInputEditor
from .sql_query_builder import ColumnFilter, QuerySelection, query_selection_to_payload
from .unknown_editor import UnknownInputTypeEditor

__all__ = [
	"MISSING_SUGGESTION",
	"SQL_RESET_WARNING",
	"STR_ARRAY_INTERACTIVE_BREAKPOINT",
	"SUPPORTED_TYPE_TAGS",
	"ColumnFilter",
	"DecimalInputEditor",
	"FieldEditorState",
	"FileArrayInputEditor",
	"FileInputEditor",
	"InputEditorPort",
	"IntegerInputEditor",
	"InvalidEditError",
	"QuerySelection",
	"SelectInputEditor",
	"SqlInputEditor",
	"StringArrayInputEditor",
	"StringInputEditor",
	"UnknownInputTypeEditor",
	"editor_describe_value_type",
	"editor_encode_file",
	"editor_for_expected_input",
	"editor_is_file_value",
	"editor_render_number",
	"editor_render_values_download",
	"editor_split_text_block",
	"editor_summarize_values",
	"editor_supported_type_tags",
	"query_selection_to_payload",
]
