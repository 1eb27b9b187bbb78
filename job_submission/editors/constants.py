"""Native value ranges and thresholds applied by input editors."""

import sys
from typing import Final

I32_MIN: Final[int] = -2147483647
I32_MAX: Final[int] = 2147483647
I64_MIN: Final[int] = -9223372036854775807
I64_MAX: Final[int] = 9223372036854775807
F32_MIN: Final[float] = -3.402823e38
F32_MAX: Final[float] = 3.402823e38
F64_MIN: Final[float] = -sys.float_info.max
F64_MAX: Final[float] = sys.float_info.max

STR_ARRAY_INTERACTIVE_BREAKPOINT: Final[int] = 500
STR_ARRAY_SUMMARY_PREVIEW_SIZE: Final[int] = 5

SUPPORTED_TYPE_TAGS: Final[tuple[str, ...]] = (
    "string",
    "select",
    "string[]",
    "sql",
    "int",
    "long",
    "float",
    "double",
    "file",
    "file[]",
)
