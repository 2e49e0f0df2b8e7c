"""Turn file names into C identifiers and C string contents."""

import os
import re

# Characters that separate words in a path become underscores:
#
#   "-"  -> "_"      "/"  -> "_"      "\\" -> "_"
#   "."  -> "_"      ","  -> "_"      whitespace -> "_"
#
# Any other character that cannot appear in a C identifier is dropped, and a
# leading digit gets a "_" prefix.
SEPARATOR_PATTERN = re.compile(r"[-/\\.,\s]")
INVALID_IDENTIFIER_CHAR_PATTERN = re.compile(r"[^A-Za-z0-9_]")
LEADING_DIGIT_PATTERN = re.compile(r"^(\d)")


def sanitize_c_identifier(text: str) -> str:
    """Make a string usable as a C symbol prefix.

    Args:
        text: Any string, typically a mock file name such as "mock-foo.bar"

    Returns:
        A legal C identifier, e.g. "mock_foo_bar"
    """
    text = SEPARATOR_PATTERN.sub("_", text)
    text = INVALID_IDENTIFIER_CHAR_PATTERN.sub("", text)
    return LEADING_DIGIT_PATTERN.sub(r"_\1", text)


def header_guard_name(path: str) -> str:
    """Include guard macro body for a header path, e.g. "TEST_FOO_H"."""
    return SEPARATOR_PATTERN.sub("_", os.path.basename(path)).upper()


def escape_c_string(text: str) -> str:
    """Escape backslashes and quotes for a C string literal."""
    return text.replace("\\", "\\\\").replace('"', '\\"')
