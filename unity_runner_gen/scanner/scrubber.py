"""Strip strings and comments from C source before pattern matching."""

import re

# Ordered scrub passes for test discovery
STRING_PATTERN = re.compile(r'"[^"\n]*"')
LINE_COMMENT_PATTERN = re.compile(r"//.*$", re.MULTILINE)
BLOCK_COMMENT_PATTERN = re.compile(r"/\*.*?\*/", re.DOTALL)

# A line comment that hides the opening of a block comment, e.g. "// old /*"
# or "//*", must go before block comments are matched.
LINE_COMMENT_HIDING_BLOCK_PATTERN = re.compile(
    r"//(?:.+/\*|\*(?:$|[^/])).*$", re.MULTILINE
)


def scrub_source(text: str) -> str:
    """Remove string literals, line comments and block comments.

    Passes run in a fixed order: strings first, so comment markers inside
    strings are never treated as comments, then line comments, then block
    comments. Newlines outside block comments survive, and unterminated
    strings or comments are left untouched rather than raising.

    Args:
        text: Raw C source

    Returns:
        The scrubbed source
    """
    text = STRING_PATTERN.sub("", text)
    text = LINE_COMMENT_PATTERN.sub("", text)
    return BLOCK_COMMENT_PATTERN.sub("", text)


def strip_comments(text: str) -> str:
    """Remove comments only, leaving strings (and so include paths) intact."""
    text = LINE_COMMENT_HIDING_BLOCK_PATTERN.sub("", text)
    text = BLOCK_COMMENT_PATTERN.sub("", text)
    return LINE_COMMENT_PATTERN.sub("", text)
