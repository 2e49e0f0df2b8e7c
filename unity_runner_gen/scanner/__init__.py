"""Lexical scanning of C test files."""

from unity_runner_gen.scanner.scrubber import scrub_source, strip_comments
from unity_runner_gen.scanner.source_scanner import (
    find_includes,
    find_mocks,
    find_tests,
    scan_source,
    split_logical_lines,
)

__all__ = [
    # Scrubbing
    "scrub_source",
    "strip_comments",
    # Scanning
    "split_logical_lines",
    "find_tests",
    "find_includes",
    "find_mocks",
    "scan_source",
]
