"""Discover tests, includes and mocks in a C test file."""

import logging
import re

from unity_runner_gen.models import (
    GenerationOptions,
    IncludeKind,
    IncludeRef,
    ScanResult,
    TestCase,
)
from unity_runner_gen.scanner.scrubber import scrub_source, strip_comments

logger = logging.getLogger(__name__)

# Preprocessor directives are logical lines of their own; otherwise ;, { and }
# end a logical line.
LOGICAL_LINE_SPLIT_PATTERN = re.compile(r"(^\s*#.*$)|(;|\{|\})", re.MULTILINE)

# One TEST_CASE(...) marker; arguments run to the last ")" before the next
# marker or the end of the physical line.
TEST_CASE_ARGS_PATTERN = re.compile(
    r"TEST_CASE\s*\((.*?)\)\s*(?=TEST_CASE\b|$)", re.MULTILINE
)

LOCAL_INCLUDE_PATTERN = re.compile(r'^\s*#include\s+"\s*(.+)\.[hH]\s*"', re.MULTILINE)
SYSTEM_INCLUDE_PATTERN = re.compile(r"^\s*#include\s+<\s*(.+)\s*>", re.MULTILINE)
HEADER_EXTENSION_PATTERN = re.compile(r"\.[hH]$")


def _test_signature_pattern(test_prefix: str) -> re.Pattern:
    """Compile the test signature pattern for a prefix alternation."""
    return re.compile(
        r"^((?:\s*TEST_CASE\s*\(.*?\)\s*)*)"  # parameterization markers
        rf"\s*void\s+((?:{test_prefix})\w*)"  # test name
        r"\s*\(\s*([\s\S]*)\s*\)",  # parameters to the last ")", any lines
        re.MULTILINE,
    )


def split_logical_lines(scrubbed: str) -> list[str]:
    """Split scrubbed source into statement-sized logical lines."""
    return [part for part in LOGICAL_LINE_SPLIT_PATTERN.split(scrubbed) if part]


def find_tests(source: str, options: GenerationOptions) -> list[TestCase]:
    """Find test functions and the source line each one is defined on.

    Matching runs on scrubbed logical lines so comments, strings and
    signatures broken across lines do not get in the way. Line numbers are
    then recovered from the original text, searching forward from the
    previous test so that repeated names resolve in order.

    Args:
        source: Original C source
        options: Generation options (test prefix, parameterized tests)

    Returns:
        Tests in source order, one per distinct name
    """
    pattern = _test_signature_pattern(options.test_prefix)
    found: dict[str, tuple[str, tuple[str, ...] | None]] = {}

    for line in split_logical_lines(scrub_source(source)):
        match = pattern.search(line)
        if not match:
            continue

        markers, name, params = match.groups()
        if name in found:
            logger.debug(f"Skipping repeated definition of {name}")
            continue

        args = None
        if options.use_param_tests and markers.strip():
            args = tuple(
                a.strip() for a in TEST_CASE_ARGS_PATTERN.findall(markers)
            )
        found[name] = (" ".join(params.split()), args)

    source_lines = source.split("\n")
    cursor = 0
    tests = []
    for name, (params, args) in found.items():
        for offset, line in enumerate(source_lines[cursor:]):
            if name in line:
                cursor += offset
                break
        else:
            logger.warning(
                f"Could not locate {name} in source, using line {cursor + 1}"
            )

        tests.append(
            TestCase(
                name=name,
                line_number=cursor + 1,
                call_signature=params or "void",
                parameter_list=params,
                parameterized_args=args,
            )
        )
        logger.debug(f"Found test {name} at line {cursor + 1}")

    logger.info(f"Found {len(tests)} tests")
    return tests


def find_includes(source: str) -> dict[str, list[str]]:
    """Find local and system include directives.

    Args:
        source: Original C source

    Returns:
        Dict with "local" paths (extension removed) and "system" paths
        (angle brackets kept)
    """
    source = strip_comments(source)
    includes = {
        "local": LOCAL_INCLUDE_PATTERN.findall(source),
        "system": [f"<{inc}>" for inc in SYSTEM_INCLUDE_PATTERN.findall(source)],
    }
    logger.info(
        f"Found {len(includes['local'])} local and "
        f"{len(includes['system'])} system includes"
    )
    return includes


def find_mocks(include_paths: list[str]) -> list[str]:
    """Return the includes whose file name starts with "mock"."""
    return [path for path in include_paths if _include_ref(path).is_mock]


def scan_source(source: str, options: GenerationOptions) -> ScanResult:
    """Run every scan over one test file.

    Mocks are split out of the include list, and the framework's own header
    (and CMock's) is dropped from it. A mock is never dropped, even when its
    name contains the framework's.

    Args:
        source: Original C source
        options: Generation options

    Returns:
        ScanResult with tests, plain includes and mocks
    """
    tests = find_tests(source, options)
    headers = find_includes(source)

    paths = _unique(headers["local"] + headers["system"])
    mock_paths = find_mocks(paths)
    self_includes = {options.framework.lower(), "cmock"}

    includes = [
        ref
        for ref in map(_include_ref, paths)
        if ref.path not in mock_paths and _header_stem(ref) not in self_includes
    ]
    mocks = [_include_ref(path) for path in mock_paths]
    logger.info(
        f"Scan complete: {len(tests)} tests, {len(includes)} includes, "
        f"{len(mocks)} mocks"
    )
    return ScanResult(tests=tests, includes=includes, mocks=mocks)


def _include_ref(path: str) -> IncludeRef:
    if path.startswith("<"):
        return IncludeRef(path=path, kind=IncludeKind.SYSTEM)
    return IncludeRef(path=path, kind=IncludeKind.LOCAL)


def _header_stem(ref: IncludeRef) -> str:
    return HEADER_EXTENSION_PATTERN.sub("", ref.basename).lower()


def _unique(paths: list[str]) -> list[str]:
    return list(dict.fromkeys(paths))
