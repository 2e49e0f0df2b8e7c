"""Assemble Unity test runner and companion header text."""

import logging

from unity_runner_gen.generator.sections import (
    create_externs,
    create_header,
    create_header_file,
    create_main,
    create_mock_management,
    create_reset,
    create_suite_setup_and_teardown,
)
from unity_runner_gen.models import GenerationOptions, IncludeRef, TestCase

logger = logging.getLogger(__name__)


def generate_runner(
    input_file: str,
    tests: list[TestCase],
    mocks: list[IncludeRef],
    includes: list[IncludeRef],
    options: GenerationOptions,
) -> str:
    """Generate the C source of a test runner.

    Sections always appear in the same order: header, externs, mock
    management, suite setup/teardown, reset, main. Sections with nothing to
    say (no mocks, no suite hooks) are left out.

    Args:
        input_file: Name of the test file, announced when the run begins
        tests: Tests to declare and run
        mocks: Mock headers whose lifecycle the runner manages
        includes: Non-mock includes detected in the test file
        options: Generation options

    Returns:
        Runner C source
    """
    logger.info(
        f"Generating runner for {input_file}: {len(tests)} tests, {len(mocks)} mocks"
    )
    sections = [
        create_header(mocks, includes, options),
        create_externs(tests, options),
        create_mock_management(mocks, options),
        create_suite_setup_and_teardown(options),
        create_reset(mocks, options),
        create_main(input_file, tests, mocks, options),
    ]
    return "\n".join(section for section in sections if section)


def generate_header(
    header_path: str,
    tests: list[TestCase],
    includes: list[IncludeRef],
    mocks: list[IncludeRef],
    options: GenerationOptions,
) -> str:
    """Generate a companion header declaring every test."""
    logger.info(f"Generating header {header_path} with {len(tests)} declarations")
    return create_header_file(header_path, tests, includes, mocks, options)
