"""Run the scan and generate pipeline for one test file."""

import logging
import os
import tempfile
from pathlib import Path

from unity_runner_gen.generator.runner_generator import (
    generate_header,
    generate_runner,
)
from unity_runner_gen.models import (
    GenerationOptions,
    IncludeKind,
    RunResult,
    ScanResult,
)
from unity_runner_gen.scanner.source_scanner import scan_source

logger = logging.getLogger(__name__)


def default_output_path(input_file: str) -> str:
    """Runner path used when none is given: foo.c becomes foo_Runner.c."""
    if input_file.endswith(".c"):
        return f"{input_file[:-2]}_Runner.c"
    return f"{input_file}_Runner.c"


def generate(
    source: str, input_file: str, options: GenerationOptions
) -> tuple[ScanResult, RunResult]:
    """Scan source text and generate the runner without touching disk.

    Args:
        source: Contents of the test file
        input_file: Name of the test file, used in the generated code
        options: Generation options

    Returns:
        The scan result and the generated texts (files_used left empty)
    """
    scan = scan_source(source, options)
    runner_text = generate_runner(
        input_file, scan.tests, scan.mocks, scan.includes, options
    )
    header_text = None
    if options.header_file:
        header_text = generate_header(
            options.header_file, scan.tests, scan.includes, scan.mocks, options
        )
    return scan, RunResult(runner_text=runner_text, header_text=header_text)


def run(
    input_file: str, output_file: str | None, options: GenerationOptions
) -> RunResult:
    """Generate a runner for a test file and write it out.

    Args:
        input_file: Path of the C test file
        output_file: Path of the runner to write (defaults to <input>_Runner.c)
        options: Generation options

    Returns:
        RunResult with the generated text and every file the run involved:
        input, output, companion header, the .c file of each detected
        local include, then configured includes

    Raises:
        OSError: If the input cannot be read or an output cannot be written
    """
    output_file = output_file or default_output_path(input_file)
    logger.info(f"Generating {output_file} from {input_file}")

    # Latin-1 maps every byte, so odd characters in comments never fail a run
    source = Path(input_file).read_text(encoding="latin-1")
    scan, result = generate(source, input_file, options)

    _write_atomic(output_file, result.runner_text)
    if options.header_file and result.header_text is not None:
        _write_atomic(options.header_file, result.header_text)

    files_used = [input_file, output_file]
    if options.header_file:
        files_used.append(options.header_file)
    files_used += [
        f"{inc.path}.c" for inc in scan.includes if inc.kind is IncludeKind.LOCAL
    ]
    files_used += list(options.includes)
    result.files_used = list(dict.fromkeys(files_used))

    logger.info(f"Runner written with {len(scan.tests)} tests")
    return result


def _write_atomic(path: str, content: str) -> None:
    """Write a file so readers never see a partial runner."""
    target = Path(path)
    fd, temp_path = tempfile.mkstemp(
        dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        os.chmod(temp_path, 0o644)
        os.replace(temp_path, target)
    except Exception:
        os.unlink(temp_path)
        raise
    logger.debug(f"Wrote {path}")
