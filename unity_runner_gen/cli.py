"""Command-line interface for unity-runner-gen."""

import argparse
import logging
import sys

from unity_runner_gen.config import (
    ConfigError,
    load_config,
    parse_override,
    resolve_options,
)
from unity_runner_gen.models import GenerationOptions
from unity_runner_gen.orchestrator import default_output_path, run

logger = logging.getLogger(__name__)

EPILOG = """\
files:
  *.yml / *.yaml        load configuration from its :unity or :cmock section
  *.h                   header files are added as #includes in the runner

options:
  -cexception           include CException support
  --setup_name=""       redefine setUp func name to something else
  --teardown_name=""    redefine tearDown func name to something else
  --main_name=""        redefine main func name ("auto" derives one per file)
  --test_prefix=""      redefine test prefix from default test|spec|should
  --suite_setup=""      code to execute for setup of entire suite
  --suite_teardown=""   code to execute for teardown of entire suite
  --use_param_tests=1   enable parameterized tests (disabled by default)
  --cmdline_args=1      compile in command-line test filtering
  --header_file=""      path/name of test header file to generate too
"""


def setup_logging(verbose: bool = False):
    """Configure logging to stderr."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the positional file arguments."""
    parser = argparse.ArgumentParser(
        prog="unity-runner-gen",
        usage="%(prog)s (files) (options) input_test_file (output)",
        description="Generate a Unity test runner for a C test file",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "input_test_file",
        nargs="?",
        help="the C file you want to create a runner for",
    )
    parser.add_argument(
        "output",
        nargs="?",
        help="name of the runner file to generate (default: <input>_Runner.c)",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        help="print every file the run used to stdout",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="log progress to stderr",
    )
    return parser


def parse_args(args: list[str]) -> argparse.Namespace:
    """Parse command-line arguments.

    Configuration files, headers, -cexception and --key=value overrides may
    appear anywhere, so they are pulled out before argparse sees the rest.
    """
    config_file = None
    includes: list[str] = []
    overrides: dict[str, str] = {}
    plugins: list[str] = []
    remaining = []

    for arg in args:
        override = parse_override(arg)
        if arg in ("-cexception", "--cexception"):
            plugins.append("cexception")
        elif override:
            key, value = override
            overrides[key] = value
        elif arg.endswith((".yml", ".yaml")):
            config_file = arg
        elif arg.endswith((".h", ".H")):
            includes.append(arg)
        else:
            remaining.append(arg)

    parsed = create_parser().parse_args(remaining)
    parsed.config_file = config_file
    parsed.includes = includes
    parsed.overrides = overrides
    parsed.plugins = plugins
    return parsed


def build_options(parsed: argparse.Namespace) -> GenerationOptions:
    """Resolve GenerationOptions from a config file and command-line values."""
    base = load_config(parsed.config_file)
    overrides = dict(parsed.overrides)
    if parsed.includes:
        overrides["includes"] = list(base.get("includes") or []) + parsed.includes
    if parsed.plugins:
        overrides["plugins"] = list(base.get("plugins") or []) + parsed.plugins
    return resolve_options(base, overrides)


def run_cli(args: list[str]) -> int:
    """Run the CLI with the given arguments.

    Args:
        args: Command-line arguments (without program name)

    Returns:
        Exit code (0 for success, non-zero for fatal errors)
    """
    try:
        parsed = parse_args(args)
    except SystemExit as e:
        return e.code if e.code else 1

    setup_logging(parsed.verbose)

    if parsed.input_test_file is None:
        create_parser().print_help(sys.stderr)
        return 1

    output = parsed.output or default_output_path(parsed.input_test_file)
    try:
        options = build_options(parsed)
        result = run(parsed.input_test_file, output, options)
    except (ConfigError, OSError) as e:
        logger.error(f"Runner generation failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if parsed.list_files:
        for path in result.files_used:
            print(path)
    return 0


def main():
    """Entry point for the CLI."""
    sys.exit(run_cli(sys.argv[1:]))


if __name__ == "__main__":
    main()
