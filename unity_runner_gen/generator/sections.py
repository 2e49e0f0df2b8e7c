"""Builders for each section of a generated Unity test runner.

Every builder is a pure function returning the section's C text without a
trailing newline. The runner generator joins them in a fixed order.
"""

import os

from unity_runner_gen.generator.sanitizer import (
    escape_c_string,
    header_guard_name,
    sanitize_c_identifier,
)
from unity_runner_gen.models import GenerationOptions, IncludeRef, TestCase

BANNER = "/* AUTOGENERATED FILE. DO NOT EDIT. */"


def _section_title(title: str) -> str:
    return f"\n/*======={title}=====*/"


def _module_stem(filename: str) -> str:
    """File name without directory or trailing .c extension."""
    name = os.path.basename(filename)
    return name[:-2] if name.endswith(".c") else name


def resolve_main_name(filename: str, options: GenerationOptions) -> str:
    """Name of the generated entry point.

    "auto" gives each runner its own entry point, main_<file>, so several
    runners can be linked into one binary.
    """
    if options.main_name == "auto":
        return f"main_{sanitize_c_identifier(_module_stem(filename))}"
    return options.main_name


def _configured_includes(options: GenerationOptions) -> list[str]:
    return [IncludeRef.from_path(inc).directive() for inc in options.includes]


def create_run_test_macro(mocks: list[IncludeRef], options: GenerationOptions) -> str:
    """Build the RUN_TEST macro every test invocation goes through.

    The macro protects setup and the test body, runs teardown unless the
    test was ignored, and wraps the whole thing in mock lifecycle calls,
    a CException Try/Catch, or a command-line name filter as configured.

    Args:
        mocks: Mock headers used by the test file
        options: Generation options

    Returns:
        The macro definition
    """
    va_params = ", ..." if options.use_param_tests else ""
    va_args = "__VA_ARGS__" if options.use_param_tests else ""
    test_name = '#TestFunc "(" #__VA_ARGS__ ")"' if va_args else "#TestFunc"

    lines = [_section_title("Test Runner Used To Run Each Test Below")]
    if options.use_param_tests:
        lines.append("#define RUN_TEST_NO_ARGS")
    lines.append(f"#define RUN_TEST(TestFunc, TestLineNum{va_params}) \\")
    lines.append("{ \\")
    lines.append(f"  Unity.CurrentTestName = {test_name}; \\")
    lines.append("  Unity.CurrentTestLineNumber = TestLineNum; \\")
    if options.cmdline_args:
        lines.append("  if (UnityTestMatches()) { \\")
    lines.append("  Unity.NumberOfTests++; \\")
    if mocks:
        lines.append("  CMock_Init(); \\")
        lines.append("  UNITY_CLR_DETAILS(); \\")
    lines.append("  if (TEST_PROTECT()) \\")
    lines.append("  { \\")
    if options.cexception:
        lines.append("    CEXCEPTION_T e; \\")
        lines.append("    Try { \\")
    lines.append(f"      {options.setup_name}(); \\")
    lines.append(f"      TestFunc({va_args}); \\")
    if options.cexception:
        lines.append(
            "    } Catch(e) { TEST_ASSERT_EQUAL_HEX32_MESSAGE("
            'CEXCEPTION_NONE, e, "Unhandled Exception!"); } \\'
        )
    lines.append("  } \\")
    lines.append("  if (TEST_PROTECT() && !TEST_IS_IGNORED) \\")
    lines.append("  { \\")
    lines.append(f"    {options.teardown_name}(); \\")
    if mocks:
        lines.append("    CMock_Verify(); \\")
    lines.append("  } \\")
    if mocks:
        lines.append("  CMock_Destroy(); \\")
    lines.append("  UnityConcludeTest(); \\")
    if options.cmdline_args:
        lines.append("  } \\")
    lines.append("}")
    return "\n".join(lines)


def create_header(
    mocks: list[IncludeRef],
    includes: list[IncludeRef],
    options: GenerationOptions,
) -> str:
    """Build the banner, RUN_TEST macro, includes and defines.

    Args:
        mocks: Mock headers used by the test file
        includes: Non-mock includes found in the test file
        options: Generation options

    Returns:
        The header section
    """
    lines = [BANNER, create_run_test_macro(mocks, options)]
    lines.append(_section_title("Automagically Detected Files To Include"))
    lines.append(f'#include "{options.framework}.h"')
    if mocks:
        lines.append('#include "cmock.h"')
    lines.append("#include <setjmp.h>")
    lines.append("#include <stdio.h>")
    if options.cexception:
        lines.append('#include "CException.h"')
    lines.extend(f"#define {define}" for define in options.defines)
    if options.header_file:
        lines.append(f'#include "{os.path.basename(options.header_file)}"')
    else:
        lines.extend(_configured_includes(options))
        lines.extend(inc.directive() for inc in includes)
    lines.extend(mock.directive() for mock in mocks)
    if options.enforce_strict_ordering:
        lines.append("")
        lines.append("int GlobalExpectCount;")
        lines.append("int GlobalVerifyOrder;")
        lines.append("char* GlobalOrderError;")
    return "\n".join(lines)


def create_externs(tests: list[TestCase], options: GenerationOptions) -> str:
    """Forward declare setup, teardown and every test."""
    lines = [_section_title("External Functions This Runner Calls")]
    lines.append(f"extern void {options.setup_name}(void);")
    lines.append(f"extern void {options.teardown_name}(void);")
    for test in tests:
        lines.append(f"extern void {test.name}({test.call_signature or 'void'});")
    return "\n".join(lines)


def create_mock_management(
    mocks: list[IncludeRef], options: GenerationOptions
) -> str:
    """Build CMock_Init, CMock_Verify and CMock_Destroy.

    Returns an empty string when the test file uses no mocks.
    """
    if not mocks:
        return ""

    names = [sanitize_c_identifier(mock.basename) for mock in mocks]

    lines = [_section_title("Mock Management")]
    lines.append("static void CMock_Init(void)")
    lines.append("{")
    if options.enforce_strict_ordering:
        lines.append("  GlobalExpectCount = 0;")
        lines.append("  GlobalVerifyOrder = 0;")
        lines.append("  GlobalOrderError = NULL;")
    lines.extend(f"  {name}_Init();" for name in names)
    lines.append("}\n")
    lines.append("static void CMock_Verify(void)")
    lines.append("{")
    lines.extend(f"  {name}_Verify();" for name in names)
    lines.append("}\n")
    lines.append("static void CMock_Destroy(void)")
    lines.append("{")
    lines.extend(f"  {name}_Destroy();" for name in names)
    lines.append("}")
    return "\n".join(lines)


def create_suite_setup_and_teardown(options: GenerationOptions) -> str:
    """Wrap the configured suite setup/teardown snippets in functions."""
    lines = []
    if options.suite_setup is not None:
        lines.append(_section_title("Suite Setup"))
        lines.append("static void suite_setup(void)")
        lines.append("{")
        lines.append(options.suite_setup)
        lines.append("}")
    if options.suite_teardown is not None:
        lines.append(_section_title("Suite Teardown"))
        lines.append("static int suite_teardown(int num_failures)")
        lines.append("{")
        lines.append(options.suite_teardown)
        lines.append("}")
    return "\n".join(lines)


def create_reset(mocks: list[IncludeRef], options: GenerationOptions) -> str:
    """Build resetTest, which restores fixture state between invocations."""
    lines = [_section_title("Test Reset Option")]
    lines.append("void resetTest(void);")
    lines.append("void resetTest(void)")
    lines.append("{")
    if mocks:
        lines.append("  CMock_Verify();")
        lines.append("  CMock_Destroy();")
    lines.append(f"  {options.teardown_name}();")
    if mocks:
        lines.append("  CMock_Init();")
    lines.append(f"  {options.setup_name}();")
    lines.append("}")
    return "\n".join(lines)


def _test_invocations(test: TestCase, options: GenerationOptions) -> list[str]:
    """Argument lists for each RUN_TEST call a test expands to."""
    if not options.use_param_tests:
        return [f"{test.name}, {test.line_number}"]
    if not test.parameterized_args:
        return [f"{test.name}, {test.line_number}, RUN_TEST_NO_ARGS"]
    return [
        f"{test.name}, {test.line_number}, {args}" for args in test.parameterized_args
    ]


def _test_listing(test: TestCase, options: GenerationOptions) -> list[str]:
    """Names printed when the runner is asked to list its tests."""
    if not options.use_param_tests:
        return [test.name]
    if not test.parameterized_args:
        return [f"{test.name}(RUN_TEST_NO_ARGS)"]
    return [f"{test.name}({args})" for args in test.parameterized_args]


def create_main(
    filename: str,
    tests: list[TestCase],
    mocks: list[IncludeRef],
    options: GenerationOptions,
) -> str:
    """Build the entry point that runs every test.

    With command-line arguments enabled the entry point parses argv first: a
    negative status lists the tests and returns, any other non-zero status
    is returned as is.

    Args:
        filename: Input test file name, announced to Unity
        tests: Discovered tests
        mocks: Mock headers used by the test file
        options: Generation options

    Returns:
        The main section, ending in a newline
    """
    main_name = resolve_main_name(filename, options)
    params = "int argc, char** argv" if options.cmdline_args else "void"
    export = f"{options.main_export_decl} " if options.main_export_decl else ""

    lines = ["", _section_title("MAIN")]
    if main_name != "main":
        lines.append(f"{export}int {main_name}({params});")
    lines.append(f"int {main_name}({params})")
    lines.append("{")
    if options.cmdline_args:
        lines.append("  int parse_status = UnityParseOptions(argc, argv);")
        lines.append("  if (parse_status != 0)")
        lines.append("  {")
        lines.append("    if (parse_status < 0)")
        lines.append("    {")
        module = escape_c_string(_module_stem(filename))
        lines.append(f'      UnityPrint("{module}.");')
        lines.append("      UNITY_PRINT_EOL();")
        for test in tests:
            for entry in _test_listing(test, options):
                lines.append(f'      UnityPrint("  {escape_c_string(entry)}");')
                lines.append("      UNITY_PRINT_EOL();")
        lines.append("      return 0;")
        lines.append("    }")
        lines.append("    return parse_status;")
        lines.append("  }")
    if options.suite_setup is not None:
        lines.append("  suite_setup();")
    lines.append(f'  UnityBegin("{escape_c_string(filename)}");')
    for test in tests:
        for invocation in _test_invocations(test, options):
            lines.append(f"  RUN_TEST({invocation});")
    lines.append("")
    if mocks:
        lines.append("  CMock_Guts_MemFreeFinal();")
    if options.suite_teardown is not None:
        lines.append("  return suite_teardown(UnityEnd());")
    else:
        lines.append("  return UnityEnd();")
    lines.append("}\n")
    return "\n".join(lines)


def create_header_file(
    header_path: str,
    tests: list[TestCase],
    includes: list[IncludeRef],
    mocks: list[IncludeRef],
    options: GenerationOptions,
) -> str:
    """Build a companion header declaring every test.

    Args:
        header_path: Path of the header being generated, used for the guard
        tests: Discovered tests
        includes: Non-mock includes found in the test file
        mocks: Mock headers used by the test file
        options: Generation options

    Returns:
        The complete header text
    """
    guard = f"_{header_guard_name(header_path)}"
    lines = [BANNER, f"#ifndef {guard}", f"#define {guard}", "", ""]
    lines.append(f'#include "{options.framework}.h"')
    if mocks:
        lines.append('#include "cmock.h"')
    lines.extend(_configured_includes(options))
    lines.extend(inc.directive() for inc in includes)
    lines.append("")
    for test in tests:
        lines.append(f"void {test.name}({test.parameter_list or 'void'});")
    lines.append("#endif")
    lines.append("")
    return "\n".join(lines)
