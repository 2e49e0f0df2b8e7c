"""Tests for the scan and generate pipeline."""

import shutil
from pathlib import Path

import pytest

from unity_runner_gen.models import GenerationOptions
from unity_runner_gen.orchestrator import default_output_path, generate, run


@pytest.fixture
def fixtures_path():
    return Path(__file__).parent / "fixtures" / "sample_tests"


class TestGenerate:
    def given_calculator_source(self, fixtures_path):
        self.source = (fixtures_path / "test_calculator.c").read_text()

    def when_generated(self, **options):
        self.scan, self.result = generate(
            self.source, "test_calculator.c", GenerationOptions(**options)
        )

    def test_round_trip(self, fixtures_path):
        """testAdd at line 5 with mockFoo.h gives one test, one mock and its calls."""
        self.given_calculator_source(fixtures_path)
        self.when_generated()

        assert [(t.name, t.line_number) for t in self.scan.tests] == [("testAdd", 5)]
        assert [m.path for m in self.scan.mocks] == ["mockFoo"]
        for suffix in ("Init", "Verify", "Destroy"):
            assert f"  mockFoo_{suffix}();" in self.result.runner_text
        assert self.result.runner_text.count("RUN_TEST(testAdd, 5);") == 1

    def test_no_header_unless_configured(self, fixtures_path):
        """Header text is only produced when a header file is configured."""
        self.given_calculator_source(fixtures_path)
        self.when_generated()
        assert self.result.header_text is None

        self.when_generated(header_file="test_calculator.h")
        assert "void testAdd(void);" in self.result.header_text
        assert '#include "test_calculator.h"' in self.result.runner_text

    def test_empty_file_gives_minimal_runner(self, fixtures_path):
        """A file with no tests still yields a runner that returns."""
        self.source = (fixtures_path / "test_empty.c").read_text()
        self.when_generated()
        assert self.scan.tests == []
        assert "RUN_TEST(" not in self.result.runner_text.split("MAIN")[1]
        assert "  return UnityEnd();" in self.result.runner_text

    def test_mock_containing_framework_name_is_managed(self):
        """A mock whose name contains unity is included and managed."""
        self.source = (
            '#include "unity.h"\n#include "mockOpportunity.h"\n'
            "void testA(void) {}\n"
        )
        self.when_generated()
        assert '#include "mockOpportunity.h"' in self.result.runner_text
        assert "  mockOpportunity_Init();" in self.result.runner_text
        assert "  CMock_Guts_MemFreeFinal();" in self.result.runner_text

    def test_function_pointer_parameter_declared_whole(self):
        """The extern for a test taking a callback keeps the full type."""
        self.source = "void test_cb(void (*cb)(void))\n{\n}\n"
        self.when_generated()
        assert "extern void test_cb(void (*cb)(void));" in self.result.runner_text


class TestRun:
    def given_test_file(self, fixtures_path, tmp_path, name):
        self.input_file = str(tmp_path / name)
        shutil.copy(fixtures_path / name, self.input_file)

    def when_run(self, output_file=None, **options):
        self.result = run(self.input_file, output_file, GenerationOptions(**options))

    def test_writes_runner_next_to_input(self, fixtures_path, tmp_path):
        """The default runner path is <input>_Runner.c."""
        self.given_test_file(fixtures_path, tmp_path, "test_calculator.c")
        self.when_run()
        runner = tmp_path / "test_calculator_Runner.c"
        assert runner.read_text() == self.result.runner_text

    def test_reports_files_used(self, fixtures_path, tmp_path):
        """Input, output, include sources and configured includes are reported."""
        self.given_test_file(fixtures_path, tmp_path, "test_mocks.c")
        output = str(tmp_path / "runner.c")
        self.when_run(output, includes=("extra.h",))
        assert self.result.files_used == [
            self.input_file,
            output,
            "widget.c",
            "extra.h",
        ]

    def test_writes_companion_header(self, fixtures_path, tmp_path):
        """A configured header file is written alongside the runner."""
        self.given_test_file(fixtures_path, tmp_path, "test_params.c")
        header = tmp_path / "test_params.h"
        self.when_run(header_file=str(header))
        assert header.read_text() == self.result.header_text
        assert str(header) in self.result.files_used

    def test_missing_input_raises(self, tmp_path):
        """A missing input file is an OSError for the caller to report."""
        self.input_file = str(tmp_path / "nope.c")
        with pytest.raises(OSError):
            self.when_run()

    def test_reads_latin1_input(self, tmp_path):
        """Non UTF-8 bytes in comments do not break scanning."""
        self.input_file = str(tmp_path / "test_latin.c")
        Path(self.input_file).write_bytes(b"/* caf\xe9 */\nvoid testX(void) {}\n")
        self.when_run()
        assert "RUN_TEST(testX, 2);" in self.result.runner_text


class TestDefaultOutputPath:
    def test_replaces_c_extension(self):
        assert default_output_path("tests/test_a.c") == "tests/test_a_Runner.c"

    def test_appends_when_no_extension(self):
        assert default_output_path("test_a") == "test_a_Runner.c"
