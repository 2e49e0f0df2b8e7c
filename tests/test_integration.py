"""Integration tests for end-to-end functionality."""

import shutil
import subprocess
import sys
from pathlib import Path

import pytest


@pytest.fixture
def fixtures_path():
    return Path(__file__).parent / "fixtures" / "sample_tests"


class TestEndToEnd:
    def given_test_file(self, fixtures_path, tmp_path, name):
        self.input_file = tmp_path / name
        shutil.copy(fixtures_path / name, self.input_file)
        self.runner = tmp_path / name.replace(".c", "_Runner.c")

    def when_cli_is_executed(self, *extra):
        self.result = subprocess.run(
            [sys.executable, "-m", "unity_runner_gen", *extra, str(self.input_file)],
            capture_output=True,
            text=True,
        )
        self.output = self.runner.read_text()

    def then_exit_code_is_zero(self):
        assert self.result.returncode == 0

    def test_generates_runner_with_mocks(self, fixtures_path, tmp_path):
        """A test file using mocks gets full mock management."""
        self.given_test_file(fixtures_path, tmp_path, "test_mocks.c")
        self.when_cli_is_executed()
        self.then_exit_code_is_zero()
        assert '#include "mocks/mock-Bar.h"' in self.output
        assert '#include "MockSensor.h"' in self.output
        assert "  mock_Bar_Init();" in self.output
        assert "  MockSensor_Destroy();" in self.output
        assert "  RUN_TEST(test_widget_reads_sensor, 17);" in self.output
        assert "  RUN_TEST(should_ignore_bar, 23);" in self.output
        assert "  CMock_Guts_MemFreeFinal();" in self.output

    def test_generates_parameterized_runner(self, fixtures_path, tmp_path):
        """Parameterized tests expand to one invocation per argument set."""
        self.given_test_file(fixtures_path, tmp_path, "test_params.c")
        self.when_cli_is_executed("--use_param_tests=1")
        self.then_exit_code_is_zero()
        assert "  RUN_TEST(testSum, 5, 1,2);" in self.output
        assert "  RUN_TEST(testSum, 5, 3,4);" in self.output
        assert "  RUN_TEST(testPlain, 10, RUN_TEST_NO_ARGS);" in self.output
