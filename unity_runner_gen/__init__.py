"""Generate Unity test runners from C test files."""

from unity_runner_gen.config import ConfigError, load_config, resolve_options
from unity_runner_gen.models import (
    GenerationOptions,
    IncludeKind,
    IncludeRef,
    RunResult,
    ScanResult,
    TestCase,
)
from unity_runner_gen.orchestrator import generate, run

__all__ = [
    # Models
    "GenerationOptions",
    "IncludeKind",
    "IncludeRef",
    "RunResult",
    "ScanResult",
    "TestCase",
    # Configuration
    "ConfigError",
    "load_config",
    "resolve_options",
    # Pipeline
    "generate",
    "run",
]
