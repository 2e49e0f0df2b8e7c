"""Data models shared by the scanner and the generator."""

import logging
import re
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

MOCK_PREFIX_PATTERN = re.compile(r"^mock", re.IGNORECASE)

_TRUE_STRINGS = ("1", "true", "yes", "on")


class IncludeKind(Enum):
    """Where an include directive looks for its header."""

    LOCAL = "local"  # #include "name.h"
    SYSTEM = "system"  # #include <name>


@dataclass(frozen=True)
class TestCase:
    """A test function discovered in a C test file."""

    __test__ = False  # not a pytest class

    name: str
    line_number: int
    call_signature: str = "void"
    parameter_list: str = ""
    parameterized_args: tuple[str, ...] | None = None


@dataclass(frozen=True)
class IncludeRef:
    """An include directive found in a test file.

    Local paths are kept without their extension, system paths keep their
    angle brackets.
    """

    path: str
    kind: IncludeKind = IncludeKind.LOCAL

    @classmethod
    def from_path(cls, path: str) -> "IncludeRef":
        """Build a ref from a bare path, inferring the kind from brackets."""
        if "<" in path:
            return cls(path=path, kind=IncludeKind.SYSTEM)
        return cls(path=re.sub(r"\.[hH]$", "", path), kind=IncludeKind.LOCAL)

    @property
    def basename(self) -> str:
        return re.split(r"[/\\]", self.path.strip("<>"))[-1]

    @property
    def is_mock(self) -> bool:
        return bool(MOCK_PREFIX_PATTERN.match(self.basename))

    def directive(self) -> str:
        """Render the #include line for this ref."""
        if self.kind is IncludeKind.SYSTEM:
            return f"#include {self.path}"
        return f'#include "{self.path}.h"'


@dataclass(frozen=True)
class ScanResult:
    """Everything the scanner recovers from one test file."""

    tests: list[TestCase]
    includes: list[IncludeRef]
    mocks: list[IncludeRef]


@dataclass(frozen=True)
class GenerationOptions:
    """Immutable settings for one generator run."""

    includes: tuple[str, ...] = ()
    defines: tuple[str, ...] = ()
    plugins: frozenset[str] = frozenset()
    framework: str = "unity"
    test_prefix: str = "test|spec|should"
    setup_name: str = "setUp"
    teardown_name: str = "tearDown"
    main_name: str = "main"  # "auto" derives main_<file> per input
    main_export_decl: str = ""
    cmdline_args: bool = False
    use_param_tests: bool = False
    suite_setup: str | None = None
    suite_teardown: str | None = None
    enforce_strict_ordering: bool = False
    header_file: str | None = None

    @property
    def cexception(self) -> bool:
        return "cexception" in self.plugins

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> "GenerationOptions":
        """Build options from a plain mapping, ignoring unknown keys.

        Values coming from the command line or YAML are loosely typed, so
        flags accept strings such as "1" or "true", list fields accept a
        single string, and plugin names lose any leading colon.

        Args:
            values: Mapping of option names to raw values

        Returns:
            A GenerationOptions snapshot
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in values.items():
            if key not in known:
                logger.debug(f"Ignoring unknown option: {key}")
                continue
            kwargs[key] = _coerce(key, value)
        return cls(**kwargs)


@dataclass
class RunResult:
    """Output of a full generator run."""

    runner_text: str
    header_text: str | None = None
    files_used: list[str] = field(default_factory=list)


def _coerce(key: str, value: Any) -> Any:
    """Normalize a raw option value to the type GenerationOptions expects."""
    if key in ("includes", "defines"):
        return tuple(_flatten(value))
    if key == "plugins":
        return frozenset(str(p).lstrip(":") for p in _flatten(value))
    if key in ("cmdline_args", "use_param_tests", "enforce_strict_ordering"):
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_STRINGS
        return bool(value)
    if key in ("suite_setup", "suite_teardown", "header_file"):
        return None if value is None else str(value)
    return str(value).lstrip(":") if key == "main_name" else str(value)


def _flatten(value: Any) -> list[str]:
    """Flatten nested lists, dropping None and repeated entries."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple, set, frozenset)):
        return [str(value)]
    result: list[str] = []
    for item in value:
        for flat in _flatten(item):
            if flat not in result:
                result.append(flat)
    return result
