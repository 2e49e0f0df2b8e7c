"""Unity test runner code generation."""

from unity_runner_gen.generator.runner_generator import (
    generate_header,
    generate_runner,
)
from unity_runner_gen.generator.sanitizer import (
    escape_c_string,
    header_guard_name,
    sanitize_c_identifier,
)

__all__ = [
    # Generation
    "generate_runner",
    "generate_header",
    # Sanitizing
    "sanitize_c_identifier",
    "header_guard_name",
    "escape_c_string",
]
