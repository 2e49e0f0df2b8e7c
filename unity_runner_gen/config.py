"""Load and merge runner generator options."""

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from unity_runner_gen.models import GenerationOptions

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS: dict[str, Any] = {
    "includes": [],
    "defines": [],
    "plugins": [],
    "framework": "unity",
    "test_prefix": "test|spec|should",
    "setup_name": "setUp",
    "teardown_name": "tearDown",
    "main_name": "main",
    "main_export_decl": "",
    "cmdline_args": False,
    "use_param_tests": False,
}

# Sections a shared Unity/CMock project file may keep our options under
CONFIG_SECTIONS = ("unity", "cmock")

OVERRIDE_PATTERN = re.compile(r"^--(\w+)=(.*)$", re.DOTALL)


class ConfigError(Exception):
    """Error loading generator configuration."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


def _strip_symbol_keys(mapping: dict) -> dict:
    """Turn Ruby-style ":key" names into plain "key" names."""
    return {str(key).lstrip(":"): value for key, value in mapping.items()}


def load_config(path: str | Path | None) -> dict[str, Any]:
    """Load options from a YAML project file.

    Options live under a "unity" section, or a "cmock" section when the file
    is shared with CMock. Keys may be written Ruby style (":unity:").

    Args:
        path: YAML file path; None or empty returns the defaults

    Returns:
        Defaults merged with the file's section

    Raises:
        ConfigError: If the file cannot be parsed or has no usable section
    """
    options = dict(DEFAULT_OPTIONS)
    if not path:
        return options

    logger.info(f"Loading configuration from {path}")
    try:
        document = yaml.safe_load(Path(path).read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}", path=str(path)) from e

    if document is None:
        logger.warning(f"Configuration file {path} is empty, using defaults")
        return options
    if not isinstance(document, dict):
        raise ConfigError(f"Expected a mapping in {path}", path=str(path))

    document = _strip_symbol_keys(document)
    for name in CONFIG_SECTIONS:
        section = document.get(name)
        if section:
            if not isinstance(section, dict):
                raise ConfigError(
                    f"Section :{name} in {path} is not a mapping", path=str(path)
                )
            options.update(_strip_symbol_keys(section))
            logger.debug(f"Using :{name} section of {path}")
            return options

    raise ConfigError(f"No :unity or :cmock section found in {path}", path=str(path))


def parse_override(arg: str) -> tuple[str, str] | None:
    """Parse a --key=value option override.

    Args:
        arg: Command-line argument such as '--main_name="auto"'

    Returns:
        (key, value) with surrounding quotes removed, or None if arg is not
        an override
    """
    match = OVERRIDE_PATTERN.match(arg)
    if not match:
        return None
    key, value = match.groups()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return key, value


def resolve_options(
    base: dict[str, Any] | None = None, overrides: dict[str, Any] | None = None
) -> GenerationOptions:
    """Merge defaults, a loaded configuration and overrides into options.

    Args:
        base: Options loaded from a file (defaults are used when None)
        overrides: Options that win over base, e.g. from the command line

    Returns:
        Immutable GenerationOptions for one run
    """
    merged = dict(DEFAULT_OPTIONS)
    merged.update(base or {})
    merged.update(overrides or {})
    options = GenerationOptions.from_mapping(merged)
    logger.debug(f"Resolved options: {options}")
    return options
