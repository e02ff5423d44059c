"""Loading configuration from pyproject.toml."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from semrel.config.models import SemrelConfig
from semrel.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

PYPROJECT = "pyproject.toml"
TOOL_SECTION = "semrel"


def find_pyproject_toml(path: Path) -> Path:
    """Return the pyproject.toml at the repository root.

    Raises:
        ConfigNotFoundError: If the file does not exist
    """
    pyproject_path = path if path.name == PYPROJECT else path / PYPROJECT
    if not pyproject_path.is_file():
        raise ConfigNotFoundError(f"No {PYPROJECT} found in {path}")
    return pyproject_path


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid UTF-8 TOML
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigNotFoundError(f"No {PYPROJECT} found at {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigValidationError(f"{path} is not valid UTF-8: {e}") from e


def extract_semrel_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.semrel]`` table, or an empty dict."""
    return pyproject.get("tool", {}).get(TOOL_SECTION, {})


def load_config(path: Path) -> SemrelConfig:
    """Load and validate semrel configuration for a repository.

    A missing ``[tool.semrel]`` section yields the defaults.

    Raises:
        ConfigNotFoundError: If pyproject.toml is missing
        ConfigValidationError: If the configuration is invalid
    """
    pyproject_path = find_pyproject_toml(path)
    raw = extract_semrel_config(load_pyproject_toml(pyproject_path))
    logger.debug("Loaded [tool.%s] from %s: %r", TOOL_SECTION, pyproject_path, raw)

    try:
        return SemrelConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid [tool.{TOOL_SECTION}] configuration:\n{e}") from e
