"""Configuration loading and management for Requirement Analyzer.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalyzerConfig)
    2. Global config (~/.requirement-analyzer.toml)
    3. Project config (./requirement-analyzer.toml)
    4. Explicit config file
    5. Environment variables (REQAN_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(verbose=True, data_dir="/tmp/specs")
    >>> config.verbosity
    'verbose'
    >>> config.database_path
    PosixPath('/tmp/specs/.requirements/workspace.db')
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, Union, get_type_hints

from .document.vocabulary import Language
from .exceptions import InvalidConfigError, RequirementAnalyzerError

Verbosity = Literal["quiet", "normal", "verbose"]

_VERBOSITIES = ("quiet", "normal", "verbose")
_ENV_PREFIX = "REQAN_"


@dataclass(frozen=True)
class AnalyzerConfig:
    """Configuration for the analyzer workspace and CLI.

    Attributes:
        data_dir: Root directory holding ``.requirements/workspace.db``
        default_name: Name given to new blank analyses, also used as the
            exported title when an analysis has no name
        default_language: Language assigned to new analyses
        append_fields: Merge field keys (e.g. ``"problem.problem"``) that
            append instead of replace when importing into an analysis
        verbosity: Logging verbosity level
        log_file: Also append log records to this file
    """

    data_dir: str = "."
    default_name: str = "Untitled Analysis"
    default_language: str = Language.EN.value
    append_fields: list[str] = field(default_factory=list)
    verbosity: Verbosity = "normal"
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.default_name.strip():
            raise InvalidConfigError("default_name", self.default_name, "must not be blank")
        if self.default_language not in {lang.value for lang in Language}:
            raise InvalidConfigError(
                "default_language",
                self.default_language,
                f"expected one of {', '.join(lang.value for lang in Language)}",
            )
        if self.verbosity not in _VERBOSITIES:
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet/normal/verbose")
        if isinstance(self.append_fields, str):
            raise InvalidConfigError("append_fields", self.append_fields, "expected a list")

    @property
    def database_path(self) -> Path:
        """Location of the sqlite workspace database."""
        return Path(self.data_dir) / ".requirements" / "workspace.db"


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalyzerConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``verbose``
            and ``quiet`` booleans are folded into ``verbosity``.

    Returns:
        Validated AnalyzerConfig instance

    Raises:
        RequirementAnalyzerError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".requirement-analyzer.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise RequirementAnalyzerError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "requirement-analyzer.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise RequirementAnalyzerError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise RequirementAnalyzerError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise RequirementAnalyzerError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return AnalyzerConfig(**merged)
    except TypeError as e:
        raise RequirementAnalyzerError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from REQAN_* environment variables.

    Supported environment variables:
        REQAN_DATA_DIR: str
        REQAN_DEFAULT_NAME: str
        REQAN_DEFAULT_LANGUAGE: en/de
        REQAN_APPEND_FIELDS: comma-separated field keys
        REQAN_VERBOSITY: quiet/normal/verbose
        REQAN_LOG_FILE: path
    """
    type_hints = get_type_hints(AnalyzerConfig)

    result: dict[str, Any] = {}

    for field_name in AnalyzerConfig.__dataclass_fields__:
        env_key = f"{_ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        parsed = _parse_env_value(env_value, type_hint)
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    origin = getattr(type_hint, "__origin__", None)

    if origin is list:
        return [part.strip() for part in value.split(",") if part.strip()]

    if origin is Union:
        # Optional[str]: an empty value leaves the field unset
        return value or None

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Accepts either top-level keys or a ``[requirement-analyzer]`` table.
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise RequirementAnalyzerError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        data = tomllib.load(f)

    table = data.get("requirement-analyzer")
    if isinstance(table, dict):
        return dict(table)
    return data
