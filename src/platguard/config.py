"""
Platguard Configuration

Settings for the guard layer, loadable from a YAML file or the environment.
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from platguard.errors import ConfigError, GuardUsageError
from platguard.platform import Platform, to_platform

logger = logging.getLogger(__name__)

ENV_PREFIX = "PLATGUARD_"
ENV_CONFIG_PATH = "PLATGUARD_CONFIG"

DEFAULT_ASSERT_MESSAGE = "This code should only run in a {{ platform }} environment."
DEFAULT_METHOD_MESSAGE = (
    "Method {{ name }} can only be called in a {{ platform }} environment, "
    "current platform is {{ current }}."
)
DEFAULT_FUNCTION_MESSAGE = (
    "Function {{ name }} can only be called in a {{ platform }} environment, "
    "current platform is {{ current }}."
)
DEFAULT_PROPERTY_MESSAGE = (
    "Property {{ name }} of type {{ className }} can only be accessed in a "
    "{{ platform }} environment, current environment is {{ current }}."
)
DEFAULT_SWITCH_MESSAGE = "No function specified for platform: {{ current }}"


@dataclass
class GuardConfig:
    """
    Configuration for platform guards.

    Attributes:
        enabled: When False every guard passes and platform_specific_code always runs
        guard_writes: Also gate property writes (reads are always gated)
        simulated_platform: Platform to simulate from startup (None = detect)
        assert_message: Template for assert_platform() failures
        method_message: Template for guarded method failures
        function_message: Template for make_platform_specific() failures
        property_message: Template for guarded property failures
        switch_message: Template for switch_platform() lookup failures

    Message templates use Jinja2 syntax with the variables ``name``,
    ``platform``, ``current`` and ``className``.
    """

    enabled: bool = True
    guard_writes: bool = False
    simulated_platform: Optional[Platform] = None

    assert_message: str = DEFAULT_ASSERT_MESSAGE
    method_message: str = DEFAULT_METHOD_MESSAGE
    function_message: str = DEFAULT_FUNCTION_MESSAGE
    property_message: str = DEFAULT_PROPERTY_MESSAGE
    switch_message: str = DEFAULT_SWITCH_MESSAGE

    def __post_init__(self) -> None:
        self.simulated_platform = _to_simulated(self.simulated_platform, None)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], file_path: Optional[str] = None) -> "GuardConfig":
        """Build a config from plain data, validating keys and values."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(
                f"Unknown setting(s): {', '.join(unknown)}",
                file_path=file_path,
                details=f"Valid settings: {', '.join(sorted(known))}",
            )
        return cls().merged(data, file_path=file_path)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GuardConfig":
        """
        Build a config from the environment.

        ``PLATGUARD_CONFIG`` names a YAML file loaded first; ``PLATGUARD_ENABLED``,
        ``PLATGUARD_GUARD_WRITES`` and ``PLATGUARD_PLATFORM`` override it.
        """
        if environ is None:
            environ = os.environ

        config_path = environ.get(ENV_CONFIG_PATH)
        config = load_config(config_path) if config_path else cls()

        overrides: Dict[str, Any] = {}
        for key, setting in (
            ("ENABLED", "enabled"),
            ("GUARD_WRITES", "guard_writes"),
            ("PLATFORM", "simulated_platform"),
        ):
            value = environ.get(ENV_PREFIX + key)
            if value is not None and value != "":
                overrides[setting] = value
        return config.merged(overrides, file_path=ENV_PREFIX + "*") if overrides else config

    def merged(self, data: Mapping[str, Any], file_path: Optional[str] = None) -> "GuardConfig":
        """Return a copy with ``data`` applied on top."""
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key in ("enabled", "guard_writes"):
                values[key] = _to_bool(key, value, file_path)
            elif key == "simulated_platform":
                values[key] = _to_simulated(value, file_path)
            elif key.endswith("_message"):
                if not isinstance(value, str):
                    raise ConfigError(f"{key} must be a string", file_path=file_path)
                values[key] = value
            else:
                raise ConfigError(f"Unknown setting: {key}", file_path=file_path)
        return replace(self, **values)


def _to_bool(key: str, value: Any, file_path: Optional[str]) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1", "on"):
            return True
        if lowered in ("false", "no", "0", "off"):
            return False
    raise ConfigError(f"{key} must be a boolean, got {value!r}", file_path=file_path)


def _to_simulated(value: Any, file_path: Optional[str]) -> Optional[Platform]:
    if value is None:
        return None
    try:
        return to_platform(value)
    except GuardUsageError as e:
        raise ConfigError(e.message, file_path=file_path) from None


def load_config(path: Union[str, "os.PathLike[str]"]) -> GuardConfig:
    """
    Load a guard configuration from a YAML file.

    An empty file yields the defaults. A top-level ``platguard:`` key is
    accepted so the settings can live in a shared application config file.
    """
    config_path = Path(path)
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e}", file_path=str(config_path)) from e

    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise ConfigError("Invalid YAML", file_path=str(config_path), details=str(e)) from e

    if isinstance(data, dict) and isinstance(data.get("platguard"), dict):
        data = data["platguard"]
    if not isinstance(data, dict):
        raise ConfigError("Expected a mapping of settings", file_path=str(config_path))

    config = GuardConfig.from_mapping(data, file_path=str(config_path))
    logger.debug("Loaded guard config from %s", config_path)
    return config
