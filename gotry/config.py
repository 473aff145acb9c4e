"""Run configuration and the per-project .gotry.yaml loader."""
from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from pathlib import Path

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".gotry.yaml"

GOTRY_DEFAULTS = {
    "err_name": "",          # "" permits any error variable name
    "error_type": "error",
    "ignore": "vendor",
}


@dataclass
class Config:
    """Options consulted by the walker and the file processor."""
    list_positions: bool = False
    rewrite: bool = False
    err_name: str = ""
    error_type: str = "error"
    ignore: str = "vendor"
    verbose: bool = False

    def ignore_rx(self) -> re.Pattern | None:
        """Compiled ignore pattern, None if empty."""
        if not self.ignore:
            return None
        try:
            return re.compile(self.ignore)
        except re.error as ex:
            raise ConfigError(f"invalid ignore pattern {self.ignore!r}: {ex}") from ex


def load_config(project_root: Path) -> dict:
    """Load settings, merging the project's .gotry.yaml over the defaults."""
    config = copy.deepcopy(GOTRY_DEFAULTS)
    config_file = project_root / CONFIG_FILENAME
    if config_file.exists():
        try:
            overrides = yaml.safe_load(config_file.read_text()) or {}
        except yaml.YAMLError as ex:
            raise ConfigError(f"{config_file}: {ex}") from ex
        if not isinstance(overrides, dict):
            raise ConfigError(f"{config_file}: expected a mapping at top level")
        _merge_config(config, overrides, config_file)
    return config


def _merge_config(base: dict, overrides: dict, source: Path) -> None:
    """Merge overrides into base. Only known keys with string values are accepted."""
    for key, value in overrides.items():
        if key not in base:
            raise ConfigError(f"{source}: unknown setting {key!r}; "
                              f"expected one of {', '.join(sorted(base))}")
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise ConfigError(f"{source}: {key} must be a string, got {type(value).__name__}")
        base[key] = value


def make_config(settings: dict, **flags) -> Config:
    """Build a Config from loaded settings; flags that are not None win."""
    values = {k: settings[k] for k in GOTRY_DEFAULTS if k in settings}
    values.update({k: v for k, v in flags.items() if v is not None})
    return Config(**values)
