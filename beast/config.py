"""
Engine configuration.

Settings live in an optional YAML mapping (`beast.yaml`):

    components_path: templates/components
    prefix: "bs:"
    default_locale: en
    router_variable: path
    loop_index: true
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError

CONFIG_FILENAME = "beast.yaml"

_yaml = YAML(typ="safe")


@dataclass
class EngineConfig:
    components_path: Optional[str] = "components"
    components_package: Optional[str] = None
    prefix: str = "bs:"
    default_locale: str = "en"
    router_variable: str = "path"
    loop_index: bool = True

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> EngineConfig:
        """
        Builds a config from a parsed mapping, validating keys and types.

        Raises:
            ConfigError: On unknown keys or values of the wrong type
        """
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(raw) - set(known))
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        values: Dict[str, Any] = {}
        for name, value in raw.items():
            if name == "loop_index":
                if not isinstance(value, bool):
                    raise ConfigError(f"{name}: expected boolean, got {type(value).__name__}")
            elif name in ("components_path", "components_package"):
                if value is not None and not isinstance(value, str):
                    raise ConfigError(f"{name}: expected string, got {type(value).__name__}")
            elif not isinstance(value, str) or not value:
                raise ConfigError(f"{name}: expected non-empty string")
            values[name] = value

        return cls(**values)


def _read_yaml_map(path: Path) -> dict:
    """Reads a YAML file that must contain a mapping."""
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return raw


def load_config(path: Optional[Path | str] = None) -> EngineConfig:
    """
    Loads engine settings.

    Args:
        path: Config file; defaults to `beast.yaml` in the working directory

    Returns:
        Parsed config, or defaults when the file does not exist
    """
    cfg_path = Path(path) if path is not None else Path.cwd() / CONFIG_FILENAME
    if not cfg_path.is_file():
        if path is not None:
            raise ConfigError(f"Config file not found: {cfg_path}")
        return EngineConfig()
    config = EngineConfig.from_dict(_read_yaml_map(cfg_path))
    # relative component paths are relative to the config file
    if config.components_path and not Path(config.components_path).is_absolute():
        config.components_path = str(cfg_path.parent / config.components_path)
    return config


def load_context_file(path: Path | str) -> Dict[str, Any]:
    """Reads template variables from a YAML (or JSON) mapping."""
    p = Path(path)
    if not p.is_file():
        raise ConfigError(f"Context file not found: {p}")
    return _read_yaml_map(p)


__all__ = ["EngineConfig", "load_config", "load_context_file", "CONFIG_FILENAME"]
