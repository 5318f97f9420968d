"""
Configuration Helper - discovery settings from defaults, YAML, environment and overrides
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from ..core.errors import ConfigError
from .address_space import validate_subnet
from .probe_pool import DEFAULT_IDLE_TIMEOUT, DEFAULT_MAX_WORKERS
from .reachability_probe import DEFAULT_TIMEOUT, METHODS

logger = logging.getLogger(__name__)

DEFAULT_SUBNET = '192.168.0'
ENV_PREFIX = 'LAN_DISCOVERY_'


@dataclass(frozen=True)
class DiscoveryConfig:
    """Settings for one discovery run"""
    subnet: str = DEFAULT_SUBNET
    timeout: float = DEFAULT_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS
    idle_timeout: float = DEFAULT_IDLE_TIMEOUT
    method: str = 'icmp'

    def __post_init__(self):
        try:
            validate_subnet(self.subnet)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")
        if self.max_workers < 1:
            raise ConfigError(f"max_workers must be at least 1, got {self.max_workers}")
        if self.idle_timeout <= 0:
            raise ConfigError(f"idle_timeout must be positive, got {self.idle_timeout}")
        if self.method not in METHODS:
            raise ConfigError(f"method must be one of {METHODS}, got {self.method!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


_FIELD_TYPES = {
    'subnet': str,
    'timeout': float,
    'max_workers': int,
    'idle_timeout': float,
    'method': str,
}


def _coerce(name: str, value: Any) -> Any:
    expected = _FIELD_TYPES[name]
    if isinstance(value, bool):
        raise ConfigError(f"Invalid value for {name}: {value!r}")
    if expected is str:
        if not isinstance(value, str):
            raise ConfigError(f"{name} must be a string, got {value!r}")
        return value.strip()
    try:
        if expected is int and isinstance(value, float) and not value.is_integer():
            raise ValueError(value)
        return expected(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for {name}: {value!r}") from e


def _apply(config: DiscoveryConfig, values: Mapping[str, Any], source: str) -> DiscoveryConfig:
    unknown = set(values) - set(_FIELD_TYPES)
    if unknown:
        raise ConfigError(f"Unknown configuration keys in {source}: {sorted(unknown)}")
    changes = {name: _coerce(name, value) for name, value in values.items() if value is not None}
    if changes:
        logger.debug(f"Applying configuration from {source}: {changes}")
    return replace(config, **changes)


def load_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load discovery settings from a YAML file.

    The file holds either a top-level mapping of settings or a mapping with
    a ``discovery`` section.
    """
    config_file = Path(path)
    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_file}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {config_file}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_file} must contain a mapping")
    if 'discovery' in data:
        data = data['discovery'] or {}
        if not isinstance(data, dict):
            raise ConfigError(f"'discovery' section in {config_file} must be a mapping")
    return data


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Collect ``LAN_DISCOVERY_*`` settings from the environment."""
    environ = os.environ if environ is None else environ
    values = {}
    for name in _FIELD_TYPES:
        value = environ.get(ENV_PREFIX + name.upper())
        if value:
            values[name] = value
    return values


def load_config(config_file: Optional[Union[str, Path]] = None,
                environ: Optional[Mapping[str, str]] = None,
                **overrides) -> DiscoveryConfig:
    """
    Build the effective configuration.

    Later sources win: defaults, then ``config_file``, then the environment,
    then keyword ``overrides`` whose value is not None.

    Raises:
        ConfigError: for unreadable files, unknown keys or invalid values
    """
    config = DiscoveryConfig()
    if config_file:
        config = _apply(config, load_config_file(config_file), str(config_file))
    config = _apply(config, config_from_env(environ), 'environment')
    config = _apply(config, overrides, 'overrides')
    return config
