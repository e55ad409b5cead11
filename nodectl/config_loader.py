#!/usr/bin/env python3
"""
Board configuration loader
YAML file merged over built-in defaults, then environment overrides
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError
from .hardware.sysfs import SYSFS_GPIO_ROOT, SYSFS_PCIE_ROOT, SYSFS_PCIE_RESCAN
from .topology import BoardTopology, NodePins, DEFAULT_TOPOLOGY

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config" / "board_config.yaml"

logger = logging.getLogger(__name__)

_REQUIRED_SETTINGS = {
    'system': ('log_level',),
    'sysfs': ('gpio_root', 'pcie_root', 'pcie_rescan'),
    'console': ('program',)
}


def _get_default_config() -> Dict[str, Any]:
    """Return default board configuration"""
    return {
        'system': {
            'log_level': 'WARNING'
        },
        'sysfs': {
            'gpio_root': SYSFS_GPIO_ROOT,
            'pcie_root': SYSFS_PCIE_ROOT,
            'pcie_rescan': SYSFS_PCIE_RESCAN
        },
        'console': {
            'program': 'picocom'
        },
        'nodes': {
            pins.number: {
                'output_pins': list(pins.output_pins),
                'input_pins': list(pins.input_pins),
                'serial_port': pins.serial_port
            }
            for pins in DEFAULT_TOPOLOGY.nodes
        }
    }


def _deep_update(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            base[k] = _deep_update(base[k], v)
        else:
            base[k] = v
    return base


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load board configuration

    Args:
        path: Explicit config file. Falls back to NODECTL_CONFIG, then the
            packaged board_config.yaml

    Returns:
        Merged configuration dictionary

    Raises:
        ConfigError: explicit file missing, unreadable, not valid YAML, or a
            section that is not a mapping
    """
    config = _get_default_config()

    explicit = path or os.getenv("NODECTL_CONFIG")
    config_path = Path(explicit) if explicit else DEFAULT_CONFIG_PATH
    if explicit and not config_path.exists():
        raise ConfigError(f"configuration file {str(config_path)!r} does not exist")

    if config_path.exists():
        try:
            with open(config_path, 'r') as file:
                data = yaml.safe_load(file) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"failed to load configuration from {str(config_path)!r}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"configuration in {str(config_path)!r} must be a mapping")
        if isinstance(data.get('nodes'), dict):
            try:
                data['nodes'] = {int(number): entry for number, entry in data['nodes'].items()}
            except ValueError as e:
                raise ConfigError(f"node numbers in {str(config_path)!r} must be integers") from e
        _deep_update(config, data)
        logger.info(f"Loaded board configuration from {config_path}")

    env: Dict[str, Any] = {}
    gpio_root = os.getenv("NODECTL_GPIO_ROOT")
    if gpio_root:
        env.setdefault('sysfs', {})['gpio_root'] = gpio_root
    pcie_root = os.getenv("NODECTL_PCIE_ROOT")
    if pcie_root:
        env.setdefault('sysfs', {})['pcie_root'] = pcie_root
    pcie_rescan = os.getenv("NODECTL_PCIE_RESCAN")
    if pcie_rescan:
        env.setdefault('sysfs', {})['pcie_rescan'] = pcie_rescan
    log_level = os.getenv("NODECTL_LOG_LEVEL")
    if log_level:
        env.setdefault('system', {})['log_level'] = log_level
    _deep_update(config, env)
    _validate_sections(config)
    return config


def _validate_sections(config: Dict[str, Any]):
    """Reject sections or settings that were emptied or mistyped in YAML"""
    for section, keys in _REQUIRED_SETTINGS.items():
        if not isinstance(config.get(section), dict):
            raise ConfigError(f"configuration section '{section}' must be a mapping, got {config.get(section)!r}")
        for key in keys:
            value = config[section].get(key)
            if not isinstance(value, str) or not value:
                raise ConfigError(f"configuration setting '{section}.{key}' must be a non-empty string, got {value!r}")
    if not isinstance(config.get('nodes'), dict):
        raise ConfigError(f"configuration section 'nodes' must be a mapping, got {config.get('nodes')!r}")


def build_topology(config: Dict[str, Any]) -> BoardTopology:
    """
    Turn the 'nodes' section into a validated BoardTopology

    Raises:
        ConfigError: missing fields or an invalid topology
    """
    nodes_config = config.get('nodes') or {}
    nodes = []
    try:
        for number in sorted(nodes_config, key=int):
            entry = nodes_config[number]
            nodes.append(NodePins(
                number=int(number),
                output_pins=tuple(int(pin) for pin in entry['output_pins']),
                input_pins=tuple(int(pin) for pin in entry['input_pins']),
                serial_port=int(entry['serial_port'])
            ))
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"invalid node topology entry: {e}") from e
    return BoardTopology(nodes=tuple(nodes))
