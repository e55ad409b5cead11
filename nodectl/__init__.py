"""
nodectl: hardware abstraction layer for the Blade cluster board
GPIO power control, PCIe discovery and node topology
"""

__version__ = "0.1.0"

from .errors import (
    NodeCtlError, IoError, WriteError, ParseError, InvariantViolation,
    SetupError, PowerError, BadParameter, ConfigError, ConsoleError,
    UnsupportedOperation,
)
from .topology import BoardTopology, NodePins, DEFAULT_TOPOLOGY, NODE_COUNT
from .node import Node, REBOOT_SETTLE_DELAY
from .registry import NodeRegistry

__all__ = [
    'NodeCtlError', 'IoError', 'WriteError', 'ParseError', 'InvariantViolation',
    'SetupError', 'PowerError', 'BadParameter', 'ConfigError', 'ConsoleError',
    'UnsupportedOperation',
    'BoardTopology', 'NodePins', 'DEFAULT_TOPOLOGY', 'NODE_COUNT',
    'Node', 'REBOOT_SETTLE_DELAY', 'NodeRegistry',
]
