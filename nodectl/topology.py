#!/usr/bin/env python3
"""
Static board topology: node number -> GPIO pins and serial port
"""

from typing import Tuple
from dataclasses import dataclass

from .errors import BadParameter, ConfigError

NODE_COUNT = 4
OUTPUT_PINS_PER_NODE = 3
INPUT_PINS_PER_NODE = 1
SERIAL_PORT_COUNT = 4


@dataclass(frozen=True)
class NodePins:
    """Pin assignment for one node"""
    number: int
    output_pins: Tuple[int, ...]
    input_pins: Tuple[int, ...]
    serial_port: int

    def __post_init__(self):
        if len(self.output_pins) != OUTPUT_PINS_PER_NODE:
            raise ConfigError(
                f"node {self.number} must have exactly {OUTPUT_PINS_PER_NODE} output pins, "
                f"got {len(self.output_pins)}"
            )
        if len(self.input_pins) != INPUT_PINS_PER_NODE:
            raise ConfigError(
                f"node {self.number} must have exactly {INPUT_PINS_PER_NODE} input pin, "
                f"got {len(self.input_pins)}"
            )
        if not 0 <= self.serial_port < SERIAL_PORT_COUNT:
            raise ConfigError(f"node {self.number} serial port {self.serial_port} out of range 0-{SERIAL_PORT_COUNT - 1}")

    @property
    def all_pins(self) -> Tuple[int, ...]:
        return self.output_pins + self.input_pins


@dataclass(frozen=True)
class BoardTopology:
    """
    Immutable pin map for the whole board

    Nodes are numbered contiguously from 1, no GPIO line or serial port is
    shared between two nodes.
    """
    nodes: Tuple[NodePins, ...]

    def __post_init__(self):
        if len(self.nodes) != NODE_COUNT:
            raise ConfigError(f"board topology must describe exactly {NODE_COUNT} nodes, got {len(self.nodes)}")

        numbers = [node.number for node in self.nodes]
        if numbers != list(range(1, NODE_COUNT + 1)):
            raise ConfigError(f"node numbers must be 1-{NODE_COUNT} in order, got {numbers}")

        seen_pins = {}
        for node in self.nodes:
            for pin in node.all_pins:
                if pin in seen_pins:
                    raise ConfigError(f"GPIO pin {pin} is assigned to both node {seen_pins[pin]} and node {node.number}")
                seen_pins[pin] = node.number

        ports = [node.serial_port for node in self.nodes]
        if len(set(ports)) != len(ports):
            raise ConfigError(f"serial ports must be unique per node, got {ports}")

    def node(self, number: int) -> NodePins:
        validate_node_number(number)
        return self.nodes[number - 1]


def validate_node_number(number) -> int:
    """
    Check a caller supplied node number

    Raises:
        BadParameter: not an integer in 1..NODE_COUNT
    """
    if isinstance(number, bool) or not isinstance(number, int):
        raise BadParameter(f"node number must be an integer, got {number!r}")
    if number < 1:
        raise BadParameter(f"node number {number} must be at least 1")
    if number > NODE_COUNT:
        raise BadParameter(f"node number {number} must be at most {NODE_COUNT}")
    return number


# Pulled from the vendor's nodectl binary
DEFAULT_TOPOLOGY = BoardTopology(nodes=(
    NodePins(1, output_pins=(0x1FC, 0x1F8, 0x1F3), input_pins=(0x1F7,), serial_port=1),
    NodePins(2, output_pins=(0x1FD, 0x1F9, 0x1F2), input_pins=(0x1F6,), serial_port=2),
    NodePins(3, output_pins=(0x1FF, 0x1FB, 0x1F0), input_pins=(0x1F4,), serial_port=3),
    NodePins(4, output_pins=(0x1FE, 0x1FA, 0x1F1), input_pins=(0x1F5,), serial_port=0),
))
