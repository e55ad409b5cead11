#!/usr/bin/env python3
"""
Compute node abstraction
Sequences GPIO writes for power on, power off and reboot
"""

import time
import logging
from typing import Callable, List

from .errors import NodeCtlError, PowerError, SetupError
from .hardware.gpio_controller import GPIOController, InputPin, OutputPin
from .topology import NodePins, validate_node_number

# Rail discharge time between power off and power on
REBOOT_SETTLE_DELAY = 1.0

BAUD_RATE = 1500000
TTY_DEVICE_TEMPLATE = "/dev/ttyCH343USB{port}"


class Node:
    """
    One compute node on the board

    Owns three output pins (power/control lines) and one input pin
    (status, reserved). Power sequences are write-only: levels are never
    read back and a failed step is not rolled back.
    """

    def __init__(self, pins: NodePins, gpio_controller: GPIOController,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initialize node and configure all of its pins

        Args:
            pins: Topology entry for this node
            gpio_controller: Controller used to export and configure pins
            sleep: Blocking sleep used for the reboot settling delay

        Raises:
            BadParameter: node number outside 1..4
            SetupError: any pin could not be configured
        """
        self.number = validate_node_number(pins.number)
        self.pins = pins
        self.logger = logging.getLogger(__name__)
        self._sleep = sleep

        self.output_pins: List[OutputPin] = []
        self.input_pins: List[InputPin] = []

        for i, pin_number in enumerate(pins.output_pins):
            try:
                self.output_pins.append(gpio_controller.new_output_pin(pin_number))
            except SetupError as e:
                raise SetupError(
                    f"failed to configure output pin {i} (GPIO pin number {pin_number}) for node {self.number}",
                    pin=pin_number, node=self.number
                ) from e

        for i, pin_number in enumerate(pins.input_pins):
            try:
                self.input_pins.append(gpio_controller.new_input_pin(pin_number))
            except SetupError as e:
                raise SetupError(
                    f"failed to configure input pin {i} (GPIO pin number {pin_number}) for node {self.number}",
                    pin=pin_number, node=self.number
                ) from e

        self.logger.debug(f"Node {self.number} configured with pins {list(pins.all_pins)}")

    # ==================== Power Functions ====================

    def power_on(self):
        """Drive every output pin high, in configuration order"""
        self.logger.info(f"Powering on node {self.number}")
        for pin in self.output_pins:
            try:
                pin.set_high()
            except NodeCtlError as e:
                raise PowerError(f"failed to set output pin {pin.number} high on node {self.number}",
                                 node=self.number, operation="power_on") from e

    def power_off(self):
        """Drive every output pin low, in configuration order"""
        self.logger.info(f"Powering off node {self.number}")
        for pin in self.output_pins:
            try:
                pin.set_low()
            except NodeCtlError as e:
                raise PowerError(f"failed to set output pin {pin.number} low on node {self.number}",
                                 node=self.number, operation="power_off") from e

    def reboot(self):
        """
        Power off, wait REBOOT_SETTLE_DELAY seconds, power on

        If power off fails, power on is never attempted. If power on fails
        the node is left powered off.
        """
        try:
            self.power_off()
        except PowerError as e:
            raise PowerError(f"failed to power off node {self.number} for reboot",
                             node=self.number, operation="reboot") from e

        self.logger.debug(f"Waiting {REBOOT_SETTLE_DELAY}s for node {self.number} rails to settle")
        self._sleep(REBOOT_SETTLE_DELAY)

        try:
            self.power_on()
        except PowerError as e:
            raise PowerError(f"failed to power on node {self.number} after reboot delay",
                             node=self.number, operation="reboot") from e

    # ==================== Status Functions ====================

    def read_status(self) -> int:
        """Raw level of the status input pin, not interpreted"""
        return self.input_pins[0].get_value()

    # ==================== Console Functions ====================

    @property
    def baud_rate(self) -> int:
        return BAUD_RATE

    @property
    def tty_device_path(self) -> str:
        return TTY_DEVICE_TEMPLATE.format(port=self.pins.serial_port)

    def __repr__(self) -> str:
        return f"Node({self.number})"
