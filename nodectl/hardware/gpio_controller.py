#!/usr/bin/env python3
"""
GPIO Controller for the Blade cluster board
Drives GPIO lines through the kernel sysfs interface (export, direction, value)
"""

import os
import logging
from typing import Optional
from enum import Enum

from .sysfs import ControlSurface, SysfsControlSurface, SYSFS_GPIO_ROOT
from ..errors import IoError, WriteError, ParseError, InvariantViolation, SetupError


class PinState(Enum):
    """Pin lifecycle state"""
    UNEXPORTED = "unexported"
    EXPORTED = "exported"
    INPUT = "in"
    OUTPUT = "out"


class PinMode(Enum):
    """Pin direction as written to the sysfs direction entry"""
    INPUT = "in"
    OUTPUT = "out"


class Pin:
    """
    One GPIO line handed from the kernel to userspace
    Never unexported; the kernel resource outlives the process
    """

    def __init__(self, number: int, surface: ControlSurface, gpio_root: str):
        self.number = number
        self.state = PinState.UNEXPORTED
        self._surface = surface
        self._gpio_root = gpio_root

    @property
    def sysfs_directory(self) -> str:
        return os.path.join(self._gpio_root, f"gpio{self.number}")

    @property
    def _value_path(self) -> str:
        return os.path.join(self.sysfs_directory, "value")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.number}, state={self.state.value})"


class OutputPin(Pin):
    """Output-only view of a configured pin"""

    def set_high(self):
        self._set_output_level(True)

    def set_low(self):
        self._set_output_level(False)

    def _set_output_level(self, high: bool):
        value = "1\n" if high else "0\n"
        level = "high" if high else "low"
        try:
            self._surface.write_text(self._value_path, value)
        except OSError as e:
            raise WriteError(
                f"failed to set GPIO pin {self.number} output level {level} via the sysfs interface",
                pin=self.number, level=level, path=self._value_path
            ) from e


class InputPin(Pin):
    """Input-only view of a configured pin"""

    def get_value(self) -> int:
        """
        Read the current pin level

        Returns:
            0 or 1

        Raises:
            IoError: value entry could not be read
            ParseError: contents are not an integer
            InvariantViolation: integer other than 0 or 1
        """
        try:
            data = self._surface.read_text(self._value_path)
        except OSError as e:
            raise IoError(
                f"failed to read GPIO pin {self.number} level via the sysfs interface",
                path=self._value_path
            ) from e

        try:
            value = int(data.strip())
        except ValueError as e:
            raise ParseError(f"failed to parse GPIO pin {self.number} value {data!r} into an integer") from e

        if value not in (0, 1):
            raise InvariantViolation(f"GPIO pin {self.number} value was expected to be 0 or 1, got {value}")

        return value


class GPIOController:
    """
    Creates configured GPIO pins
    Setup is idempotent: a pin whose sysfs directory already exists is
    assumed to have been exported and configured by a previous run
    """

    def __init__(self, surface: Optional[ControlSurface] = None, gpio_root: str = SYSFS_GPIO_ROOT):
        """
        Initialize GPIO controller

        Args:
            surface: Control surface to use, the real sysfs by default
            gpio_root: Root of the GPIO sysfs class directory
        """
        self.logger = logging.getLogger(__name__)
        self.surface = surface if surface is not None else SysfsControlSurface()
        self.gpio_root = gpio_root

    def new_output_pin(self, number: int) -> OutputPin:
        pin = OutputPin(number, self.surface, self.gpio_root)
        self._setup_pin(pin, PinMode.OUTPUT)
        return pin

    def new_input_pin(self, number: int) -> InputPin:
        pin = InputPin(number, self.surface, self.gpio_root)
        self._setup_pin(pin, PinMode.INPUT)
        return pin

    def _setup_pin(self, pin: Pin, mode: PinMode):
        try:
            already_setup = self.surface.exists(pin.sysfs_directory)
        except OSError as e:
            raise SetupError(f"failed to determine if pin {pin.number} is already setup", pin=pin.number) from e

        if already_setup:
            # Direction is trusted, not re-verified
            pin.state = PinState(mode.value)
            self.logger.debug(f"GPIO pin {pin.number} already exported, skipping setup")
            return

        export_path = os.path.join(self.gpio_root, "export")
        try:
            self.surface.write_text(export_path, f"{pin.number}\n")
        except OSError as e:
            raise SetupError(f"failed to export pin {pin.number} for userspace access", pin=pin.number) from e
        pin.state = PinState.EXPORTED
        self.logger.debug(f"Exported GPIO pin {pin.number}")

        direction_path = os.path.join(pin.sysfs_directory, "direction")
        try:
            self.surface.write_text(direction_path, mode.value)
        except OSError as e:
            raise SetupError(f"failed to set pin {pin.number} direction to {mode.value}", pin=pin.number) from e
        pin.state = PinState(mode.value)
        self.logger.debug(f"Set GPIO pin {pin.number} direction to {mode.value}")
