"""
Hardware abstraction layer for the Blade cluster board
"""

from .sysfs import ControlSurface, SysfsControlSurface
from .gpio_controller import GPIOController, OutputPin, InputPin, PinState, PinMode
from .pcie_controller import PCIeController, BladePcieEntry

__all__ = [
    'ControlSurface', 'SysfsControlSurface',
    'GPIOController', 'OutputPin', 'InputPin', 'PinState', 'PinMode',
    'PCIeController', 'BladePcieEntry',
]
