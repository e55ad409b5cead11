#!/usr/bin/env python3
"""
Control surface abstraction for kernel pseudo-filesystems
GPIO and PCIe controllers talk to sysfs only through this interface
"""

import os
import logging
from abc import ABC, abstractmethod
from typing import List

SYSFS_GPIO_ROOT = "/sys/class/gpio"
SYSFS_PCIE_ROOT = "/sys/bus/pci/devices"
SYSFS_PCIE_RESCAN = "/sys/bus/pci/rescan"


class ControlSurface(ABC):
    """
    Read/write access to textual control entries keyed by path
    Implementations raise OSError (FileNotFoundError, PermissionError, ...)
    on failure; callers translate these into nodectl errors
    """

    @abstractmethod
    def read_text(self, path: str) -> str:
        """Return the full contents of a control entry"""
        pass

    @abstractmethod
    def write_text(self, path: str, data: str) -> None:
        """Write data to an existing control entry"""
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        """
        Check whether a control entry or directory exists

        Returns:
            True if present, False if not found

        Raises:
            OSError: if the check fails for any reason other than "not found"
        """
        pass

    @abstractmethod
    def list_entries(self, path: str) -> List[str]:
        """Return names of the immediate children of a directory"""
        pass


class SysfsControlSurface(ControlSurface):
    """ControlSurface backed by the real filesystem"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def read_text(self, path: str) -> str:
        with open(path, 'r') as file:
            return file.read()

    def write_text(self, path: str, data: str) -> None:
        # sysfs entries always exist; never create a regular file in their place
        fd = os.open(path, os.O_WRONLY)
        try:
            os.write(fd, data.encode())
        finally:
            os.close(fd)
        self.logger.debug(f"Wrote {data!r} to {path}")

    def exists(self, path: str) -> bool:
        try:
            os.stat(path)
        except FileNotFoundError:
            return False
        return True

    def list_entries(self, path: str) -> List[str]:
        with os.scandir(path) as entries:
            return [entry.name for entry in entries]
