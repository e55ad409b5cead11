#!/usr/bin/env python3
"""
PCIe Controller for the Blade cluster board
Finds attached compute nodes in the sysfs PCI device tree and triggers rescans
"""

import os
import logging
from typing import List, Optional
from dataclasses import dataclass

from .sysfs import ControlSurface, SysfsControlSurface, SYSFS_PCIE_ROOT
from ..errors import IoError

VENDOR_ID = 0x4586
DEVICE_ID = 0x1234

# Hard coded: the vendor is not a PCI-SIG member and borrows another org's vendor ID
DEVICE_DESCRIPTION = "Network controller: Mixtile Limited Blade 3 (rev 01)"


@dataclass(frozen=True)
class BladePcieEntry:
    """A compute node discovered on the PCIe bus"""
    address: str
    pcie_root: str = SYSFS_PCIE_ROOT

    @property
    def path(self) -> str:
        return os.path.join(self.pcie_root, self.address)

    @property
    def description(self) -> str:
        # Only the literal "0000:" domain is dropped, "0000:01:02.0" -> "01:02.0"
        short_address = self.address[5:] if self.address.startswith("0000:") else self.address
        return f"{short_address} {DEVICE_DESCRIPTION}"

    def __str__(self) -> str:
        return self.description


class PCIeController:
    """
    Lists Blade nodes on the PCIe bus
    Vendor and device identifiers are compared as text only
    """

    def __init__(self, surface: Optional[ControlSurface] = None, pcie_root: str = SYSFS_PCIE_ROOT,
                 rescan_path: Optional[str] = None):
        """
        Initialize PCIe controller

        Args:
            surface: Control surface to use, the real sysfs by default
            pcie_root: Directory whose immediate children are bus device entries
            rescan_path: Rescan control entry, <pcie_root>/rescan when omitted
        """
        self.logger = logging.getLogger(__name__)
        self.surface = surface if surface is not None else SysfsControlSurface()
        self.pcie_root = pcie_root
        self.rescan_path = rescan_path if rescan_path is not None else os.path.join(pcie_root, "rescan")

    def rescan_all(self):
        """
        Trigger a rescan of every PCIe bus
        Does not wait for the rescan to complete
        """
        try:
            self.surface.write_text(self.rescan_path, "1\n")
        except OSError as e:
            raise IoError("failed to trigger PCIe rescan via sysfs interface", path=self.rescan_path) from e
        self.logger.info("Triggered PCIe rescan")

    def list(self, active_only: bool = False) -> List[BladePcieEntry]:
        """
        List attached Blade nodes

        Args:
            active_only: Only report devices whose enable attribute is "1"

        Returns:
            Entries in filesystem enumeration order, possibly empty

        Raises:
            IoError: device directory or a required attribute could not be read
        """
        vendor_string = f"{VENDOR_ID:x}"
        device_string = f"{DEVICE_ID:x}"

        try:
            names = self.surface.list_entries(self.pcie_root)
        except OSError as e:
            raise IoError(f"failed to walk over PCIe root directory {self.pcie_root!r}", path=self.pcie_root) from e

        entries = []
        for name in names:
            device_path = os.path.join(self.pcie_root, name)
            if device_path == self.rescan_path:
                continue

            if self._read_attribute(device_path, "vendor", "vendor ID") != vendor_string:
                continue
            if self._read_attribute(device_path, "device", "device ID") != device_string:
                continue

            if active_only and self._read_attribute(device_path, "enable", "enable state") != "1":
                self.logger.debug(f"Skipping disabled device {name}")
                continue

            entries.append(BladePcieEntry(address=name, pcie_root=self.pcie_root))

        self.logger.debug(f"Found {len(entries)} Blade device(s)")
        return entries

    def _read_attribute(self, device_path: str, attribute: str, label: str) -> str:
        path = os.path.join(device_path, attribute)
        try:
            return self.surface.read_text(path).strip()
        except OSError as e:
            raise IoError(f"failed to read {label} file for device at {device_path!r}", path=path) from e
