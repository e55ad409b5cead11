#!/usr/bin/env python3
"""
nodectl CLI
===========

Command-line interface for the Blade cluster board.

Usage:
    nodectl list [--active-only]            # List attached nodes on the PCIe bus
    nodectl rescan                          # Trigger a PCIe rescan

    nodectl poweron  (--all | --node N...)  # Power on nodes
    nodectl poweroff (--all | --node N...)  # Power off nodes
    nodectl reboot   (--all | --node N...)  # Power cycle nodes

    nodectl console --node N                # Open a serial console
    nodectl flash --file IMAGE --node N     # Not supported yet
"""

import sys
import logging
import argparse
from typing import Any, Dict, List, Optional

from . import __version__
from .config_loader import load_config, build_topology
from .console import launch_console
from .errors import NodeCtlError, describe
from .flash import flash_nodes
from .hardware.gpio_controller import GPIOController
from .hardware.pcie_controller import PCIeController
from .hardware.sysfs import ControlSurface
from .registry import NodeRegistry

NO_DEVICES_MESSAGE = "No devices found. Run the rescan command then try again."

logger = logging.getLogger(__name__)


class CommandContext:
    """Configuration and hardware handles shared by the subcommands"""

    def __init__(self, config: Dict[str, Any], surface: Optional[ControlSurface] = None):
        self.config = config
        self.surface = surface
        self._registry: Optional[NodeRegistry] = None

    @property
    def registry(self) -> NodeRegistry:
        if self._registry is None:
            controller = GPIOController(self.surface, self.config['sysfs']['gpio_root'])
            self._registry = NodeRegistry(build_topology(self.config), controller)
        return self._registry

    def pcie_controller(self) -> PCIeController:
        sysfs = self.config['sysfs']
        return PCIeController(self.surface, sysfs['pcie_root'], sysfs['pcie_rescan'])


def setup_logging(level_name: str):
    """Setup root logging to stderr"""
    level = getattr(logging, str(level_name).upper(), None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def cmd_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    """List attached nodes."""
    entries = ctx.pcie_controller().list(args.active_only)
    for entry in entries:
        print(entry)
    if not entries:
        print(NO_DEVICES_MESSAGE)
    return 0


def cmd_rescan(args: argparse.Namespace, ctx: CommandContext) -> int:
    """Trigger a PCIe rescan."""
    ctx.pcie_controller().rescan_all()
    return 0


def _selected_nodes(args: argparse.Namespace, ctx: CommandContext):
    # Validate before any pin is exported
    numbers = ctx.registry.select(args.node or [], all_nodes=args.all)
    nodes = ctx.registry.get_nodes()
    return [nodes[number - 1] for number in numbers]


def cmd_poweron(args: argparse.Namespace, ctx: CommandContext) -> int:
    """Power on the selected nodes."""
    for node in _selected_nodes(args, ctx):
        node.power_on()
    return 0


def cmd_poweroff(args: argparse.Namespace, ctx: CommandContext) -> int:
    """Power off the selected nodes."""
    for node in _selected_nodes(args, ctx):
        node.power_off()
    return 0


def cmd_reboot(args: argparse.Namespace, ctx: CommandContext) -> int:
    """Reboot the selected nodes."""
    for node in _selected_nodes(args, ctx):
        node.reboot()
    return 0


def cmd_flash(args: argparse.Namespace, ctx: CommandContext) -> int:
    """Flash the selected nodes."""
    numbers = ctx.registry.select(args.node or [], all_nodes=args.all)
    flash_nodes(numbers, args.file)
    return 0


def cmd_console(args: argparse.Namespace, ctx: CommandContext) -> int:
    """Open a serial console on one node."""
    node = ctx.registry.get_node(args.node)
    launch_console(node, ctx.config['console']['program'])
    return 0


def _add_selection_flags(parser: argparse.ArgumentParser):
    parser.add_argument("-a", "--all", action="store_true", help="select all nodes")
    parser.add_argument("-n", "--node", type=int, action="append", metavar="N",
                        help="select a specific node (repeatable)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nodectl",
        description="Control power and discovery of the Blade cluster board nodes",
    )
    parser.add_argument("--config", help="board configuration file")
    parser.add_argument("--log-level", help="logging level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    p = subparsers.add_parser("list", aliases=["l"], help="list all connected nodes")
    p.add_argument("-e", "--active-only", action="store_true",
                   help="only report nodes that are active and online")
    p.set_defaults(func=cmd_list)

    p = subparsers.add_parser("poweron", aliases=["u"], help="power on nodes")
    _add_selection_flags(p)
    p.set_defaults(func=cmd_poweron)

    p = subparsers.add_parser("poweroff", aliases=["d"], help="power off nodes")
    _add_selection_flags(p)
    p.set_defaults(func=cmd_poweroff)

    p = subparsers.add_parser("reboot", aliases=["restart", "r"], help="reboot nodes")
    _add_selection_flags(p)
    p.set_defaults(func=cmd_reboot)

    p = subparsers.add_parser("flash", aliases=["f"], help="flash the selected nodes")
    _add_selection_flags(p)
    p.add_argument("-f", "--file", required=True, help="the image file to flash")
    p.set_defaults(func=cmd_flash)

    p = subparsers.add_parser("console", aliases=["c"], help="start a serial console session with a node")
    p.add_argument("-n", "--node", type=int, required=True, help="node to connect to")
    p.set_defaults(func=cmd_console)

    p = subparsers.add_parser("rescan", aliases=["s"], help="trigger a PCIe rescan to look for newly attached nodes")
    p.set_defaults(func=cmd_rescan)

    return parser


def main(argv: Optional[List[str]] = None, surface: Optional[ControlSurface] = None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except NodeCtlError as e:
        print(f"Error: {describe(e)}", file=sys.stderr)
        return 1

    setup_logging(args.log_level or config['system']['log_level'])

    try:
        return args.func(args, CommandContext(config, surface))
    except NodeCtlError as e:
        logger.debug(f"nodectl {args.command} failed", exc_info=True)
        print(f"Error: {describe(e)}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
