#!/usr/bin/env python3
"""
Serial console hand-off
Replaces the current process with a serial terminal attached to a node
"""

import os
import shutil
import logging
from typing import List

from .errors import ConsoleError
from .node import Node

DEFAULT_CONSOLE_PROGRAM = "picocom"

logger = logging.getLogger(__name__)


def build_console_command(node: Node, program: str = DEFAULT_CONSOLE_PROGRAM) -> List[str]:
    return [program, "--baud", str(node.baud_rate), node.tty_device_path]


def launch_console(node: Node, program: str = DEFAULT_CONSOLE_PROGRAM):
    """
    Exec the serial terminal for a node

    Does not return on success.

    Args:
        node: Node whose console to open
        program: Terminal program name, resolved on PATH

    Raises:
        ConsoleError: program not found or exec failed
    """
    program_path = shutil.which(program)
    if program_path is None:
        raise ConsoleError(f"failed to find {program} program path")

    argv = build_console_command(node, program)
    logger.info(f"Opening console for node {node.number}: {' '.join(argv)}")
    try:
        os.execve(program_path, argv, os.environ)
    except OSError as e:
        raise ConsoleError(f"failed to invoke {program}") from e
