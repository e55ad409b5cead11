#!/usr/bin/env python3
"""
Exception hierarchy for nodectl
Every failure is wrapped with the pin, node or operation it concerns and
re-raised with exception chaining so the cause stays visible
"""

from typing import Optional


class NodeCtlError(Exception):
    """Base class for all nodectl errors"""
    pass


class IoError(NodeCtlError):
    """Read, write, stat or listing failure on a control entry"""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class WriteError(IoError):
    """Exception raised when a GPIO output level cannot be written"""

    def __init__(self, message: str, pin: int, level: str, path: Optional[str] = None):
        super().__init__(message, path)
        self.pin = pin
        self.level = level


class ParseError(NodeCtlError):
    """Control entry contents are not in the expected textual format"""
    pass


class InvariantViolation(NodeCtlError):
    """Parsed value lies outside the documented legal set"""
    pass


class SetupError(NodeCtlError):
    """Pin export, direction configuration or node construction failed"""

    def __init__(self, message: str, pin: Optional[int] = None, node: Optional[int] = None):
        super().__init__(message)
        self.pin = pin
        self.node = node


class PowerError(NodeCtlError):
    """A power sequence step failed"""

    def __init__(self, message: str, node: int, operation: str):
        super().__init__(message)
        self.node = node
        self.operation = operation


class BadParameter(NodeCtlError):
    """Caller supplied identifier is out of the valid range"""
    pass


class ConfigError(NodeCtlError):
    """Configuration file unreadable, malformed or invalid"""
    pass


class ConsoleError(NodeCtlError):
    """Serial terminal program could not be started"""
    pass


class UnsupportedOperation(NodeCtlError):
    pass


def describe(error: BaseException) -> str:
    """
    Render an exception and its chained causes on one line

    Args:
        error: Outermost exception

    Returns:
        Messages joined outermost first, e.g. "a: b: c"
    """
    parts = []
    current: Optional[BaseException] = error
    while current is not None:
        message = str(current) or current.__class__.__name__
        parts.append(message)
        current = current.__cause__
    return ": ".join(parts)
