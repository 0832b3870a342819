"""Exceptions raised by the ACP scheduling package."""


class AcpError(Exception):
    """Base class for all errors reported by the package."""


class InstanceIOError(AcpError, OSError):
    """Raised when an instance file is missing or cannot be read."""


class MalformedInputError(AcpError, ValueError):
    """Raised when an instance file does not follow the ACP line format."""


class ScheduleValidationError(AcpError, ValueError):
    """Raised when an item array violates due dates, FIFO order or shape."""


__all__ = [
    "AcpError",
    "InstanceIOError",
    "MalformedInputError",
    "ScheduleValidationError",
]
