"""Custom exceptions used throughout the dspsim package."""

from typing import Any, Optional


class SimulatorError(Exception):
    """Base exception for all simulator errors.

    All dspsim-specific exceptions inherit from this class, so callers can
    catch every simulator failure with a single except clause.
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Additional context about the error
        """

        super().__init__(message)
        self.details = details or {}


class ConfigurationError(SimulatorError):
    """Raised when a device configuration or register table is invalid.

    This includes:
    - Unparseable YAML
    - Missing required keys
    - Overlapping memory windows or duplicate register addresses
    """

    def __init__(
        self,
        config_key: Optional[str] = None,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        """Initialize configuration error.

        Args:
            config_key: The configuration key that caused the error
            message: Description of what's wrong. If omitted, config_key is
                treated as the message and the key defaults to "configuration".
            details: Additional context
        """
        if message is None:
            message = config_key or "Invalid configuration"
            config_key = "configuration"
        if config_key is None:
            config_key = "configuration"

        full_message = f"Configuration error for '{config_key}': {message}"
        super().__init__(message=full_message, details=details)
        self.config_key = config_key


class MemoryException(SimulatorError):
    """Base exception for memory-related programming errors."""

    def __init__(
        self,
        message: str,
        address: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        if address is not None:
            details = details or {}
            details["address"] = f"0x{address:04X}"

        super().__init__(message=message, details=details)
        self.address = address


class MemoryBoundsError(MemoryException):
    """Raised when a direct region access falls outside the region.

    Protocol traffic never produces this: unmapped bus addresses are logged
    and ignored. It only guards callers indexing a region directly.
    """

    def __init__(
        self,
        address: int,
        size: int,
        region: str,
        details: Optional[dict[str, Any]] = None,
    ):
        message = (
            f"Out-of-bounds access in {region}: "
            f"address=0x{address:04X}, size={size}"
        )
        super().__init__(message=message, address=address, details=details)
        self.size = size
        self.region = region


class DumpError(SimulatorError):
    """Raised when writing a memory or register dump fails.

    Recoverable: the device state is untouched, only the export failed.
    """

    def __init__(
        self,
        path: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ):
        full_message = f"Exception while writing file {path}: {message}"
        super().__init__(message=full_message, details=details)
        self.path = path
