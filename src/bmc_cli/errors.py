"""Exceptions raised by BMC clients and the configuration layer."""

from typing import Optional


class BMCError(Exception):
    """Base exception for BMC operations."""


class NetworkError(BMCError):
    """Transport-level failure (DNS, connection refused, timeout)."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class HTTPStatusError(BMCError):
    """Unexpected HTTP status from the BMC."""

    def __init__(self, message: str, status_code: int, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class DecodeError(BMCError):
    """Response body was not the JSON shape we expected."""


class NoSlotAvailableError(BMCError):
    """No CD/DVD capable virtual media slot was found."""


class UnsupportedVendorError(BMCError):
    """Factory was given a BMC type it does not know."""

    def __init__(self, vendor: str) -> None:
        super().__init__(f"unsupported BMC type: {vendor} (supported types: ilo, idrac)")
        self.vendor = vendor


class ConfigError(BMCError):
    """Configuration could not be loaded or is incomplete."""
