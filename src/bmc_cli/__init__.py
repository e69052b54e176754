"""BMC CLI - manage HPE iLO and Dell iDRAC power and virtual media via Redfish."""

__version__ = "0.1.0"

from .bmc import BMCClient, create_client
from .errors import (
    BMCError,
    ConfigError,
    DecodeError,
    HTTPStatusError,
    NetworkError,
    NoSlotAvailableError,
    UnsupportedVendorError,
)
from .models import BMCType, ClientConfig, PowerState, SystemInfo, VirtualMediaSlot

__all__ = [
    "BMCClient",
    "BMCError",
    "BMCType",
    "ClientConfig",
    "ConfigError",
    "DecodeError",
    "HTTPStatusError",
    "NetworkError",
    "NoSlotAvailableError",
    "PowerState",
    "SystemInfo",
    "UnsupportedVendorError",
    "VirtualMediaSlot",
    "create_client",
]
