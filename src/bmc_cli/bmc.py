"""Vendor-neutral BMC contract and client factory."""

from typing import Any, List, Protocol, Union

from .errors import UnsupportedVendorError
from .idrac import IDRACClient
from .ilo import ILOClient
from .models import BMCType, ClientConfig, PowerState, SystemInfo, VirtualMediaSlot


class BMCClient(Protocol):
    """Operations every vendor client provides."""

    bmc_type: BMCType

    def get_system_info(self) -> SystemInfo: ...

    def set_power_state(self, state: PowerState) -> None: ...

    def get_virtual_media(self) -> List[VirtualMediaSlot]: ...

    def mount_virtual_media(self, image_url: str) -> None: ...

    def unmount_virtual_media(self) -> None: ...

    def close(self) -> None: ...

    def __enter__(self) -> Any: ...

    def __exit__(self, *args: Any) -> None: ...


CLIENT_CLASSES = {
    BMCType.ILO: ILOClient,
    BMCType.IDRAC: IDRACClient,
}


def parse_bmc_type(vendor: Union[str, BMCType]) -> BMCType:
    """
    Resolve a vendor tag to a BMCType.

    Raises:
        UnsupportedVendorError: If the tag is not ilo or idrac
    """
    if isinstance(vendor, BMCType):
        return vendor
    try:
        return BMCType(str(vendor).strip().lower())
    except ValueError:
        raise UnsupportedVendorError(str(vendor)) from None


def create_client(vendor: Union[str, BMCType], config: ClientConfig) -> BMCClient:
    """
    Create the client for a BMC type.

    No network activity happens here.

    Args:
        vendor: "ilo" or "idrac" (or a BMCType)
        config: Connection settings

    Returns:
        Vendor client bound to config

    Raises:
        UnsupportedVendorError: For any other vendor tag
    """
    return CLIENT_CLASSES[parse_bmc_type(vendor)](config)
