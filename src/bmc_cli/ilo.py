"""HPE iLO client for Redfish API communication."""

import logging
from typing import Any, List, Optional

from . import redfish
from .errors import NoSlotAvailableError
from .models import BMCType, ClientConfig, PowerState, SystemInfo, VirtualMediaSlot
from .transport import RedfishTransport


logger = logging.getLogger(__name__)


class ILOClient:
    """
    Client for HPE iLO via Redfish.

    iLO addresses virtual media slots by their 1-based position in the
    VirtualMedia collection, not by name.
    """

    bmc_type = BMCType.ILO

    SYSTEM_PATH = "/redfish/v1/Systems/1"
    RESET_PATH = "/redfish/v1/Systems/1/Actions/ComputerSystem.Reset"
    VIRTUAL_MEDIA_PATH = "/redfish/v1/Managers/1/VirtualMedia"

    POWER_OK = (redfish.HTTP_OK, redfish.HTTP_NO_CONTENT)
    MEDIA_OK = (redfish.HTTP_OK, redfish.HTTP_NO_CONTENT)

    def __init__(self, config: ClientConfig, transport: Optional[RedfishTransport] = None) -> None:
        self.config = config
        self.transport = transport or RedfishTransport(config)

    def slot_path(self, index: int, slot: VirtualMediaSlot) -> str:
        return f"{self.VIRTUAL_MEDIA_PATH}/{index + 1}"

    def get_system_info(self) -> SystemInfo:
        """Retrieve power state and health of the server."""
        return redfish.fetch_system_info(self.transport, self.SYSTEM_PATH)

    def set_power_state(self, state: PowerState) -> None:
        redfish.reset_system(self.transport, self.RESET_PATH, state, self.POWER_OK)

    def get_virtual_media(self) -> List[VirtualMediaSlot]:
        """List virtual media slots; unreadable slots are left out."""
        return redfish.list_virtual_media(self.transport, self.VIRTUAL_MEDIA_PATH)

    def mount_virtual_media(self, image_url: str) -> None:
        """
        Mount an image on the first CD/DVD slot.

        Args:
            image_url: URL of the image, reachable from the BMC

        Raises:
            NoSlotAvailableError: If no slot accepts CD or DVD media
            HTTPStatusError: If the BMC rejects the mount
        """
        if not image_url:
            raise ValueError("image URL must not be empty")

        found = redfish.find_slot(self.get_virtual_media(), VirtualMediaSlot.supports_optical)
        if found is None:
            raise NoSlotAvailableError("no CD/DVD virtual media slot found")

        index, slot = found
        path = self.slot_path(index, slot)
        logger.info("Mounting %s on %s", image_url, path)
        redfish.insert_media(self.transport, path, image_url, self.MEDIA_OK)

    def unmount_virtual_media(self) -> None:
        """Eject media from every inserted slot; per-slot failures are only logged."""
        slots = self.get_virtual_media()
        redfish.eject_inserted(self.transport, slots, self.slot_path, self.MEDIA_OK)

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "ILOClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
