"""Dell iDRAC client for Redfish API communication."""

import logging
from typing import Any, List, Optional

from . import redfish
from .errors import BMCError, NoSlotAvailableError
from .models import (
    OPTICAL_MEDIA_TYPES,
    BMCType,
    ClientConfig,
    PowerState,
    SystemInfo,
    VirtualMediaSlot,
)
from .transport import RedfishTransport


logger = logging.getLogger(__name__)


def is_optical_slot(slot: VirtualMediaSlot) -> bool:
    """iDRAC slots must accept CD/DVD media and carry CD or DVD in their name."""
    return slot.supports_optical() and any(mt in slot.name for mt in OPTICAL_MEDIA_TYPES)


class IDRACClient:
    """
    Client for Dell iDRAC via Redfish.

    Slots are addressed by name. Power and media actions may answer
    202 Accepted since iDRAC runs them as jobs.
    """

    bmc_type = BMCType.IDRAC

    SYSTEM_PATH = "/redfish/v1/Systems/System.Embedded.1"
    RESET_PATH = "/redfish/v1/Systems/System.Embedded.1/Actions/ComputerSystem.Reset"
    VIRTUAL_MEDIA_PATH = "/redfish/v1/Managers/iDRAC.Embedded.1/VirtualMedia"

    POWER_OK = (redfish.HTTP_OK, redfish.HTTP_ACCEPTED, redfish.HTTP_NO_CONTENT)
    MEDIA_OK = (redfish.HTTP_OK, redfish.HTTP_ACCEPTED, redfish.HTTP_NO_CONTENT)

    def __init__(self, config: ClientConfig, transport: Optional[RedfishTransport] = None) -> None:
        self.config = config
        self.transport = transport or RedfishTransport(config)

    def slot_path(self, index: int, slot: VirtualMediaSlot) -> str:
        return f"{self.VIRTUAL_MEDIA_PATH}/{slot.name}"

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

        Whatever is in the slot is ejected first, as some firmware refuses
        to insert over mounted media. The eject result is ignored.

        Args:
            image_url: URL of the image, reachable from the BMC

        Raises:
            NoSlotAvailableError: If no CD/DVD slot is found
            HTTPStatusError: If the BMC rejects the mount
        """
        if not image_url:
            raise ValueError("image URL must not be empty")

        found = redfish.find_slot(self.get_virtual_media(), is_optical_slot)
        if found is None:
            raise NoSlotAvailableError("no CD/DVD virtual media slot found")

        index, slot = found
        path = self.slot_path(index, slot)
        try:
            redfish.eject_media(self.transport, path)
        except BMCError as e:
            logger.debug("Eject before mount failed at %s: %s", path, e)

        logger.info("Mounting %s on %s", image_url, path)
        redfish.insert_media(self.transport, path, image_url, self.MEDIA_OK)

    def unmount_virtual_media(self) -> None:
        """Eject media from every inserted slot; per-slot failures are only logged."""
        slots = self.get_virtual_media()
        redfish.eject_inserted(self.transport, slots, self.slot_path, self.MEDIA_OK)

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "IDRACClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
