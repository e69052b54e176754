"""Redfish operations shared by the vendor clients."""

import logging
from typing import Callable, Iterable, List, Optional, Tuple

from .errors import BMCError, HTTPStatusError
from .models import (
    PowerRequest,
    PowerState,
    SystemInfo,
    VirtualMediaRequest,
    VirtualMediaSlot,
    parse_member_refs,
)
from .transport import RedfishResponse, RedfishTransport


logger = logging.getLogger(__name__)

HTTP_OK = 200
HTTP_ACCEPTED = 202
HTTP_NO_CONTENT = 204


def check_status(
    response: RedfishResponse,
    accepted: Iterable[int],
    action: str,
    include_body: bool = True,
) -> None:
    """Raise HTTPStatusError unless the response status is in accepted."""
    if response.status_code in accepted:
        return
    message = f"{action} failed with status {response.status_code}"
    if include_body:
        message = f"{message}: {response.text}"
    raise HTTPStatusError(message, status_code=response.status_code, body=response.text)


def get_resource(transport: RedfishTransport, path: str) -> object:
    """GET a resource and return its decoded JSON body."""
    response = transport.execute("GET", path)
    check_status(response, (HTTP_OK,), "API request", include_body=False)
    return response.json()


def fetch_system_info(transport: RedfishTransport, path: str) -> SystemInfo:
    return SystemInfo.from_dict(get_resource(transport, path))


def reset_system(
    transport: RedfishTransport,
    action_path: str,
    state: PowerState,
    accepted: Iterable[int],
) -> None:
    """POST a ComputerSystem.Reset action."""
    request = PowerRequest(reset_type=state)
    response = transport.execute("POST", action_path, request.to_dict())
    check_status(response, accepted, "power operation")


def list_virtual_media(transport: RedfishTransport, collection_path: str) -> List[VirtualMediaSlot]:
    """
    Enumerate a VirtualMedia collection.

    Members that cannot be fetched or decoded are skipped, so one broken
    slot does not hide the others.

    Args:
        transport: Transport bound to the BMC
        collection_path: Path of the VirtualMedia collection

    Returns:
        Slots that were read successfully, in collection order

    Raises:
        NetworkError, HTTPStatusError, DecodeError: If the collection itself fails
    """
    slots = []
    for member_path in parse_member_refs(get_resource(transport, collection_path)):
        try:
            slots.append(VirtualMediaSlot.from_dict(get_resource(transport, member_path)))
        except BMCError as e:
            logger.debug("Skipping virtual media member %s: %s", member_path, e)
    return slots


def find_slot(
    slots: List[VirtualMediaSlot],
    predicate: Callable[[VirtualMediaSlot], bool],
) -> Optional[Tuple[int, VirtualMediaSlot]]:
    """Return (index, slot) of the first slot matching predicate."""
    for index, slot in enumerate(slots):
        if predicate(slot):
            return index, slot
    return None


def insert_media(
    transport: RedfishTransport,
    slot_path: str,
    image_url: str,
    accepted: Iterable[int],
) -> None:
    request = VirtualMediaRequest(inserted=True, image=image_url)
    response = transport.execute("PATCH", slot_path, request.to_dict())
    check_status(response, accepted, "virtual media mount")


def eject_media(transport: RedfishTransport, slot_path: str) -> RedfishResponse:
    """PATCH Inserted=false; the caller decides what the result means."""
    return transport.execute("PATCH", slot_path, VirtualMediaRequest(inserted=False).to_dict())


def eject_inserted(
    transport: RedfishTransport,
    slots: List[VirtualMediaSlot],
    slot_path: Callable[[int, VirtualMediaSlot], str],
    accepted: Iterable[int],
) -> None:
    """
    Eject every inserted slot, best effort.

    A slot that fails to eject is logged at WARNING and skipped; the
    remaining slots are still attempted.
    """
    for index, slot in enumerate(slots):
        if not slot.inserted:
            continue
        path = slot_path(index, slot)
        try:
            response = eject_media(transport, path)
            check_status(response, accepted, "virtual media unmount")
        except BMCError as e:
            logger.warning("Failed to unmount virtual media at %s: %s", path, e)
