"""Tests for IDRACClient."""

import logging

import pytest

from bmc_cli.errors import HTTPStatusError, NoSlotAvailableError
from bmc_cli.idrac import IDRACClient, is_optical_slot
from bmc_cli.models import PowerState, VirtualMediaSlot


VM_PATH = "/redfish/v1/Managers/iDRAC.Embedded.1/VirtualMedia"
IMAGE = "http://192.168.1.10/images/ubuntu-22.04.iso"


def slot(name, media_types, inserted=False, image=None):
    return {
        "Name": name,
        "MediaTypes": media_types,
        "Connected": inserted,
        "Inserted": inserted,
        "Image": image,
    }


def media(*members):
    """Collection plus member resources keyed by their iDRAC paths."""
    gets = {VM_PATH: {"Members": [{"@odata.id": f"{VM_PATH}/{m['Name']}"} for m in members]}}
    for m in members:
        gets[f"{VM_PATH}/{m['Name']}"] = m
    return gets


def write_calls(transport):
    return [c for c in transport.execute.call_args_list if c.args[0] != "GET"]


def test_get_system_info(client_config, make_transport):
    transport = make_transport(gets={
        "/redfish/v1/Systems/System.Embedded.1": {
            "PowerState": "Off",
            "Status": {"Health": "Warning", "State": "Enabled"},
        },
    })
    client = IDRACClient(client_config, transport=transport)

    info = client.get_system_info()

    assert info.power_state == "Off"
    assert info.health == "Warning"
    assert info.state == "Enabled"


@pytest.mark.parametrize("status", [200, 202, 204])
def test_set_power_state_accepts_async(client_config, make_transport, respond, status):
    """Test 202 Accepted counts as success on iDRAC."""
    transport = make_transport(writes=[respond(status)])
    client = IDRACClient(client_config, transport=transport)

    client.set_power_state(PowerState.ON)

    transport.execute.assert_called_once_with(
        "POST",
        "/redfish/v1/Systems/System.Embedded.1/Actions/ComputerSystem.Reset",
        {"ResetType": "On"},
    )


def test_set_power_state_failure(client_config, make_transport, respond):
    transport = make_transport(writes=[respond(409, "Server is already powered ON.")])
    client = IDRACClient(client_config, transport=transport)

    with pytest.raises(HTTPStatusError) as excinfo:
        client.set_power_state(PowerState.ON)

    assert excinfo.value.status_code == 409
    assert "already powered ON" in excinfo.value.body


def test_is_optical_slot_requires_name_match():
    assert is_optical_slot(VirtualMediaSlot(name="CD", media_types=["CD", "DVD"]))
    assert is_optical_slot(VirtualMediaSlot(name="Virtual DVD", media_types=["DVD"]))
    assert not is_optical_slot(VirtualMediaSlot(name="RemovableDisk", media_types=["CD"]))
    assert not is_optical_slot(VirtualMediaSlot(name="CD", media_types=["USBStick"]))


def test_mount_ejects_then_inserts(client_config, make_transport):
    """Test mount issues eject and insert PATCHes in that order, by name."""
    transport = make_transport(gets=media(
        slot("RemovableDisk", ["USBStick"]),
        slot("CD", ["CD", "DVD"]),
    ))
    client = IDRACClient(client_config, transport=transport)

    client.mount_virtual_media(IMAGE)

    writes = write_calls(transport)
    assert [c.args for c in writes] == [
        ("PATCH", f"{VM_PATH}/CD", {"Inserted": False}),
        ("PATCH", f"{VM_PATH}/CD", {"Image": IMAGE, "Inserted": True}),
    ]


def test_mount_ignores_eject_failure(client_config, make_transport, respond, network_error):
    transport = make_transport(
        gets=media(slot("CD", ["CD"])),
        writes=[network_error, respond(202)],
    )
    client = IDRACClient(client_config, transport=transport)

    client.mount_virtual_media(IMAGE)

    assert len(write_calls(transport)) == 2


def test_mount_ignores_eject_status(client_config, make_transport, respond):
    transport = make_transport(
        gets=media(slot("CD", ["CD"])),
        writes=[respond(400, "No media inserted"), respond(204)],
    )
    client = IDRACClient(client_config, transport=transport)

    client.mount_virtual_media(IMAGE)


def test_mount_failure_from_insert(client_config, make_transport, respond):
    transport = make_transport(
        gets=media(slot("CD", ["CD"])),
        writes=[respond(200), respond(500, "Unable to mount")],
    )
    client = IDRACClient(client_config, transport=transport)

    with pytest.raises(HTTPStatusError) as excinfo:
        client.mount_virtual_media(IMAGE)

    assert excinfo.value.status_code == 500
    assert "Unable to mount" in str(excinfo.value)


def test_mount_no_slot_when_name_lacks_cd(client_config, make_transport):
    """Test media type alone is not enough on iDRAC."""
    transport = make_transport(gets=media(slot("RemovableDisk", ["CD", "USBStick"])))
    client = IDRACClient(client_config, transport=transport)

    with pytest.raises(NoSlotAvailableError):
        client.mount_virtual_media(IMAGE)

    assert write_calls(transport) == []


def test_unmount_addresses_slot_by_name(client_config, make_transport, respond):
    transport = make_transport(
        gets=media(
            slot("RemovableDisk", ["USBStick"]),
            slot("CD", ["CD", "DVD"], inserted=True, image=IMAGE),
            slot("Floppy", ["Floppy"]),
        ),
        writes=[respond(500)],
    )
    client = IDRACClient(client_config, transport=transport)

    client.unmount_virtual_media()

    writes = write_calls(transport)
    assert len(writes) == 1
    assert writes[0].args == ("PATCH", f"{VM_PATH}/CD", {"Inserted": False})


def test_unmount_failure_logged_as_warning(client_config, make_transport, respond, caplog):
    transport = make_transport(
        gets=media(
            slot("RemovableDisk", ["USBStick"], inserted=True),
            slot("CD", ["CD", "DVD"], inserted=True, image=IMAGE),
        ),
        writes=[respond(202), respond(400, "bad request")],
    )
    client = IDRACClient(client_config, transport=transport)

    with caplog.at_level(logging.WARNING, logger="bmc_cli.redfish"):
        client.unmount_virtual_media()

    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert warnings == [
        f"Failed to unmount virtual media at {VM_PATH}/CD: "
        "virtual media unmount failed with status 400: bad request"
    ]


def test_unmount_nothing_inserted(client_config, make_transport):
    transport = make_transport(gets=media(slot("CD", ["CD"])))
    client = IDRACClient(client_config, transport=transport)

    client.unmount_virtual_media()

    assert write_calls(transport) == []
