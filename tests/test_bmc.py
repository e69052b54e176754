"""Tests for the client factory."""

import pytest

from bmc_cli.bmc import create_client, parse_bmc_type
from bmc_cli.errors import UnsupportedVendorError
from bmc_cli.idrac import IDRACClient
from bmc_cli.ilo import ILOClient
from bmc_cli.models import BMCType


@pytest.mark.parametrize("vendor,expected", [
    ("ilo", ILOClient),
    ("idrac", IDRACClient),
    ("iDRAC", IDRACClient),
    (BMCType.ILO, ILOClient),
])
def test_create_client(client_config, vendor, expected):
    client = create_client(vendor, client_config)

    assert isinstance(client, expected)
    assert client.config is client_config
    assert client.transport.base_url == "https://192.168.1.100:443"


@pytest.mark.parametrize("vendor", ["supermicro", "", "ilo5"])
def test_create_client_unsupported(client_config, vendor):
    with pytest.raises(UnsupportedVendorError) as excinfo:
        create_client(vendor, client_config)

    assert "supported types: ilo, idrac" in str(excinfo.value)


def test_parse_bmc_type():
    assert parse_bmc_type(" ILO ") is BMCType.ILO
    assert parse_bmc_type(BMCType.IDRAC) is BMCType.IDRAC


def test_create_client_makes_no_requests(client_config, monkeypatch):
    calls = []
    monkeypatch.setattr("requests.Session.request", lambda *a, **kw: calls.append(a))

    create_client("idrac", client_config)

    assert calls == []
