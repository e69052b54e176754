"""Shared fixtures: a scripted transport standing in for the BMC."""

import json
from unittest.mock import Mock

import pytest

from bmc_cli.errors import NetworkError
from bmc_cli.models import ClientConfig
from bmc_cli.transport import RedfishResponse


CONFIG_ENV_VARS = [
    "BMC_CONFIG",
    "BMC_TYPE",
    "ILO_HOST", "ILO_USERNAME", "ILO_PASSWORD", "ILO_PORT",
    "ILO_USE_HTTPS", "ILO_VERIFY_SSL", "ILO_TIMEOUT",
    "IDRAC_HOST", "IDRAC_USERNAME", "IDRAC_PASSWORD", "IDRAC_PORT",
    "IDRAC_USE_HTTPS", "IDRAC_VERIFY_SSL", "IDRAC_TIMEOUT",
    "BMC_JUMPHOST_HOST", "BMC_JUMPHOST_PORT", "BMC_JUMPHOST_USERNAME",
    "BMC_JUMPHOST_SSH_KEY", "BMC_JUMPHOST_SSH_PASSWORD",
]


def respond(status, body=None):
    """Build a RedfishResponse from a dict, raw text or nothing."""
    if body is None:
        text = ""
    elif isinstance(body, str):
        text = body
    else:
        text = json.dumps(body)
    return RedfishResponse(status_code=status, text=text)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Settings are read from the environment; start every test without them."""
    for var in CONFIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def client_config():
    return ClientConfig(host="192.168.1.100", username="admin", password="password")


@pytest.fixture
def make_transport():
    """
    Return a factory for mock transports.

    GET paths are looked up in the given mapping; values are a response
    dict (served with 200), a RedfishResponse, or an exception to raise.
    Non-GET requests are answered with the next entry of `writes`
    (default: 200 with empty body).
    """
    def factory(gets=None, writes=None):
        gets = gets or {}
        writes = list(writes or [])
        transport = Mock()

        def execute(method, path, body=None):
            if method == "GET":
                if path not in gets:
                    return respond(404, {"error": "not found"})
                result = gets[path]
            else:
                result = writes.pop(0) if writes else respond(200)
            if isinstance(result, Exception):
                raise result
            if isinstance(result, RedfishResponse):
                return result
            return respond(200, result)

        transport.execute.side_effect = execute
        return transport

    return factory


@pytest.fixture
def network_error():
    return NetworkError("error making request: connection refused")


@pytest.fixture(name="respond")
def respond_fixture():
    return respond
