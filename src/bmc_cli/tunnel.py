"""Reach a BMC on an isolated network through an SSH jumphost."""

import logging
from typing import Any, Dict, Optional

from sshtunnel import BaseSSHTunnelForwarderError, SSHTunnelForwarder

from .config import ConnectionSettings, JumphostSettings
from .errors import NetworkError
from .models import ClientConfig


logger = logging.getLogger(__name__)

LOCAL_HOST = "127.0.0.1"


class SSHTunnel:
    """
    Port forward from localhost to a BMC, hopping through a jumphost.

    Used as a context manager it yields the ClientConfig a vendor client
    should use: pointed at the local end of the tunnel, with the real BMC
    host kept for the HTTP Host header.
    """

    def __init__(self, jumphost: JumphostSettings, target: ConnectionSettings) -> None:
        self.jumphost = jumphost
        self.target = target
        self._forwarder: Optional[SSHTunnelForwarder] = None

    @property
    def route(self) -> str:
        return f"{self.jumphost.host}:{self.jumphost.port} -> {self.target.host}:{self.target.port}"

    def _auth_kwargs(self) -> Dict[str, Any]:
        # Neither set: paramiko tries the SSH agent and ~/.ssh/id_*
        if self.jumphost.ssh_key:
            return {"ssh_pkey": self.jumphost.ssh_key}
        if self.jumphost.ssh_password:
            return {"ssh_password": self.jumphost.ssh_password}
        return {}

    def start(self) -> ClientConfig:
        """
        Open the tunnel.

        Returns:
            ClientConfig addressed to the local tunnel port

        Raises:
            NetworkError: If the jumphost session cannot be established
        """
        self._forwarder = SSHTunnelForwarder(
            ssh_address_or_host=(self.jumphost.host, self.jumphost.port),
            ssh_username=self.jumphost.username,
            remote_bind_address=(self.target.host, self.target.port),
            local_bind_address=(LOCAL_HOST, 0),
            **self._auth_kwargs(),
        )
        try:
            self._forwarder.start()
        except BaseSSHTunnelForwarderError as e:
            self._forwarder = None
            raise NetworkError(f"SSH tunnel {self.route} failed: {e}", cause=e) from e

        local_port = self._forwarder.local_bind_port
        logger.info("SSH tunnel established: localhost:%s -> %s", local_port, self.route)
        return self.target.client_config(
            host=LOCAL_HOST,
            port=local_port,
            original_host=self.target.host,
        )

    def stop(self) -> None:
        if self._forwarder is not None:
            self._forwarder.stop()
            self._forwarder = None
            logger.info("SSH tunnel closed")

    def __enter__(self) -> ClientConfig:
        return self.start()

    def __exit__(self, *args) -> None:
        self.stop()
