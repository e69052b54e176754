"""HTTP transport for Redfish API communication."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from .errors import DecodeError, NetworkError
from .models import ClientConfig


logger = logging.getLogger(__name__)


@dataclass
class RedfishResponse:
    """Status code and raw body of one exchange."""

    status_code: int
    text: str

    def json(self) -> Any:
        try:
            return json.loads(self.text)
        except ValueError as e:
            raise DecodeError(f"error decoding response: {e}") from e


class RedfishTransport:
    """One authenticated JSON request/response exchange per call."""

    def __init__(self, config: ClientConfig) -> None:
        """
        Initialize transport.

        Args:
            config: Connection settings; host may be localhost if tunneled,
                    in which case original_host names the BMC for the Host header
        """
        self.config = config
        self.base_url = config.base_url
        self.timeout = config.timeout
        self.session = requests.Session()
        self.session.auth = (config.username, config.password)
        self.session.verify = config.verify_ssl
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

        if config.original_host:
            self.session.headers.update({"Host": config.original_host})

        if not config.verify_ssl:
            urllib3.disable_warnings(InsecureRequestWarning)

    def execute(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
    ) -> RedfishResponse:
        """
        Send a request to the BMC.

        Args:
            method: HTTP method (GET, POST, PATCH)
            path: Resource path (e.g., '/redfish/v1/Systems/1')
            body: Optional dictionary sent as the JSON body

        Returns:
            RedfishResponse with status code and body text

        Raises:
            NetworkError: On DNS, connection or timeout failures
        """
        url = f"{self.base_url}{path}"
        logger.debug("Making %s request to %s", method, url)
        try:
            response = self.session.request(method, url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(f"error making request to {url}: {e}", cause=e) from e
        return RedfishResponse(status_code=response.status_code, text=response.text)

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self) -> "RedfishTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
