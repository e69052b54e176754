"""Redfish resource shapes and client configuration."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .errors import DecodeError


OPTICAL_MEDIA_TYPES = ("CD", "DVD")


class BMCType(str, Enum):
    """Supported BMC vendors."""

    ILO = "ilo"
    IDRAC = "idrac"


class PowerState(str, Enum):
    """Reset types accepted by ComputerSystem.Reset."""

    ON = "On"
    FORCE_OFF = "ForceOff"


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for a single BMC."""

    host: str
    username: str
    password: str
    port: int = 443
    use_https: bool = True
    timeout: float = 30.0
    verify_ssl: bool = False
    original_host: Optional[str] = None

    @property
    def base_url(self) -> str:
        scheme = "https" if self.use_https else "http"
        return f"{scheme}://{self.host}:{self.port}"


def _field(data: Dict[str, Any], key: str, kind: type, default: Any) -> Any:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, kind):
        raise DecodeError(
            f"error decoding response: {key} should be {kind.__name__}, "
            f"got {type(value).__name__}"
        )
    return value


def _expect_object(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(
            f"error decoding response: expected a JSON object, got {type(data).__name__}"
        )
    return data


@dataclass
class SystemInfo:
    """Power and health summary of a ComputerSystem resource."""

    power_state: str = ""
    health: str = ""
    state: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "SystemInfo":
        data = _expect_object(data)
        status = _field(data, "Status", dict, {})
        return cls(
            power_state=_field(data, "PowerState", str, ""),
            health=_field(status, "Health", str, ""),
            state=_field(status, "State", str, ""),
        )

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class VirtualMediaSlot:
    """One VirtualMedia member resource."""

    name: str = ""
    media_types: List[str] = field(default_factory=list)
    connected: bool = False
    inserted: bool = False
    image: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "VirtualMediaSlot":
        data = _expect_object(data)
        media_types = _field(data, "MediaTypes", list, [])
        if not all(isinstance(mt, str) for mt in media_types):
            raise DecodeError("error decoding response: MediaTypes should be a list of strings")
        return cls(
            name=_field(data, "Name", str, ""),
            media_types=list(media_types),
            connected=_field(data, "Connected", bool, False),
            inserted=_field(data, "Inserted", bool, False),
            image=_field(data, "Image", str, ""),
        )

    def supports_optical(self) -> bool:
        """True if the slot accepts CD or DVD images."""
        return any(mt in OPTICAL_MEDIA_TYPES for mt in self.media_types)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PowerRequest:
    reset_type: PowerState

    def to_dict(self) -> Dict[str, str]:
        return {"ResetType": PowerState(self.reset_type).value}


@dataclass
class VirtualMediaRequest:
    """PATCH body for a VirtualMedia slot; image is omitted on eject."""

    inserted: bool
    image: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        if self.image is not None:
            body["Image"] = self.image
        body["Inserted"] = self.inserted
        return body


def parse_member_refs(data: Any) -> List[str]:
    """
    Extract member paths from a Redfish collection.

    Args:
        data: Decoded collection body, e.g. {"Members": [{"@odata.id": "..."}]}

    Returns:
        List of resource paths in collection order

    Raises:
        DecodeError: If the envelope is not a collection
    """
    data = _expect_object(data)
    members = _field(data, "Members", list, [])
    paths = []
    for member in members:
        member = _expect_object(member)
        paths.append(_field(member, "@odata.id", str, ""))
    return paths
