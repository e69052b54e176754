"""Configuration loading: YAML file, environment variables and defaults."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .bmc import parse_bmc_type
from .errors import ConfigError, UnsupportedVendorError
from .models import BMCType, ClientConfig


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config.yaml"

VENDOR_LABELS = {
    BMCType.ILO: "iLO",
    BMCType.IDRAC: "iDRAC",
}

SAMPLE_CONFIG = """\
# BMC CLI Configuration File
# Specify the BMC type: 'ilo' for HPE iLO or 'idrac' for DELL iDRAC
bmc_type: "ilo"

# HPE iLO Configuration
ilo:
  host: "192.168.1.100"          # iLO IP address or hostname
  username: "admin"              # iLO username
  password: "password"           # iLO password
  port: 443                      # iLO port (default: 443)
  use_https: true                # Use HTTPS (default: true)
  verify_ssl: false              # Verify TLS certificates (default: false)

# DELL iDRAC Configuration
idrac:
  host: "192.168.1.101"          # iDRAC IP address or hostname
  username: "root"               # iDRAC username
  password: "calvin"             # iDRAC password
  port: 443                      # iDRAC port (default: 443)
  use_https: true                # Use HTTPS (default: true)
  verify_ssl: false              # Verify TLS certificates (default: false)

# Optional SSH jumphost for BMCs on an isolated network
# jumphost:
#   host: "bastion.example.com"
#   port: 22
#   username: "admin"
#   ssh_key: "~/.ssh/id_rsa"
"""


class EnvFirstSettings(BaseSettings):
    """
    Settings whose environment variables win over keyword arguments.

    Keyword arguments carry the YAML file values, so the environment
    overrides the file and the file overrides field defaults.
    """

    model_config = SettingsConfigDict(extra="ignore", env_ignore_empty=True)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return env_settings, init_settings


class ConnectionSettings(BaseModel):
    """Connection settings for one vendor section."""

    model_config = ConfigDict(extra="ignore")

    host: str = ""
    username: str = ""
    password: str = ""
    port: int = Field(443, ge=1, le=65535)
    use_https: bool = True
    verify_ssl: bool = False
    timeout: float = Field(30.0, gt=0)

    @field_validator("port", "timeout", mode="before")
    @classmethod
    def reject_bool(cls, value: Any) -> Any:
        # YAML `port: true` would otherwise be read as 1
        if isinstance(value, bool):
            raise ValueError("must be a number, not a boolean")
        return value

    def client_config(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        original_host: Optional[str] = None,
    ) -> ClientConfig:
        """Build a ClientConfig, optionally redirected to a tunnel endpoint."""
        return ClientConfig(
            host=host or self.host,
            username=self.username,
            password=self.password,
            port=port or self.port,
            use_https=self.use_https,
            timeout=self.timeout,
            verify_ssl=self.verify_ssl,
            original_host=original_host,
        )


class ILOSettings(ConnectionSettings, EnvFirstSettings):
    """The `ilo` section; ILO_HOST, ILO_PORT, ... override it."""

    model_config = SettingsConfigDict(env_prefix="ILO_")


class IDRACSettings(ConnectionSettings, EnvFirstSettings):
    """The `idrac` section; IDRAC_HOST, IDRAC_PORT, ... override it."""

    model_config = SettingsConfigDict(env_prefix="IDRAC_")


class JumphostSettings(EnvFirstSettings):
    """The optional `jumphost` section; BMC_JUMPHOST_HOST, ... override it."""

    model_config = SettingsConfigDict(env_prefix="BMC_JUMPHOST_")

    host: Optional[str] = None
    port: int = Field(22, ge=1, le=65535)
    username: Optional[str] = None
    ssh_key: Optional[str] = None
    ssh_password: Optional[str] = None

    @field_validator("port", mode="before")
    @classmethod
    def reject_bool(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("must be a number, not a boolean")
        return value

    @field_validator("ssh_key")
    @classmethod
    def expand_key_path(cls, value: Optional[str]) -> Optional[str]:
        return os.path.expanduser(value) if value else None


class BMCSelection(EnvFirstSettings):
    """Top-level `bmc_type`; BMC_TYPE overrides it."""

    model_config = SettingsConfigDict(env_prefix="BMC_")

    type: str = BMCType.ILO.value

    @field_validator("type")
    @classmethod
    def normalize_type(cls, value: str) -> str:
        return value.strip().lower()


class Config(BaseModel):
    """Complete CLI configuration."""

    bmc_type: str = BMCType.ILO.value
    ilo: ConnectionSettings = Field(default_factory=ConnectionSettings)
    idrac: ConnectionSettings = Field(default_factory=ConnectionSettings)
    jumphost: JumphostSettings = Field(default_factory=JumphostSettings)
    source: Optional[str] = None

    @property
    def active(self) -> ConnectionSettings:
        """Settings for the configured BMC type."""
        if parse_bmc_type(self.bmc_type) is BMCType.IDRAC:
            return self.idrac
        return self.ilo


def _read_config_file(path: Optional[str]) -> Dict[str, Any]:
    """
    Read the YAML config file.

    An explicit path must exist; the default ./config.yaml is optional.
    """
    explicit = path is not None
    config_path = Path(path) if explicit else Path(DEFAULT_CONFIG_FILE)

    if not config_path.exists():
        if explicit:
            raise ConfigError(f"config file not found: {config_path}")
        logger.debug("Config file not found, using environment variables and defaults")
        return {}

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"error reading config file {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {config_path} must contain a mapping")

    logger.debug("Using config file: %s", config_path)
    return data


def _section(data: Mapping[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"config section '{name}' must be a mapping")
    return value


def load_config(path: Optional[str] = None) -> Config:
    """
    Load configuration from file and environment.

    Environment variables override file values, which override defaults.

    Args:
        path: Explicit config file path (default: ./config.yaml if present)

    Returns:
        Config (not yet validated)

    Raises:
        ConfigError: If the file is missing, unreadable or has invalid values
    """
    file_data = _read_config_file(path)
    selection = {"type": file_data["bmc_type"]} if file_data.get("bmc_type") else {}

    try:
        return Config(
            bmc_type=BMCSelection(**selection).type,
            ilo=ILOSettings(**_section(file_data, "ilo")),
            idrac=IDRACSettings(**_section(file_data, "idrac")),
            jumphost=JumphostSettings(**_section(file_data, "jumphost")),
            source=str(path or DEFAULT_CONFIG_FILE) if file_data else None,
        )
    except ValidationError as e:
        raise ConfigError(f"invalid configuration: {e}") from e


def validate_config(config: Config) -> None:
    """
    Check that the active BMC section is usable.

    Raises:
        ConfigError: On unknown BMC type or missing host/credentials
    """
    try:
        bmc_type = parse_bmc_type(config.bmc_type)
    except UnsupportedVendorError as e:
        raise ConfigError(str(e)) from None

    label = VENDOR_LABELS[bmc_type]
    prefix = bmc_type.value.upper()
    settings = config.active
    for key in ("host", "username", "password"):
        if not getattr(settings, key):
            raise ConfigError(
                f"{label} {key} is required "
                f"(set {prefix}_{key.upper()} environment variable or {key} in config file)"
            )


def generate_sample_config(path: str = DEFAULT_CONFIG_FILE) -> Path:
    """
    Write a sample configuration file.

    Raises:
        ConfigError: If the file already exists or cannot be written
    """
    config_path = Path(path)
    if config_path.exists():
        raise ConfigError(f"config file already exists at {config_path}")
    try:
        config_path.write_text(SAMPLE_CONFIG)
    except OSError as e:
        raise ConfigError(f"error creating sample config: {e}") from e
    return config_path


def describe_config(config: Config) -> List[str]:
    """Display lines for the active BMC section, password masked."""
    settings = config.active
    password = "***configured***" if settings.password else "***not configured***"
    lines = [
        f"BMC Type: {config.bmc_type}",
        f"Host: {settings.host}",
        f"Username: {settings.username}",
        f"Port: {settings.port}",
        f"Use HTTPS: {str(settings.use_https).lower()}",
        f"Verify SSL: {str(settings.verify_ssl).lower()}",
        f"Password: {password}",
    ]
    if config.jumphost.host:
        lines.append(f"Jumphost: {config.jumphost.host}:{config.jumphost.port}")
    if config.source:
        lines.append(f"Config File: {config.source}")
    return lines
