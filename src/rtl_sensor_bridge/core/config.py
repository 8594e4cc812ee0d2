"""Configuration constants and platform configuration models."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from rtl_sensor_bridge.core.exceptions import ConfigError

if TYPE_CHECKING:
    from rtl_sensor_bridge.decoders.rtl433.models import DeviceIdentity

# =============================================================================
# Decoder Process
# =============================================================================
DEFAULT_RTL433_PATH: str = "/usr/local/bin/rtl_433"
# Quiet, one JSON object per line, SI units (temperature_C)
RTL433_ARGS: tuple[str, ...] = ("-q", "-F", "json", "-C", "si")
STOP_TIMEOUT_SECONDS: float = 5.0

# =============================================================================
# Stream Decoding
# =============================================================================
DEFAULT_CHUNK_SIZE: int = 4096
MAX_LINE_BYTES: int = 1024 * 1024  # 1 MiB per line

# =============================================================================
# Host Registration
# =============================================================================
PLUGIN_NAME: str = "rtl"
PLATFORM_NAME: str = "RTL"

# =============================================================================
# Accessory Defaults
# =============================================================================
DEFAULT_HUMIDITY_LABEL: str = "humidity"
DEFAULT_TEMPERATURE_LABEL: str = "temperature"
MANUFACTURER: str = "rtl_433"
FIRMWARE_REVISION: str = "1.0"


class DeviceConfig(BaseModel):
    """One configured sensor.

    Fields left unset act as wildcards when matching decoded records, so
    two sensors on the same receiver need at least one field that tells
    them apart. Otherwise the first configured entry receives every reading.
    """

    name: str
    watch_battery: bool = False
    id: int | None = None
    channel: int | str | None = None
    rid: int | None = None
    model: str | None = None

    @field_validator("watch_battery", mode="before")
    @classmethod
    def _null_is_false(cls, value: Any) -> Any:
        return False if value is None else value

    def to_identity(self) -> DeviceIdentity:
        """Build the immutable identity used for record matching."""
        from rtl_sensor_bridge.decoders.rtl433.models import DeviceIdentity

        # Falsy values (0, "") are stored as absent, i.e. wildcards
        return DeviceIdentity(
            name=self.name,
            watch_battery=bool(self.watch_battery),
            id=self.id or None,
            channel=self.channel or None,
            rid=self.rid or None,
            model=self.model or None,
        )


class Translations(BaseModel):
    """Display labels for the sensor services."""

    humidity: str = DEFAULT_HUMIDITY_LABEL
    temperature: str = DEFAULT_TEMPERATURE_LABEL

    @field_validator("humidity", mode="before")
    @classmethod
    def _default_humidity(cls, value: Any) -> Any:
        return value or DEFAULT_HUMIDITY_LABEL

    @field_validator("temperature", mode="before")
    @classmethod
    def _default_temperature(cls, value: Any) -> Any:
        return value or DEFAULT_TEMPERATURE_LABEL


class PlatformConfig(BaseModel):
    """Configuration block for the RTL platform."""

    platform: str = PLATFORM_NAME
    name: str | None = None
    devices: list[DeviceConfig] = Field(default_factory=list)
    translations: Translations = Field(default_factory=Translations)
    rtl_433_path: str = DEFAULT_RTL433_PATH
    kill_stale: bool = True

    @field_validator("devices", mode="before")
    @classmethod
    def _null_devices(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("translations", mode="before")
    @classmethod
    def _null_translations(cls, value: Any) -> Any:
        return {} if value is None else value

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlatformConfig:
        """Validate a platform block.

        Args:
            data: Parsed platform configuration.

        Returns:
            Validated PlatformConfig.

        Raises:
            ConfigError: If validation fails.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError("Invalid platform configuration", str(e)) from e


def find_platform_block(data: dict[str, Any]) -> dict[str, Any]:
    """Locate the RTL platform block in a parsed configuration document.

    Accepts either a bare platform block or a Homebridge style document
    with a ``platforms`` list.

    Raises:
        ConfigError: If ``platforms`` is not a list or has no RTL entry.
    """
    platforms = data.get("platforms")
    if platforms is None:
        return data
    if not isinstance(platforms, list):
        raise ConfigError(
            "Invalid 'platforms' section", f"expected a list, got {type(platforms).__name__}"
        )

    for block in platforms:
        if isinstance(block, dict) and block.get("platform") == PLATFORM_NAME:
            return block

    raise ConfigError(f"No {PLATFORM_NAME!r} platform found in configuration")


def load_config(path: str | Path) -> PlatformConfig:
    """Load platform configuration from a JSON file.

    Args:
        path: Path to the configuration file.

    Returns:
        Validated PlatformConfig.

    Raises:
        ConfigError: If the file cannot be read or is invalid.
    """
    config_path = Path(path)
    try:
        with open(config_path) as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read configuration {config_path}", str(e)) from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Malformed JSON in {config_path}", str(e)) from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration {config_path} must be a JSON object")

    return PlatformConfig.from_dict(find_platform_block(data))
