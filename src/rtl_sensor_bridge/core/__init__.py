"""Core bridge functionality - configuration and exceptions."""

from rtl_sensor_bridge.core.config import (
    DEFAULT_RTL433_PATH,
    RTL433_ARGS,
    DeviceConfig,
    PlatformConfig,
    Translations,
    load_config,
)
from rtl_sensor_bridge.core.exceptions import BridgeError, ConfigError, DecoderProcessError

__all__ = [
    "DEFAULT_RTL433_PATH",
    "RTL433_ARGS",
    "DeviceConfig",
    "PlatformConfig",
    "Translations",
    "load_config",
    "BridgeError",
    "ConfigError",
    "DecoderProcessError",
]
