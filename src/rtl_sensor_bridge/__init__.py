"""RTL Sensor Bridge - Forward rtl_433 sensor readings into home-automation accessories."""

from rtl_sensor_bridge.core.config import PlatformConfig, load_config
from rtl_sensor_bridge.core.exceptions import BridgeError, ConfigError, DecoderProcessError
from rtl_sensor_bridge.platform import RTLPlatform

__version__ = "0.1.0"

__all__ = [
    # Platform
    "RTLPlatform",
    # Config
    "PlatformConfig",
    "load_config",
    # Exceptions
    "BridgeError",
    "ConfigError",
    "DecoderProcessError",
]
