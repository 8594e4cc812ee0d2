"""CLI entry points for RTL Sensor Bridge."""

from rtl_sensor_bridge.cli.main import bridge

__all__ = ["bridge"]
