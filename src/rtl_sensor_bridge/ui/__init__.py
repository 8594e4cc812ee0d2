"""Rich terminal UI components for RTL Sensor Bridge."""

from rtl_sensor_bridge.ui.display import (
    display_accessories,
    print_banner,
    print_error,
    print_success,
)

__all__ = [
    "display_accessories",
    "print_banner",
    "print_error",
    "print_success",
]
