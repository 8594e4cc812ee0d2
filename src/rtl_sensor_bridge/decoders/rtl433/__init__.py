"""rtl_433 integration.

This module turns the output of a running rtl_433 process into decoded
records:
- Process supervision (spawn once, observe, never respawn)
- Line-buffered JSON decoding of the output stream
- Sensor identities with wildcard matching

Requires rtl_433 system binary (install via homebrew/apt).
"""

from __future__ import annotations

from rtl_sensor_bridge.decoders.rtl433.models import (
    DecodedRecord,
    DeviceIdentity,
    IncomingRecord,
    MalformedLine,
    NonJsonLine,
    OversizedLine,
    StreamEvent,
)
from rtl_sensor_bridge.decoders.rtl433.stream import StreamDecoder, iter_events
from rtl_sensor_bridge.decoders.rtl433.supervisor import (
    ProcessHandle,
    ProcessSupervisor,
    check_rtl433_available,
    kill_stale_instances,
    require_rtl433_available,
)

__all__ = [
    # Main classes
    "ProcessSupervisor",
    "ProcessHandle",
    "StreamDecoder",
    # Data models
    "DeviceIdentity",
    "IncomingRecord",
    # Stream events
    "DecodedRecord",
    "NonJsonLine",
    "MalformedLine",
    "OversizedLine",
    "StreamEvent",
    # Utilities
    "iter_events",
    "check_rtl433_available",
    "require_rtl433_available",
    "kill_stale_instances",
]
