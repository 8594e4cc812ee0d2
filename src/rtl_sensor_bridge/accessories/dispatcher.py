"""Routes decoder events to matching accessories."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from rtl_sensor_bridge.accessories.accessory import SensorAccessory
from rtl_sensor_bridge.accessories.registry import DeviceRegistry
from rtl_sensor_bridge.decoders.rtl433.models import (
    DecodedRecord,
    IncomingRecord,
    MalformedLine,
    NonJsonLine,
    OversizedLine,
    StreamEvent,
)

logger = logging.getLogger(__name__)


@dataclass
class DispatchStats:
    """Counts of handled events."""

    records: int = 0
    matched: int = 0
    unmatched: int = 0
    malformed: int = 0
    noise: int = 0
    oversized: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "records": self.records,
            "matched": self.matched,
            "unmatched": self.unmatched,
            "malformed": self.malformed,
            "noise": self.noise,
            "oversized": self.oversized,
        }


class Dispatcher:
    """Applies decoded records to the accessory that produced them.

    Runs on the reader thread only, so accessory state is mutated in
    stream order by a single writer.
    """

    def __init__(self, registry: DeviceRegistry) -> None:
        self.registry = registry
        self.stats = DispatchStats()

    def handle(self, event: StreamEvent) -> None:
        """Handle one event from the stream decoder."""
        if isinstance(event, DecodedRecord):
            self.on_record(event.record)
        elif isinstance(event, NonJsonLine):
            self.stats.noise += 1
            logger.info("Received non-json message: %s", event.line)
        elif isinstance(event, MalformedLine):
            self.stats.malformed += 1
            logger.error("JSON parse error %s in message: %s", event.error, event.line)
        elif isinstance(event, OversizedLine):
            self.stats.oversized += 1
            logger.warning("Dropped oversized line (%d bytes)", event.size)

    def on_record(self, record: IncomingRecord) -> SensorAccessory | None:
        """Apply a record to its accessory.

        Args:
            record: Decoded record.

        Returns:
            The updated accessory, or None if no device matched.
        """
        self.stats.records += 1

        accessory = self.registry.find_match(record)
        if accessory is None:
            self.stats.unmatched += 1
            logger.info("Device not found, message: %s", record.raw)
            return None

        self.stats.matched += 1
        logger.debug("Update: %s", accessory.identity)
        accessory.apply(record)
        return accessory
