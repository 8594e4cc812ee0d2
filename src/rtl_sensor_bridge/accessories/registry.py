"""Ordered registry of configured sensor accessories.

Lookup is first match in configuration order. Entries are not
deduplicated: when two identities both match a record, the one configured
first wins, even if the other is more specific.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from rtl_sensor_bridge.accessories.accessory import SensorAccessory
from rtl_sensor_bridge.decoders.rtl433.models import IncomingRecord

if TYPE_CHECKING:
    from rtl_sensor_bridge.accessories.sink import ServiceFactory
    from rtl_sensor_bridge.core.config import PlatformConfig

logger = logging.getLogger(__name__)


class DeviceRegistry:
    """Read-only list of accessories with first-match lookup.

    Example:
        >>> registry = DeviceRegistry.from_config(config, factory)
        >>> accessory = registry.find_match(record)
    """

    def __init__(self, accessories: Iterable[SensorAccessory]) -> None:
        self._accessories: tuple[SensorAccessory, ...] = tuple(accessories)

    @classmethod
    def from_config(
        cls, config: PlatformConfig, service_factory: ServiceFactory
    ) -> DeviceRegistry:
        """Build accessories for every configured device.

        Args:
            config: Platform configuration.
            service_factory: Host service factory.

        Returns:
            Registry in configuration order.
        """
        accessories = [
            SensorAccessory(device.to_identity(), config.translations, service_factory)
            for device in config.devices
        ]
        for accessory in accessories:
            identity = accessory.identity
            if not any((identity.id, identity.channel, identity.rid, identity.model)):
                logger.warning(
                    "Device %r has no id, channel, rid or model and will match every record",
                    accessory.name,
                )
        logger.info("Registered %d device(s)", len(accessories))
        return cls(accessories)

    @property
    def accessories(self) -> list[SensorAccessory]:
        return list(self._accessories)

    def __len__(self) -> int:
        return len(self._accessories)

    def __iter__(self) -> Iterator[SensorAccessory]:
        return iter(self._accessories)

    def find_match(self, record: IncomingRecord) -> SensorAccessory | None:
        """Find the first accessory whose identity matches the record.

        Args:
            record: Decoded record.

        Returns:
            Matching accessory, or None.
        """
        for accessory in self._accessories:
            if accessory.identity.matches(record):
                return accessory
        return None
