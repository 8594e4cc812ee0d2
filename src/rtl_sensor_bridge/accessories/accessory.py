"""Sensor accessory: per-device state and its host services."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from rtl_sensor_bridge.accessories.sink import (
    BatteryLevel,
    Characteristic,
    CharacteristicSink,
    ServiceFactory,
    ServiceKind,
)
from rtl_sensor_bridge.core.config import FIRMWARE_REVISION, MANUFACTURER, Translations
from rtl_sensor_bridge.decoders.rtl433.models import DeviceIdentity, IncomingRecord

logger = logging.getLogger(__name__)


@dataclass
class AccessoryState:
    """Last readings applied to an accessory."""

    temperature: Any = None
    humidity: Any = None
    battery_low: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "temperature": self.temperature,
            "humidity": self.humidity,
            "battery_low": self.battery_low,
        }


class SensorAccessory:
    """Temperature/humidity accessory backed by one configured sensor.

    Attributes:
        name: Display name.
        identity: Identity used to match decoded records.
        state: Last applied readings.
        information_service: Manufacturer/serial/firmware service.
        temperature_service: Temperature sensor service.
        humidity_service: Humidity sensor service.
    """

    def __init__(
        self,
        identity: DeviceIdentity,
        translations: Translations,
        service_factory: ServiceFactory,
    ) -> None:
        self.name = identity.name
        self.identity = identity
        self.translations = translations
        self.state = AccessoryState()

        self.information_service = service_factory.create_service(
            ServiceKind.ACCESSORY_INFORMATION
        )
        (
            self.information_service.set_characteristic(Characteristic.MANUFACTURER, MANUFACTURER)
            .set_characteristic(Characteristic.SERIAL_NUMBER, identity.serial_number)
            .set_characteristic(Characteristic.FIRMWARE_REVISION, FIRMWARE_REVISION)
        )

        temperature_label = translations.temperature
        self.temperature_service = service_factory.create_service(
            ServiceKind.TEMPERATURE_SENSOR,
            f"{self.name} {temperature_label}",
            temperature_label,
        )
        self.temperature_service.set_characteristic(Characteristic.CURRENT_TEMPERATURE, 0)

        humidity_label = translations.humidity
        self.humidity_service = service_factory.create_service(
            ServiceKind.HUMIDITY_SENSOR,
            f"{self.name} {humidity_label}",
            humidity_label,
        )
        self.humidity_service.set_characteristic(Characteristic.CURRENT_RELATIVE_HUMIDITY, 0)

    def apply(self, record: IncomingRecord) -> None:
        """Apply a matched reading.

        Temperature and humidity are always written. Battery status is
        written only for sensors configured with ``watch_battery``;
        otherwise any previous battery state is left as is.

        Args:
            record: Record matched to this accessory.
        """
        self.state.temperature = record.temperature_c
        self.temperature_service.set_characteristic(
            Characteristic.CURRENT_TEMPERATURE, record.temperature_c
        )

        self.state.humidity = record.humidity
        self.humidity_service.set_characteristic(
            Characteristic.CURRENT_RELATIVE_HUMIDITY, record.humidity
        )

        if not self.identity.watch_battery:
            return

        battery_low = not record.battery_ok
        level = BatteryLevel.LOW if battery_low else BatteryLevel.NORMAL
        self.state.battery_low = battery_low
        self.temperature_service.set_characteristic(Characteristic.STATUS_LOW_BATTERY, level)
        self.humidity_service.set_characteristic(Characteristic.STATUS_LOW_BATTERY, level)

        if battery_low:
            logger.warning("%s reports low battery (%r)", self.name, record.battery)

    def get_services(self) -> list[CharacteristicSink]:
        return [
            self.information_service,
            self.temperature_service,
            self.humidity_service,
        ]

    def __repr__(self) -> str:
        return f"SensorAccessory({self.name!r})"
