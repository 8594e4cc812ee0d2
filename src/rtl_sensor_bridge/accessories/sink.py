"""Capability interface to the host accessory model.

The bridge never touches the host's service and characteristic classes
directly. It asks an injected ServiceFactory for services and writes named
characteristic values into them.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, Protocol


class ServiceKind(str, Enum):
    """Services exposed for every configured sensor."""

    ACCESSORY_INFORMATION = "AccessoryInformation"
    TEMPERATURE_SENSOR = "TemperatureSensor"
    HUMIDITY_SENSOR = "HumiditySensor"


class Characteristic:
    """Characteristic names written by the bridge."""

    MANUFACTURER = "Manufacturer"
    SERIAL_NUMBER = "SerialNumber"
    FIRMWARE_REVISION = "FirmwareRevision"
    CURRENT_TEMPERATURE = "CurrentTemperature"
    CURRENT_RELATIVE_HUMIDITY = "CurrentRelativeHumidity"
    STATUS_LOW_BATTERY = "StatusLowBattery"


class BatteryLevel(IntEnum):
    """StatusLowBattery values as defined by HomeKit."""

    NORMAL = 0
    LOW = 1


class CharacteristicSink(Protocol):
    """Anything that accepts named characteristic updates."""

    def set_characteristic(self, name: str, value: Any) -> CharacteristicSink: ...


class ServiceFactory(Protocol):
    """Creates host services for an accessory."""

    def create_service(
        self,
        kind: ServiceKind,
        display_name: str | None = None,
        subtype: str | None = None,
    ) -> CharacteristicSink: ...


class InMemoryService:
    """Service that records characteristic values in a dict.

    Attributes:
        kind: Service type.
        display_name: Name shown by the host.
        subtype: Distinguishes services of the same kind on one accessory.
        characteristics: Latest value written per characteristic.
    """

    def __init__(
        self,
        kind: ServiceKind,
        display_name: str | None = None,
        subtype: str | None = None,
    ) -> None:
        self.kind = kind
        self.display_name = display_name
        self.subtype = subtype
        self.characteristics: dict[str, Any] = {}

    def set_characteristic(self, name: str, value: Any) -> InMemoryService:
        self.characteristics[name] = value
        return self

    def get_characteristic(self, name: str) -> Any:
        return self.characteristics.get(name)

    def __repr__(self) -> str:
        return f"InMemoryService({self.kind.value}, {self.display_name!r})"


class InMemoryServiceFactory:
    """Factory for InMemoryService; keeps every service it created."""

    def __init__(self) -> None:
        self.services: list[InMemoryService] = []

    def create_service(
        self,
        kind: ServiceKind,
        display_name: str | None = None,
        subtype: str | None = None,
    ) -> InMemoryService:
        service = InMemoryService(kind, display_name, subtype)
        self.services.append(service)
        return service
