"""Accessories, registry and dispatch of decoded records."""

from rtl_sensor_bridge.accessories.accessory import AccessoryState, SensorAccessory
from rtl_sensor_bridge.accessories.dispatcher import DispatchStats, Dispatcher
from rtl_sensor_bridge.accessories.registry import DeviceRegistry
from rtl_sensor_bridge.accessories.sink import (
    BatteryLevel,
    Characteristic,
    CharacteristicSink,
    InMemoryService,
    InMemoryServiceFactory,
    ServiceFactory,
    ServiceKind,
)

__all__ = [
    "SensorAccessory",
    "AccessoryState",
    "DeviceRegistry",
    "Dispatcher",
    "DispatchStats",
    "CharacteristicSink",
    "ServiceFactory",
    "ServiceKind",
    "Characteristic",
    "BatteryLevel",
    "InMemoryService",
    "InMemoryServiceFactory",
]
