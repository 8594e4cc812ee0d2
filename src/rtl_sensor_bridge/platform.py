"""RTL platform: the entry point the host calls to list accessories."""

from __future__ import annotations

import logging
from collections.abc import Callable

from rtl_sensor_bridge.accessories.accessory import SensorAccessory
from rtl_sensor_bridge.accessories.dispatcher import Dispatcher
from rtl_sensor_bridge.accessories.registry import DeviceRegistry
from rtl_sensor_bridge.accessories.sink import ServiceFactory
from rtl_sensor_bridge.core.config import PlatformConfig
from rtl_sensor_bridge.decoders.rtl433.supervisor import (
    EventCallback,
    ProcessHandle,
    ProcessSupervisor,
)

logger = logging.getLogger(__name__)


class RTLPlatform:
    """Bridges rtl_433 readings into host accessories.

    Example:
        >>> platform = RTLPlatform(load_config("config.json"), factory)
        >>> platform.accessories(host.register)
        >>> ...
        >>> platform.shutdown()

    Attributes:
        config: Platform configuration.
        registry: Configured accessories in match order.
        dispatcher: Applies decoded records to accessories.
        supervisor: Owns the decoder process.
    """

    def __init__(
        self,
        config: PlatformConfig,
        service_factory: ServiceFactory,
        supervisor_factory: Callable[[EventCallback], ProcessSupervisor] | None = None,
    ) -> None:
        self.config = config
        self.registry = DeviceRegistry.from_config(config, service_factory)
        self.dispatcher = Dispatcher(self.registry)
        if supervisor_factory is None:
            self.supervisor = ProcessSupervisor(
                self.dispatcher.handle,
                kill_stale=config.kill_stale,
            )
        else:
            self.supervisor = supervisor_factory(self.dispatcher.handle)

    @property
    def handle(self) -> ProcessHandle | None:
        return self.supervisor.handle

    def accessories(self, callback: Callable[[list[SensorAccessory]], object]) -> None:
        """Hand accessories to the host, then start the decoder.

        The decoder runs in the background; nothing below this call raises
        into the host.

        Args:
            callback: Receives the accessory list.
        """
        callback(self.registry.accessories)
        self.execute()

    def execute(self) -> ProcessHandle | None:
        """Start the rtl_433 server."""
        logger.info("Starting rtl_433 server...")
        try:
            return self.supervisor.start(self.config.rtl_433_path)
        except Exception:
            logger.exception("Failed to start rtl_433")
            return None

    def shutdown(self) -> None:
        """Stop the decoder process if one is running."""
        self.supervisor.shutdown()
