"""Custom exception hierarchy for the sensor bridge."""

from __future__ import annotations


class BridgeError(Exception):
    """Base exception for all bridge errors."""

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigError(BridgeError):
    """Configuration is missing, unreadable or invalid."""

    pass


class DecoderProcessError(BridgeError):
    """The rtl_433 decoder process could not be found or spawned."""

    def __init__(self, command: str, details: str | None = None) -> None:
        self.command = command
        super().__init__(f"Cannot run decoder {command!r}", details)
