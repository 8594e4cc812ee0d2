"""Data models for rtl_433 record matching.

Defines the configured sensor identity, the decoded record and the
events produced while decoding the rtl_433 output stream.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

# rtl_433 reports this literal when the battery is fine
BATTERY_OK = "OK"

IDENTITY_FIELDS: tuple[str, ...] = ("id", "channel", "rid", "model")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _field_matches(expected: Any, actual: Any) -> bool:
    if not expected or not actual:
        return True
    # JSON numbers compare by value (1 == 1.0); everything else by type too
    if _is_number(expected) and _is_number(actual):
        return expected == actual
    return type(expected) is type(actual) and expected == actual


@dataclass(frozen=True)
class DeviceIdentity:
    """Configured physical sensor.

    Identity fields that are unset act as wildcards. An identity with no
    identity fields matches every record, so sensors sharing a receiver
    must be configured with enough fields to tell them apart; registry
    order decides otherwise.
    """

    name: str
    watch_battery: bool = False
    id: int | None = None
    channel: int | str | None = None
    rid: int | None = None
    model: str | None = None

    def matches(self, record: IncomingRecord) -> bool:
        """Check whether a decoded record came from this sensor.

        A field constrains the match only when it is set on both sides.

        Args:
            record: Decoded record.

        Returns:
            True if every identity field is a wildcard or equal.
        """
        return all(
            _field_matches(getattr(self, name), getattr(record, name))
            for name in IDENTITY_FIELDS
        )

    @property
    def serial_number(self) -> str:
        """Serial reported on the accessory information service."""
        id_part = "null" if self.id is None else self.id
        channel_part = "null" if self.channel is None else self.channel
        return f"rtl-temperature-{id_part}-{channel_part}"


@dataclass(frozen=True)
class IncomingRecord:
    """One decoded rtl_433 transmission."""

    id: Any = None
    channel: Any = None
    rid: Any = None
    model: Any = None

    temperature_c: Any = None
    humidity: Any = None
    battery: Any = None

    raw: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def battery_ok(self) -> bool:
        return self.battery == BATTERY_OK

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> IncomingRecord:
        """Create a record from a parsed rtl_433 JSON object.

        Args:
            data: Parsed JSON object.

        Returns:
            New IncomingRecord. Missing fields are None.
        """
        return cls(
            id=data.get("id"),
            channel=data.get("channel"),
            rid=data.get("rid"),
            model=data.get("model"),
            temperature_c=data.get("temperature_C"),
            humidity=data.get("humidity"),
            battery=data.get("battery"),
            raw=data,
        )


# =============================================================================
# Stream Events
# =============================================================================


@dataclass(frozen=True)
class DecodedRecord:
    """A line that parsed as a JSON object."""

    record: IncomingRecord
    line: str


@dataclass(frozen=True)
class NonJsonLine:
    """A line that does not look like JSON and was not parsed."""

    line: str


@dataclass(frozen=True)
class MalformedLine:
    """A JSON-looking line that failed to parse."""

    line: str
    error: str


@dataclass(frozen=True)
class OversizedLine:
    """A line that exceeded the buffer limit and was dropped."""

    size: int


StreamEvent = Union[DecodedRecord, NonJsonLine, MalformedLine, OversizedLine]
