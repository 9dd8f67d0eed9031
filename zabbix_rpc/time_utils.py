"""
Time conversion utilities for the Zabbix JSON-RPC client.

Zabbix speaks whole epoch seconds on the way in (``time_from``,
``time_till``...) and ``clock``/``ns`` string pairs on the way out.
"""

from datetime import date, datetime, timezone
from typing import Any, Optional

from .exceptions import ValidationError
from .models.responses import Instant, NANOS_PER_SECOND


class TimeParser:
    """Conversions between Python time values and Zabbix wire timestamps."""

    @classmethod
    def to_epoch_seconds(cls, value: Any) -> Any:
        """Coerce a point-in-time argument for the wire.

        Structured values (``datetime``, ``date``, :class:`Instant`) become
        whole epoch seconds, sub-second precision is truncated. Anything
        else (epoch numbers, strings, ``None``) is passed through untouched.

        Args:
            value: Time argument as given by the caller

        Returns:
            Epoch seconds for structured values, ``value`` otherwise
        """
        if isinstance(value, Instant):
            return value.whole_seconds()
        if isinstance(value, datetime):
            return Instant.from_datetime(value).whole_seconds()
        if isinstance(value, date):
            midnight = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
            return Instant.from_datetime(midnight).seconds
        return value

    @classmethod
    def parse_clock(cls, clock: Any, ns: Optional[Any] = None) -> Instant:
        """Combine a ``clock``/``ns`` pair into an :class:`Instant`.

        Args:
            clock: Whole epoch seconds, usually a numeric string
            ns: Optional nanoseconds part, usually a numeric string

        Raises:
            ValidationError: If either part is not an integer
        """
        seconds = cls._parse_int(clock, "clock")
        if seconds is None:
            raise ValidationError("Time series entry has no clock", field_name="clock")
        nanos = cls._parse_int(ns, "ns") or 0
        # Carry overflowing nanoseconds instead of rejecting them
        extra, nanos = divmod(nanos, NANOS_PER_SECOND)
        return Instant(seconds + extra, nanos)

    @staticmethod
    def _parse_int(value: Any, field_name: str) -> Optional[int]:
        if value is None or value == "":
            return None
        if isinstance(value, bool):
            raise ValidationError(f"Invalid {field_name} value", field_name=field_name, field_value=value)
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError as e:
            raise ValidationError(
                f"Invalid {field_name} value: {e}",
                field_name=field_name,
                field_value=value
            ) from e
