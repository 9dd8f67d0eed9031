"""Value types produced when normalizing Zabbix responses."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict


NANOS_PER_SECOND = 1_000_000_000
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True, order=True)
class Instant:
    """A point in time as Zabbix reports it: epoch seconds plus nanoseconds.

    Kept apart from ``datetime`` so the nanosecond part of ``clock``/``ns``
    pairs survives; two instants are equal only when both parts are.
    """

    seconds: int
    nanos: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.nanos < NANOS_PER_SECOND:
            raise ValueError(f"nanos must be in [0, {NANOS_PER_SECOND}), got {self.nanos}")

    @classmethod
    def from_datetime(cls, value: datetime) -> "Instant":
        """Build an instant from a datetime, naive values are taken as UTC."""
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        delta = value - EPOCH
        seconds = delta.days * 86400 + delta.seconds
        return cls(seconds, delta.microseconds * 1000)

    def to_datetime(self) -> datetime:
        """Aware UTC datetime, truncated to microsecond precision."""
        return EPOCH + timedelta(seconds=self.seconds, microseconds=self.nanos // 1000)

    def whole_seconds(self) -> int:
        """Epoch seconds with the fraction truncated toward zero."""
        if self.seconds < 0 and self.nanos:
            return self.seconds + 1
        return self.seconds

    def timestamp(self) -> float:
        return self.seconds + self.nanos / NANOS_PER_SECOND

    def isoformat(self) -> str:
        """ISO-8601 UTC form with all nine fractional digits when needed."""
        base = (EPOCH + timedelta(seconds=self.seconds)).strftime("%Y-%m-%dT%H:%M:%S")
        if self.nanos:
            return f"{base}.{self.nanos:09d}Z"
        return f"{base}Z"

    def __str__(self) -> str:
        return self.isoformat()


TimeSeries = Dict[Instant, Dict[str, Any]]
