"""
UTC timestamp handling with the fixed RFC3339 text form used on the wire.
"""

import functools
import logging
import re
from datetime import datetime
from typing import Optional, Union

import pytz

logger = logging.getLogger(__name__)

RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
RFC3339_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}Z")

EPOCH = datetime(1970, 1, 1, tzinfo=pytz.utc)


def to_utc(dt: datetime) -> datetime:
    """Convert any datetime to UTC, treating naive values as UTC."""
    if dt.tzinfo is None:
        return pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc)


@functools.total_ordering
class Timestamp:
    """
    A single UTC instant at one-second granularity.

    The default value is the Unix epoch, which is also what a failed
    parse produces.
    """

    __slots__ = ('_value',)

    def __init__(self, value: Optional[datetime] = None):
        if value is None:
            value = EPOCH
        self._value = to_utc(value).replace(microsecond=0)

    @property
    def instant(self) -> datetime:
        """The wrapped instant as an aware UTC datetime."""
        return self._value

    @property
    def is_zero(self) -> bool:
        """True for the epoch instant."""
        return self._value == EPOCH

    def to_rfc3339(self) -> str:
        """Format as YYYY-MM-DDTHH:MM:SSZ."""
        # strftime does not pad years below 1000 on every platform
        v = self._value
        return f"{v.year:04d}-{v.month:02d}-{v.day:02d}T{v.hour:02d}:{v.minute:02d}:{v.second:02d}Z"

    @classmethod
    def from_rfc3339(cls, text: Optional[str]) -> 'Timestamp':
        """Parse YYYY-MM-DDTHH:MM:SSZ; anything else gives the epoch."""
        if not isinstance(text, str) or not RFC3339_PATTERN.fullmatch(text):
            logger.debug(f"Unparsable timestamp {text!r}, using epoch")
            return cls()
        try:
            parsed = datetime.strptime(text, RFC3339_FORMAT)
        except (TypeError, ValueError):
            logger.debug(f"Unparsable timestamp {text!r}, using epoch")
            return cls()
        return cls(parsed)

    @classmethod
    def now(cls) -> 'Timestamp':
        """Current time."""
        return cls(datetime.now(pytz.utc))

    @classmethod
    def coerce(cls, value: Union['Timestamp', datetime, str]) -> 'Timestamp':
        """Build a Timestamp from a Timestamp, a datetime or RFC3339 text."""
        if isinstance(value, Timestamp):
            return value
        if isinstance(value, datetime):
            return cls(value)
        if isinstance(value, str):
            return cls.from_rfc3339(value)
        raise TypeError(f"Cannot convert {type(value).__name__} to Timestamp")

    def __eq__(self, other):
        if not isinstance(other, Timestamp):
            return NotImplemented
        return self._value == other._value

    def __lt__(self, other):
        if not isinstance(other, Timestamp):
            return NotImplemented
        return self._value < other._value

    def __hash__(self):
        return hash(self._value)

    def __repr__(self):
        return f"<Timestamp({self.to_rfc3339()})>"

    def __str__(self):
        return self.to_rfc3339()


def coerce_optional(value: Union[Timestamp, datetime, str, None]) -> Optional[Timestamp]:
    """Like ``Timestamp.coerce`` but lets ``None`` through."""
    if value is None:
        return None
    return Timestamp.coerce(value)
