"""
Date-Time Productions
RFC 5322 section 3.3: day-of-week, date, time-of-day, zone and date-time.

Values are stored as validated integers with exact digit counts. Calendar
correctness (e.g. day 32) is not checked while parsing; it is only enforced
when converting to a ``datetime`` with ``DateTime.to_datetime``.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, ClassVar, Optional, Tuple

from .lexical import CFWS, is_digit, skip_fws
from .parse_error import RECOVERABLE, EofError, NotFoundError
from .token import Token, stream_optional, write

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_DAY_LOOKUP = {name.lower().encode("ascii"): index + 1 for index, name in enumerate(DAY_NAMES)}
_MONTH_LOOKUP = {name.lower().encode("ascii"): index + 1 for index, name in enumerate(MONTH_NAMES)}


def _fail(name: str, data: bytes, pos: int):
    if pos >= len(data):
        return EofError(name)
    return NotFoundError(name)


def _digits(data: bytes, pos: int, minimum: int, maximum: Optional[int], name: str) -> Tuple[int, int]:
    """Read between ``minimum`` and ``maximum`` digits (no upper bound if None)"""
    end = pos
    size = len(data)
    while end < size and is_digit(data[end]) and (maximum is None or end - pos < maximum):
        end += 1
    if end - pos < minimum:
        raise _fail(name, data, pos)
    return int(data[pos:end]), end


def _require_fws(data: bytes, pos: int, name: str) -> int:
    found, end = skip_fws(data, pos)
    if not found:
        raise _fail(name, data, pos)
    return end


def _name_lookup(data: bytes, pos: int, table: dict, name: str) -> Tuple[int, int]:
    value = table.get(data[pos:pos + 3].lower())
    if value is None:
        raise _fail(name, data, pos)
    return value, pos + 3


@dataclass(frozen=True)
class DayOfWeek(Token):
    """day-of-week = ([FWS] day-name); ``day`` is 1 (Mon) through 7 (Sun)"""

    leading_ws: bool
    day: int
    NAME: ClassVar[str] = "Day of Week"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["DayOfWeek", int]:
        leading_ws, pos = skip_fws(data, pos)
        day, pos = _name_lookup(data, pos, _DAY_LOOKUP, cls.NAME)
        return cls(leading_ws, day), pos

    def stream(self, w: Any) -> int:
        count = write(w, b" ") if self.leading_ws else 0
        return count + write(w, DAY_NAMES[self.day - 1].encode("ascii"))


@dataclass(frozen=True)
class Day(Token):
    """
    day = ([FWS] 1*2DIGIT FWS)

    ``width`` is the number of digits read, so "1" is written back as "1".
    """

    leading_ws: bool
    value: int
    width: int = 2
    NAME: ClassVar[str] = "Day"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["Day", int]:
        leading_ws, pos = skip_fws(data, pos)
        start = pos
        value, pos = _digits(data, pos, 1, 2, cls.NAME)
        width = pos - start
        pos = _require_fws(data, pos, cls.NAME)
        return cls(leading_ws, value, width), pos

    def stream(self, w: Any) -> int:
        prefix = " " if self.leading_ws else ""
        return write(w, f"{prefix}{self.value:0{self.width}d} ".encode("ascii"))


@dataclass(frozen=True)
class Month(Token):
    """month = "Jan" / ... / "Dec"; ``value`` is 1 through 12"""

    value: int
    NAME: ClassVar[str] = "Month"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["Month", int]:
        value, pos = _name_lookup(data, pos, _MONTH_LOOKUP, cls.NAME)
        return cls(value), pos

    def stream(self, w: Any) -> int:
        return write(w, MONTH_NAMES[self.value - 1].encode("ascii"))


@dataclass(frozen=True)
class Year(Token):
    """year = (FWS 4*DIGIT FWS); leading zeros are kept"""

    value: int
    width: int = 4
    NAME: ClassVar[str] = "Year"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["Year", int]:
        pos = _require_fws(data, pos, cls.NAME)
        start = pos
        value, pos = _digits(data, pos, 4, None, cls.NAME)
        width = pos - start
        pos = _require_fws(data, pos, cls.NAME)
        return cls(value, width), pos

    def stream(self, w: Any) -> int:
        return write(w, f" {self.value:0{self.width}d} ".encode("ascii"))


@dataclass(frozen=True)
class Date(Token):
    """date = day month year"""

    day: Day
    month: Month
    year: Year
    NAME: ClassVar[str] = "Date"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["Date", int]:
        day, pos = Day.parse_at(data, pos)
        month, pos = Month.parse_at(data, pos)
        year, pos = Year.parse_at(data, pos)
        return cls(day, month, year), pos

    def stream(self, w: Any) -> int:
        return self.day.stream(w) + self.month.stream(w) + self.year.stream(w)


@dataclass(frozen=True)
class TimeOfDay(Token):
    """time-of-day = hour ":" minute [ ":" second ], each exactly 2DIGIT"""

    hour: int
    minute: int
    second: Optional[int]
    NAME: ClassVar[str] = "Time of Day"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["TimeOfDay", int]:
        hour, pos = _digits(data, pos, 2, 2, cls.NAME)
        if not data.startswith(b":", pos):
            raise _fail(cls.NAME, data, pos)
        minute, pos = _digits(data, pos + 1, 2, 2, cls.NAME)
        second = None
        if data.startswith(b":", pos):
            try:
                second, pos = _digits(data, pos + 1, 2, 2, cls.NAME)
            except RECOVERABLE:
                pass
        return cls(hour, minute, second), pos

    def stream(self, w: Any) -> int:
        text = f"{self.hour:02d}:{self.minute:02d}"
        if self.second is not None:
            text += f":{self.second:02d}"
        return write(w, text.encode("ascii"))


@dataclass(frozen=True)
class Zone(Token):
    """
    zone = (FWS ( "+" / "-" ) 4DIGIT)

    ``value`` is the signed ±HHMM number as written, e.g. "-0700" is -700.
    ``negative`` keeps the sign of "-0000", which RFC 5322 reserves for
    "local time unknown" and which is not the same as "+0000".
    """

    value: int
    negative: bool = False
    NAME: ClassVar[str] = "Zone"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["Zone", int]:
        pos = _require_fws(data, pos, cls.NAME)
        if data.startswith(b"+", pos):
            sign = 1
        elif data.startswith(b"-", pos):
            sign = -1
        else:
            raise _fail(cls.NAME, data, pos)
        value, pos = _digits(data, pos + 1, 4, 4, cls.NAME)
        return cls(sign * value, sign < 0), pos

    def stream(self, w: Any) -> int:
        sign = "-" if self.value < 0 or self.negative else "+"
        return write(w, f" {sign}{abs(self.value):04d}".encode("ascii"))

    @property
    def minutes(self) -> int:
        """Offset from UTC in minutes"""
        hours, minutes = divmod(abs(self.value), 100)
        offset = hours * 60 + minutes
        return -offset if self.value < 0 else offset


@dataclass(frozen=True)
class Time(Token):
    """time = time-of-day zone"""

    time_of_day: TimeOfDay
    zone: Zone
    NAME: ClassVar[str] = "Time"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["Time", int]:
        time_of_day, pos = TimeOfDay.parse_at(data, pos)
        zone, pos = Zone.parse_at(data, pos)
        return cls(time_of_day, zone), pos

    def stream(self, w: Any) -> int:
        return self.time_of_day.stream(w) + self.zone.stream(w)


@dataclass(frozen=True)
class DateTime(Token):
    """
    date-time = [ day-of-week "," ] date time [CFWS]

    A day name is only kept when a comma follows it; otherwise the date is
    parsed again from the original position.
    """

    day_of_week: Optional[DayOfWeek]
    date: Date
    time: Time
    post_cfws: Optional[CFWS]
    NAME: ClassVar[str] = "Date Time"

    @classmethod
    def parse_at(cls, data: bytes, pos: int) -> Tuple["DateTime", int]:
        day_of_week = None
        candidate, after = DayOfWeek.parse_optional(data, pos)
        if candidate is not None and data.startswith(b",", after):
            day_of_week, pos = candidate, after + 1
        date, pos = Date.parse_at(data, pos)
        time, pos = Time.parse_at(data, pos)
        post_cfws, pos = CFWS.parse_optional(data, pos)
        return cls(day_of_week, date, time, post_cfws), pos

    def stream(self, w: Any) -> int:
        count = 0
        if self.day_of_week is not None:
            count += self.day_of_week.stream(w) + write(w, b",")
        return (count
                + self.date.stream(w)
                + self.time.stream(w)
                + stream_optional(self.post_cfws, w))

    def to_datetime(self) -> datetime:
        """
        Convert to an aware ``datetime``

        Raises:
            ValueError: If the fields do not form a real calendar date/time
        """
        tod = self.time.time_of_day
        return datetime(
            self.date.year.value,
            self.date.month.value,
            self.date.day.value,
            tod.hour,
            tod.minute,
            tod.second or 0,
            tzinfo=timezone(timedelta(minutes=self.time.zone.minutes)),
        )

    @classmethod
    def from_datetime(cls, value: datetime) -> "DateTime":
        """
        Build a DateTime from an aware ``datetime``

        Names come from fixed tables, not the process locale.
        """
        offset = value.utcoffset()
        if offset is None:
            raise ValueError("datetime must be timezone-aware")
        total = int(offset.total_seconds()) // 60
        sign = "-" if total < 0 else "+"
        hours, minutes = divmod(abs(total), 60)
        text = (
            f"{DAY_NAMES[value.isoweekday() - 1]}, {value.day:02d} "
            f"{MONTH_NAMES[value.month - 1]} {value.year:04d} "
            f"{value.hour:02d}:{value.minute:02d}:{value.second:02d} "
            f"{sign}{hours:02d}{minutes:02d}"
        )
        return cls.parse_exact(text.encode("ascii"))
