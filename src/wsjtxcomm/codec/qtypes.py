"""Qt value types carried by the WSJT-X protocol.

WSJT-X serializes with ``QDataStream``, so two of its field types are Qt's own
encodings:

- ``QColor``: a spec byte followed by five 16-bit words (alpha, red, green, blue, pad)
- ``QDateTime``: a Julian day number, milliseconds since midnight, and a timespec byte

This module converts between those encodings and Python values. Byte-level
reading and writing lives in :mod:`wsjtxcomm.codec.stream`.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import NamedTuple, Optional

from pydantic_extra_types.color import Color

from ..exceptions import EncodeError, InvalidFieldError

# QColor::Spec values
SPEC_INVALID = 0
SPEC_RGB = 1

# Julian day number of 0001-01-01 minus one, i.e. date.toordinal() offset
JULIAN_DAY_OFFSET = 1_721_425

# QDataStream representation of a null QDate / QTime
NULL_JULIAN_DAY = 0x8000_0000_0000_0000
NULL_MSECS = 0xFFFF_FFFF

# Qt::TimeSpec values
TIMESPEC_LOCAL = 0
TIMESPEC_UTC = 1

MSECS_PER_DAY = 86_400_000


class QColorValue(NamedTuple):
    """A QColor as it appears on the wire (16-bit premultiplied channels)."""

    spec: int
    alpha: int
    red: int
    green: int
    blue: int


# What QColor() streams as: invalid spec, opaque alpha, zero channels
INVALID_COLOR = QColorValue(SPEC_INVALID, 0xFFFF, 0, 0, 0)


def parse_color(text: str) -> QColorValue:
    """Parse a CSS color string into its QColor wire value.

    Args:
        text: Color name, hex string, ``rgb()``/``hsl()`` expression, ...

    Returns:
        RGB-spec QColorValue with channels premultiplied by alpha

    Raises:
        EncodeError: If the string is not a recognized color
    """
    try:
        color = Color(text)
    except ValueError as e:
        raise EncodeError(f"invalid color {text!r}: {e}") from e

    red, green, blue, alpha = color.as_rgb_tuple(alpha=True)
    alpha = float(alpha)

    def scale(channel: int) -> int:
        # 8-bit -> 16-bit is an exact *257; then premultiply
        return int(channel * 257 * alpha + 0.5)

    return QColorValue(SPEC_RGB, int(alpha * 0xFFFF + 0.5), scale(red), scale(green), scale(blue))


def format_color(value: QColorValue) -> str:
    """Render a decoded QColor as a hex string.

    Returns ``""`` for an invalid color, ``"#rrggbb"`` for an opaque one and
    ``"#rrggbbaa"`` otherwise (channels un-premultiplied).
    """
    if value.spec == SPEC_INVALID:
        return ""
    if value.spec != SPEC_RGB:
        raise InvalidFieldError(f"unsupported color spec {value.spec}")

    if value.alpha == 0xFFFF:
        return f"#{value.red >> 8:02x}{value.green >> 8:02x}{value.blue >> 8:02x}"

    def unscale(channel: int) -> int:
        if value.alpha == 0:
            return 0
        return min(255, round(channel / value.alpha * 255))

    alpha8 = round(value.alpha / 0xFFFF * 255)
    return (
        f"#{unscale(value.red):02x}{unscale(value.green):02x}"
        f"{unscale(value.blue):02x}{alpha8:02x}"
    )


def julian_day_from_date(value: date) -> int:
    """Return the Julian day number of a (proleptic Gregorian) date."""
    return value.toordinal() + JULIAN_DAY_OFFSET


def date_from_julian_day(julian_day: int) -> date:
    """Return the date for a Julian day number.

    Raises:
        InvalidFieldError: If the day falls outside Python's date range
    """
    try:
        return date.fromordinal(julian_day - JULIAN_DAY_OFFSET)
    except (ValueError, OverflowError) as e:
        raise InvalidFieldError(f"julian day {julian_day} out of range") from e


def split_datetime(value: Optional[datetime]) -> tuple[int, int, int]:
    """Convert a datetime into QDateTime wire parts.

    Aware datetimes are converted to UTC; naive datetimes are local civil time.
    None becomes the null QDateTime.

    Returns:
        (julian_day, msecs_since_midnight, timespec)
    """
    if value is None:
        return NULL_JULIAN_DAY, NULL_MSECS, TIMESPEC_LOCAL

    timespec = TIMESPEC_LOCAL
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
        timespec = TIMESPEC_UTC

    msecs = (
        value.hour * 3_600_000
        + value.minute * 60_000
        + value.second * 1000
        + value.microsecond // 1000
    )
    return julian_day_from_date(value.date()), msecs, timespec


def join_datetime(julian_day: int, msecs: int, timespec: int) -> Optional[datetime]:
    """Build a datetime from QDateTime wire parts.

    Sub-second precision is dropped. Timespec 0 yields a naive (local)
    datetime, 1 an aware UTC datetime.

    Raises:
        InvalidFieldError: For an unknown timespec, a time past midnight, or an
            unrepresentable date
    """
    if timespec not in (TIMESPEC_LOCAL, TIMESPEC_UTC):
        raise InvalidFieldError(f"got a timespec I wasn't expecting: {timespec}")

    if julian_day == NULL_JULIAN_DAY:
        return None

    if msecs >= MSECS_PER_DAY:
        raise InvalidFieldError(f"{msecs} ms is not a time of day")

    day = date_from_julian_day(julian_day)
    hour, msecs = divmod(msecs, 3_600_000)
    minute, msecs = divmod(msecs, 60_000)
    second = msecs // 1000

    tzinfo = timezone.utc if timespec == TIMESPEC_UTC else None
    return datetime(day.year, day.month, day.day, hour, minute, second, tzinfo=tzinfo)
