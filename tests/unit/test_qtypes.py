"""Tests for QColor and QDateTime conversions."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from wsjtxcomm.codec.qtypes import (
    INVALID_COLOR,
    NULL_JULIAN_DAY,
    NULL_MSECS,
    TIMESPEC_LOCAL,
    TIMESPEC_UTC,
    QColorValue,
    date_from_julian_day,
    format_color,
    join_datetime,
    julian_day_from_date,
    parse_color,
    split_datetime,
)
from wsjtxcomm.exceptions import EncodeError, InvalidFieldError


class TestParseColor:
    """Tests for CSS color string parsing."""

    def test_named_colors(self) -> None:
        """Test the named colors used by WSJT-X clients."""
        assert parse_color("red") == QColorValue(1, 0xFFFF, 0xFFFF, 0, 0)
        assert parse_color("black") == QColorValue(1, 0xFFFF, 0, 0, 0)

    def test_hex_color(self) -> None:
        """Test 8-bit channels expand to 16 bits."""
        assert parse_color("#eb4034") == QColorValue(1, 0xFFFF, 0xEBEB, 0x4040, 0x3434)

    def test_translucent_color_is_premultiplied(self) -> None:
        """Test channels are scaled by alpha."""
        value = parse_color("rgba(255, 0, 0, 0.5)")
        assert value.alpha == 0x8000
        assert value.red == 0x8000
        assert value.green == 0

    def test_unknown_color(self) -> None:
        """Test unparsable strings raise EncodeError."""
        with pytest.raises(EncodeError, match="invalid color"):
            parse_color("not-a-color")

    def test_empty_color(self) -> None:
        """Test the empty string is not a color."""
        with pytest.raises(EncodeError):
            parse_color("")


class TestFormatColor:
    """Tests for rendering decoded colors."""

    def test_opaque(self) -> None:
        """Test opaque colors render as #rrggbb."""
        assert format_color(QColorValue(1, 0xFFFF, 0xEBEB, 0x4040, 0x3434)) == "#eb4034"

    def test_invalid(self) -> None:
        """Test the invalid color renders as empty."""
        assert format_color(INVALID_COLOR) == ""

    def test_translucent(self) -> None:
        """Test translucent colors carry an alpha byte."""
        assert format_color(parse_color("rgba(255, 0, 0, 0.5)")) == "#ff000080"

    def test_unsupported_spec(self) -> None:
        """Test HSV and other specs are rejected."""
        with pytest.raises(InvalidFieldError, match="color spec"):
            format_color(QColorValue(2, 0xFFFF, 0, 0, 0))

    @pytest.mark.parametrize("text", ["#000000", "#ffffff", "#eb4034", "#0a0b0c"])
    def test_hex_roundtrip(self, text: str) -> None:
        """Test opaque hex colors survive parse and format."""
        assert format_color(parse_color(text)) == text


class TestJulianDay:
    """Tests for Julian day numbers."""

    def test_reference_day(self) -> None:
        """Test the day of the reference QSO capture."""
        assert julian_day_from_date(date(2020, 10, 30)) == 0x258611
        assert date_from_julian_day(0x258611) == date(2020, 10, 30)

    def test_unix_epoch(self) -> None:
        """Test 1970-01-01 is JD 2440588."""
        assert julian_day_from_date(date(1970, 1, 1)) == 2_440_588

    def test_out_of_range(self) -> None:
        """Test days Python cannot represent."""
        with pytest.raises(InvalidFieldError, match="out of range"):
            date_from_julian_day(0)
        with pytest.raises(InvalidFieldError):
            date_from_julian_day(2**63 - 1)


class TestDateTime:
    """Tests for QDateTime parts."""

    def test_split_utc(self) -> None:
        """Test aware datetimes are sent as UTC."""
        value = datetime(2020, 10, 30, 11, 29, 57, 320000, tzinfo=timezone.utc)
        assert split_datetime(value) == (0x258611, 0x0277AC48, TIMESPEC_UTC)

    def test_split_converts_to_utc(self) -> None:
        """Test other zones are converted first."""
        mountain = timezone(timedelta(hours=-6))
        value = datetime(2020, 10, 30, 5, 29, 57, tzinfo=mountain)
        assert split_datetime(value) == (0x258611, 41_397_000, TIMESPEC_UTC)

    def test_split_naive_is_local(self) -> None:
        """Test naive datetimes are sent as local time."""
        assert split_datetime(datetime(2020, 10, 30, 0, 0, 1)) == (0x258611, 1000, TIMESPEC_LOCAL)

    def test_split_none(self) -> None:
        """Test None is the null QDateTime."""
        assert split_datetime(None) == (NULL_JULIAN_DAY, NULL_MSECS, TIMESPEC_LOCAL)

    def test_join_truncates_to_seconds(self) -> None:
        """Test milliseconds are dropped on decode."""
        value = join_datetime(0x258611, 0x0277AC48, TIMESPEC_UTC)
        assert value == datetime(2020, 10, 30, 11, 29, 57, tzinfo=timezone.utc)

    def test_join_null(self) -> None:
        """Test the null QDateTime joins to None."""
        assert join_datetime(NULL_JULIAN_DAY, NULL_MSECS, TIMESPEC_LOCAL) is None

    def test_join_bad_timespec(self) -> None:
        """Test offset-from-UTC and time-zone specs are rejected."""
        with pytest.raises(InvalidFieldError, match="timespec I wasn't expecting: 2"):
            join_datetime(0x258611, 0, 2)

    def test_join_past_midnight(self) -> None:
        """Test a time of day past 24h is rejected."""
        with pytest.raises(InvalidFieldError):
            join_datetime(0x258611, 86_400_000, TIMESPEC_UTC)
