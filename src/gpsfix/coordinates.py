"""Conversions between decimal degrees and the NMEA / DMS string notations."""

import math
import re
from enum import Enum

_NATIVE_RE = re.compile(r"^(\d+)(\d\d(?:\.\d+)?)$", re.ASCII)


class CoordinateRangeError(ValueError):
    """Coordinate outside the valid range of its axis."""


class Axis(Enum):
    LATITUDE = "latitude"
    LONGITUDE = "longitude"

    @property
    def limit(self) -> float:
        return 90.0 if self is Axis.LATITUDE else 180.0

    @property
    def degree_digits(self) -> int:
        return 2 if self is Axis.LATITUDE else 3

    @property
    def positive(self) -> str:
        return "N" if self is Axis.LATITUDE else "E"

    @property
    def negative(self) -> str:
        return "S" if self is Axis.LATITUDE else "W"

    def hemisphere(self, value: float) -> str:
        return self.negative if value < 0 else self.positive


def check_range(value: float, axis: Axis) -> None:
    if not math.isfinite(value) or abs(value) > axis.limit:
        raise CoordinateRangeError(f"{axis.value} out of range: {value}")


def to_native(value: float, axis: Axis) -> str:
    """Format decimal degrees as NMEA ``ddmm.mmmm`` / ``dddmm.mmmm`` plus hemisphere.

    >>> to_native(48.1173, Axis.LATITUDE)
    '4807.0380N'
    """
    check_range(value, axis)
    magnitude = abs(value)
    degrees = int(magnitude)
    minutes = round((magnitude - degrees) * 60, 4)
    if minutes >= 60:
        degrees += 1
        minutes = 0.0
    return f"{degrees:0{axis.degree_digits}d}{minutes:07.4f}{axis.hemisphere(value)}"


def to_dms(value: float, axis: Axis) -> str:
    """Format decimal degrees as degrees, minutes and seconds plus hemisphere.

    >>> to_dms(48.1173, Axis.LATITUDE)
    '48°7\\'2.28"N'
    """
    check_range(value, axis)
    magnitude = abs(value)
    degrees = int(magnitude)
    total_minutes = (magnitude - degrees) * 60
    minutes = int(total_minutes)
    seconds = round((total_minutes - minutes) * 60, 2)
    # rounding can push seconds/minutes up to 60
    if seconds >= 60:
        seconds = 0.0
        minutes += 1
    if minutes >= 60:
        minutes = 0
        degrees += 1
    return f"{degrees}°{minutes}'{seconds:.2f}\"{axis.hemisphere(value)}"


def from_native(value: str, hemisphere: str, axis: Axis) -> float:
    """Parse an NMEA coordinate field pair into signed decimal degrees."""
    match = _NATIVE_RE.match(value)
    if not match:
        raise ValueError(f"malformed {axis.value} {value!r}")
    degrees = int(match.group(1))
    minutes = float(match.group(2))
    if minutes >= 60:
        raise ValueError(f"{axis.value} minutes out of range in {value!r}")
    if hemisphere not in (axis.positive, axis.negative):
        raise ValueError(f"invalid {axis.value} hemisphere {hemisphere!r}")

    decimal = degrees + minutes / 60
    check_range(decimal, axis)
    return -decimal if hemisphere == axis.negative else decimal
