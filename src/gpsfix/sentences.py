"""NMEA 0183 sentence decoding.

Only two sentence types carry data into the fix:

- RMC: UTC date and time of the fix.
- GGA: position, altitude and number of satellites in use.

Everything else pynmea2 knows about is reported as :class:`OtherSentence`.
Malformed input never raises; it is returned as a :class:`DecodeError` so the
caller can log it and move on to the next line.
"""

import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone

import pynmea2

from gpsfix.coordinates import Axis, from_native, to_dms, to_native

# Two-digit NMEA years are offset from this base, so 2100 onwards cannot be
# represented and pre-2000 dates come out in the 2000s.
YEAR_BASE = 2000

RMC_MIN_FIELDS = 11
GGA_MIN_FIELDS = 14

_TIME_RE = re.compile(r"^(\d{2})(\d{2})(\d{2})(?:\.(\d+))?$", re.ASCII)
_DATE_RE = re.compile(r"^(\d{2})(\d{2})(\d{2})$", re.ASCII)


@dataclass(frozen=True)
class TimeDateSentence:
    talker: str
    timestamp: datetime


@dataclass(frozen=True)
class LocationSentence:
    talker: str
    latitude: float
    longitude: float
    altitude: float
    satellites: int
    latitude_native: str
    longitude_native: str
    latitude_dms: str
    longitude_dms: str


@dataclass(frozen=True)
class OtherSentence:
    sentence_type: str
    line: str


@dataclass(frozen=True)
class DecodeError:
    line: str
    cause: str

    def __str__(self) -> str:
        return f"{self.cause}: {self.line!r}"


DecodedSentence = TimeDateSentence | LocationSentence | OtherSentence


def decode(line: str, *, require_checksum: bool = False) -> DecodedSentence | DecodeError:
    """Decode one line of NMEA text."""
    line = line.rstrip("\r\n")
    if not line.strip():
        return DecodeError(line, "empty sentence")
    if not line.isascii():
        return DecodeError(line, "non-ASCII characters in sentence")

    try:
        msg = pynmea2.parse(line, check=require_checksum)
    except pynmea2.ParseError as exc:
        cause = exc.args[0] if exc.args else "unparsable sentence"
        return DecodeError(line, str(cause))
    except (IndexError, ValueError) as exc:
        # raised by pynmea2's proprietary sentence classes on short fragments
        return DecodeError(line, f"malformed sentence: {exc}")

    try:
        if isinstance(msg, pynmea2.types.talker.RMC):
            return _decode_rmc(msg)
        if isinstance(msg, pynmea2.types.talker.GGA):
            return _decode_gga(msg)
    except ValueError as exc:
        return DecodeError(line, str(exc))

    return OtherSentence(type(msg).__name__, line)


def _raw(msg: pynmea2.NMEASentence, name: str) -> str:
    """Raw text of a named field, bypassing pynmea2's lenient conversions."""
    return msg.data[msg.name_to_idx[name]].strip()


def _check_field_count(msg: pynmea2.NMEASentence, minimum: int) -> None:
    if len(msg.data) < minimum:
        raise ValueError(
            f"{msg.sentence_type} has {len(msg.data)} fields, expected at least {minimum}"
        )


def _decode_rmc(msg: pynmea2.NMEASentence) -> TimeDateSentence:
    _check_field_count(msg, RMC_MIN_FIELDS)

    time_match = _TIME_RE.match(_raw(msg, "timestamp"))
    if not time_match:
        raise ValueError(f"invalid time {_raw(msg, 'timestamp')!r}")
    date_match = _DATE_RE.match(_raw(msg, "datestamp"))
    if not date_match:
        raise ValueError(f"invalid date {_raw(msg, 'datestamp')!r}")

    hour, minute, second, fraction = time_match.groups()
    day, month, year = date_match.groups()
    # truncated to whole milliseconds
    millisecond = int((fraction or "0")[:3].ljust(3, "0"))

    try:
        timestamp = datetime(
            YEAR_BASE + int(year), int(month), int(day),
            int(hour), int(minute), int(second), millisecond * 1000,
            tzinfo=timezone.utc,
        )
    except ValueError as exc:
        raise ValueError(f"invalid date/time: {exc}") from exc

    return TimeDateSentence(talker=msg.talker, timestamp=timestamp)


def _decode_gga(msg: pynmea2.NMEASentence) -> LocationSentence:
    _check_field_count(msg, GGA_MIN_FIELDS)

    latitude = from_native(_raw(msg, "lat"), _raw(msg, "lat_dir"), Axis.LATITUDE)
    longitude = from_native(_raw(msg, "lon"), _raw(msg, "lon_dir"), Axis.LONGITUDE)

    altitude_text = _raw(msg, "altitude")
    altitude = float(altitude_text) if altitude_text else 0.0
    if not math.isfinite(altitude):
        raise ValueError(f"invalid altitude {altitude_text!r}")

    sats_text = _raw(msg, "num_sats")
    if sats_text and not (sats_text.isascii() and sats_text.isdigit()):
        raise ValueError(f"invalid satellite count {sats_text!r}")
    satellites = int(sats_text) if sats_text else 0

    return LocationSentence(
        talker=msg.talker,
        latitude=latitude,
        longitude=longitude,
        altitude=altitude,
        satellites=satellites,
        latitude_native=to_native(latitude, Axis.LATITUDE),
        longitude_native=to_native(longitude, Axis.LONGITUDE),
        latitude_dms=to_dms(latitude, Axis.LATITUDE),
        longitude_dms=to_dms(longitude, Axis.LONGITUDE),
    )
