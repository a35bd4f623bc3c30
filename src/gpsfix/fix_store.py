import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime


@dataclass
class _Fix:
    # From RMC
    timestamp: datetime | None = None

    # From GGA
    latitude: float = 0.0
    longitude: float = 0.0
    latitude_native: str = ""
    longitude_native: str = ""
    latitude_dms: str = ""
    longitude_dms: str = ""
    altitude: float = 0.0
    satellites: int = 0

    # Timestamps (store clock)
    updated_at: float = 0.0
    time_updated_at: float | None = None
    location_updated_at: float | None = None


@dataclass(frozen=True)
class FixView:
    """Read-only copy of the current fix, with ages in seconds."""

    timestamp: datetime | None
    latitude: float
    longitude: float
    latitude_native: str
    longitude_native: str
    latitude_dms: str
    longitude_dms: str
    altitude: float
    satellites: int
    age: float
    time_age: float | None = None
    location_age: float | None = None

    @property
    def has_time(self) -> bool:
        return self.time_age is not None

    @property
    def has_location(self) -> bool:
        return self.location_age is not None


class FixStore:
    """Holds the latest fix for one writer and any number of readers.

    Time and location are updated independently, each in a single critical
    section. A snapshot may therefore combine a fresh time with an older
    location (or the reverse) but never half of one update.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self._lock = threading.Lock()
        self._fix = _Fix(updated_at=clock())

    def update_time(self, timestamp: datetime) -> None:
        now = self.clock()
        with self._lock:
            self._fix.timestamp = timestamp
            self._fix.time_updated_at = now
            self._fix.updated_at = now

    def update_location(
        self,
        latitude: float,
        longitude: float,
        altitude: float,
        satellites: int,
        latitude_native: str,
        longitude_native: str,
        latitude_dms: str,
        longitude_dms: str,
    ) -> None:
        now = self.clock()
        with self._lock:
            fix = self._fix
            fix.latitude = latitude
            fix.longitude = longitude
            fix.altitude = altitude
            fix.satellites = satellites
            fix.latitude_native = latitude_native
            fix.longitude_native = longitude_native
            fix.latitude_dms = latitude_dms
            fix.longitude_dms = longitude_dms
            fix.location_updated_at = now
            fix.updated_at = now

    def snapshot(self) -> FixView:
        with self._lock:
            fix = replace(self._fix)
        now = self.clock()

        return FixView(
            timestamp=fix.timestamp,
            latitude=fix.latitude,
            longitude=fix.longitude,
            latitude_native=fix.latitude_native,
            longitude_native=fix.longitude_native,
            latitude_dms=fix.latitude_dms,
            longitude_dms=fix.longitude_dms,
            altitude=fix.altitude,
            satellites=fix.satellites,
            age=_age(now, fix.updated_at),
            time_age=_age(now, fix.time_updated_at),
            location_age=_age(now, fix.location_updated_at),
        )


def _age(now: float, since: float | None) -> float | None:
    if since is None:
        return None
    return max(0.0, now - since)
