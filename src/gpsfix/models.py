from datetime import datetime

from pydantic import BaseModel, Field

from gpsfix.fix_store import FixView


class FixResponse(BaseModel):
    timestamp: datetime | None = Field(None, description="UTC time of the last RMC fix")
    latitude: float = Field(..., description="Signed decimal degrees")
    longitude: float = Field(..., description="Signed decimal degrees")
    latitude_native: str = Field(..., description="NMEA notation, e.g. 4807.0380N")
    longitude_native: str = Field(..., description="NMEA notation, e.g. 01131.0000E")
    latitude_dms: str
    longitude_dms: str
    altitude: float = Field(..., description="Metres above mean sea level")
    satellites: int = Field(..., ge=0)
    age_s: float = Field(..., description="Seconds since the fix was last updated")
    time_age_s: float | None = None
    location_age_s: float | None = None

    @classmethod
    def from_view(cls, view: FixView) -> "FixResponse":
        return cls(
            timestamp=view.timestamp,
            latitude=view.latitude,
            longitude=view.longitude,
            latitude_native=view.latitude_native,
            longitude_native=view.longitude_native,
            latitude_dms=view.latitude_dms,
            longitude_dms=view.longitude_dms,
            altitude=view.altitude,
            satellites=view.satellites,
            age_s=round(view.age, 3),
            time_age_s=_round(view.time_age),
            location_age_s=_round(view.location_age),
        )


class HealthResponse(BaseModel):
    status: str
    serial_connected: bool
    sentences_received: int
    decode_errors: int
    read_errors: int
    last_sentence_age_s: float | None
    fix_age_s: float
    uptime_s: float


def _round(value: float | None) -> float | None:
    return None if value is None else round(value, 3)
