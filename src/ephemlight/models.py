"""Data model definitions: immutable values passed between the ephemeris stages."""

import math
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class QueryInput:
    """Raw user input. Not yet validated."""

    when: str  # Local civil time, "YYYY-MM-DDTHH:mm"
    lat_deg: float
    lon_deg: float  # Also the reference longitude for the local time offset


@dataclass(frozen=True)
class GeoCoordinate:
    """A point on the Earth's surface. Observer or any other reference point."""

    lat_deg: float  # Latitude, positive north, [-90, 90]
    lon_deg: float  # Longitude, positive east, (-180, 180]

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat_deg <= 90.0:
            raise ValueError(f"Latitude must be between -90 and 90, got {self.lat_deg}")
        if not -180.0 < self.lon_deg <= 180.0:
            raise ValueError(
                f"Longitude must be in (-180, 180], got {self.lon_deg}"
            )

    @classmethod
    def of(cls, lat_deg: float, lon_deg: float) -> "GeoCoordinate":
        """Build a coordinate, wrapping any longitude into (-180, 180]."""
        lon = 180.0 - ((180.0 - lon_deg) % 360.0)
        return cls(lat_deg=lat_deg, lon_deg=lon)


@dataclass(frozen=True)
class EquatorialPosition:
    """Right ascension / declination of date (not J2000)."""

    ra_rad: float
    dec_rad: float

    @property
    def ra_deg(self) -> float:
        return math.degrees(self.ra_rad)

    @property
    def dec_deg(self) -> float:
        return math.degrees(self.dec_rad)


@dataclass(frozen=True)
class HorizontalPosition:
    """Altitude/azimuth seen by an observer.

    When ``azimuth_defined`` is False the body sits within ~0.06° of the
    zenith or nadir and ``az_deg`` is only a NaN-free placeholder.
    """

    alt_deg: float  # [-90, 90]
    az_deg: float  # [0, 360), 0=N, 90=E, 180=S, 270=W
    azimuth_defined: bool = True


@dataclass(frozen=True)
class UnitVector3:
    """Direction vector. Length ≈ 1 within 1e-3."""

    x: float
    y: float
    z: float

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def normalized(self) -> "UnitVector3":
        """Return a unit-length copy. A zero-length vector is treated as length 1."""
        n = self.length() or 1.0
        return UnitVector3(self.x / n, self.y / n, self.z / n)


@dataclass(frozen=True)
class LunarSample:
    """Moon horizontal position returned by a lunar provider."""

    az_deg: float
    alt_deg: float


@dataclass(frozen=True)
class Ephemeris:
    """Sun/Moon lighting snapshot for one instant and observer. Input to renderers."""

    time: datetime  # UTC instant (tzinfo=utc)
    sun_world: UnitVector3  # Sun direction, render world (Y-up)
    moon_world: UnitVector3  # Moon direction, render world (Y-up)
    observer_ecef: UnitVector3  # Observer position direction, render world (Y-up)
    alt_deg: float  # Sun altitude
    az_deg: float  # Sun azimuth (0=N, clockwise)
    azimuth_defined: bool  # False near zenith/nadir: az_deg is a placeholder
    illumination: float  # Moon illuminated fraction [0, 1]
    moon_alt_deg: float
    moon_az_deg: float
    terminator_lon_deg: float  # Morning (sunrise) terminator longitude [-180, 180]
