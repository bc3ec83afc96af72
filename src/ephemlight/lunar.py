"""Lunar position and illumination providers.

The facade depends only on the ``LunarProvider`` protocol. Three
implementations are available:

- ``SkyfieldLunarProvider``: JPL kernel through skyfield (production).
- ``AnalyticLunarProvider``: truncated Brown/Meeus series, offline and
  deterministic, accurate to a few tenths of a degree. Used when the
  production provider fails and in tests.
- ``StaticLunarProvider``: fixed answers, for tests.
"""

import logging
import math
from datetime import datetime
from typing import Protocol

from skyfield import almanac
from skyfield.api import wgs84

from ephemlight.clock import julian_day
from ephemlight.horizontal import to_horizontal
from ephemlight.kernels import KernelSource, ProviderUnavailable
from ephemlight.models import EquatorialPosition, GeoCoordinate, LunarSample
from ephemlight.sidereal import gmst_deg, hour_angle, lst_deg, wrap_360
from ephemlight.solar import julian_centuries, mean_obliquity_deg, solar_true_longitude_deg

logger = logging.getLogger(__name__)


class LunarProvider(Protocol):
    """Moon position and phase for an instant."""

    def lunar_horizontal(self, instant: datetime, geo: GeoCoordinate) -> LunarSample: ...

    def lunar_illumination(self, instant: datetime) -> float: ...


class SkyfieldLunarProvider:
    """Topocentric apparent Moon from a JPL kernel (no refraction).

    The kernel is loaded on first use; load failures and instants outside
    the kernel span surface as ``ProviderUnavailable`` from either query.
    """

    def __init__(self, source: KernelSource):
        self.source = source

    def lunar_horizontal(self, instant: datetime, geo: GeoCoordinate) -> LunarSample:
        eph = self.source.ephemeris
        t = self.source.time(instant)
        ground = eph["earth"] + wgs84.latlon(
            latitude_degrees=geo.lat_deg, longitude_degrees=geo.lon_deg
        )
        try:
            alt, az, _ = ground.at(t).observe(eph["moon"]).apparent().altaz()
        except Exception as exc:
            raise ProviderUnavailable(f"skyfield Moon query failed at {instant}: {exc}") from exc
        return LunarSample(az_deg=wrap_360(float(az.degrees)), alt_deg=float(alt.degrees))

    def lunar_illumination(self, instant: datetime) -> float:
        eph = self.source.ephemeris
        t = self.source.time(instant)
        try:
            return float(almanac.fraction_illuminated(eph, "moon", t))
        except Exception as exc:
            raise ProviderUnavailable(f"skyfield Moon phase failed at {instant}: {exc}") from exc


def _lunar_ecliptic(T: float) -> tuple[float, float, float]:
    """Ecliptic longitude, latitude (degrees) and horizontal parallax (degrees) of date.

    Montenbruck & Gill, "Satellite Orbits" 3.3.3; Meeus ch. 47 (leading terms).
    """
    L0 = 218.3165 + 481267.8813 * T  # mean longitude
    l = math.radians((134.9634 + 477198.8676 * T) % 360.0)  # mean anomaly, Moon
    lp = math.radians((357.5291 + 35999.0503 * T) % 360.0)  # mean anomaly, Sun
    D = math.radians((297.8502 + 445267.1115 * T) % 360.0)  # mean elongation
    F = math.radians((93.2720 + 483202.0175 * T) % 360.0)  # argument of latitude

    dL = (
        6.2888 * math.sin(l)
        + 1.2740 * math.sin(2.0 * D - l)
        + 0.6583 * math.sin(2.0 * D)
        + 0.2136 * math.sin(2.0 * l)
        - 0.1851 * math.sin(lp)
        - 0.1143 * math.sin(2.0 * F)
        + 0.0588 * math.sin(2.0 * (D - l))
        + 0.0572 * math.sin(2.0 * D - lp - l)
        + 0.0533 * math.sin(2.0 * D + l)
        + 0.0459 * math.sin(2.0 * D - lp)
        + 0.0410 * math.sin(l - lp)
        - 0.0348 * math.sin(D)
        - 0.0305 * math.sin(lp + l)
    )
    dB = (
        5.1282 * math.sin(F)
        + 0.2806 * math.sin(l + F)
        + 0.2777 * math.sin(l - F)
        + 0.1733 * math.sin(2.0 * D - F)
    )
    parallax = (
        0.9508
        + 0.0518 * math.cos(l)
        + 0.0095 * math.cos(2.0 * D - l)
        + 0.0078 * math.cos(2.0 * D)
        + 0.0028 * math.cos(2.0 * l)
    )
    return (L0 + dL) % 360.0, dB, parallax


class AnalyticLunarProvider:
    """Low-precision lunar theory; deterministic and needs no data files."""

    def __init__(self, logger: logging.Logger = logger):
        self.logger = logger

    def lunar_equatorial(self, jd: float) -> EquatorialPosition:
        """Geocentric RA/Dec of date."""
        lam_deg, beta_deg, _ = _lunar_ecliptic(julian_centuries(jd))
        lam = math.radians(lam_deg)
        beta = math.radians(beta_deg)
        eps = math.radians(mean_obliquity_deg(jd))

        # Ecliptic → equatorial rotation about the x axis
        x = math.cos(beta) * math.cos(lam)
        y = math.cos(beta) * math.sin(lam) * math.cos(eps) - math.sin(beta) * math.sin(eps)
        z = math.cos(beta) * math.sin(lam) * math.sin(eps) + math.sin(beta) * math.cos(eps)
        return EquatorialPosition(
            ra_rad=math.atan2(y, x), dec_rad=math.asin(max(-1.0, min(1.0, z)))
        )

    def lunar_horizontal(self, instant: datetime, geo: GeoCoordinate) -> LunarSample:
        jd = julian_day(instant)
        eq = self.lunar_equatorial(jd)
        _, _, parallax_deg = _lunar_ecliptic(julian_centuries(jd))
        h = hour_angle(lst_deg(gmst_deg(jd), geo.lon_deg), eq.ra_rad)
        pos = to_horizontal(geo.lat_deg, eq.dec_rad, h, logger=self.logger)

        # Geocentric → topocentric altitude (parallax in altitude)
        alt = pos.alt_deg - math.degrees(
            math.asin(math.sin(math.radians(parallax_deg)) * math.cos(math.radians(pos.alt_deg)))
        )
        self.logger.debug(f"lunar/analytic alt={alt:.2f} az={pos.az_deg:.2f}")
        return LunarSample(az_deg=pos.az_deg, alt_deg=max(-90.0, min(90.0, alt)))

    def elongation_deg(self, jd: float) -> float:
        """Sun–Earth–Moon angle, degrees [0, 180]."""
        lam_deg, beta_deg, _ = _lunar_ecliptic(julian_centuries(jd))
        cos_e = math.cos(math.radians(beta_deg)) * math.cos(
            math.radians(lam_deg - solar_true_longitude_deg(jd))
        )
        return math.degrees(math.acos(max(-1.0, min(1.0, cos_e))))

    def lunar_illumination(self, instant: datetime) -> float:
        """Illuminated fraction (1 − cos elongation) / 2, phase angle ≈ 180° − elongation."""
        elong = math.radians(self.elongation_deg(julian_day(instant)))
        return (1.0 - math.cos(elong)) / 2.0


class StaticLunarProvider:
    """Always returns the same Moon. For tests and offline previews."""

    def __init__(self, az_deg: float = 180.0, alt_deg: float = 45.0, illumination: float = 0.5):
        self.sample = LunarSample(az_deg=az_deg, alt_deg=alt_deg)
        self.illumination = illumination

    def lunar_horizontal(self, instant: datetime, geo: GeoCoordinate) -> LunarSample:
        return self.sample

    def lunar_illumination(self, instant: datetime) -> float:
        return self.illumination
