"""Solar position: closed-form low-precision model plus a skyfield cross-check.

The low-precision model follows the Astronomical Almanac / Meeus ch. 25
simplification (~0.01°). ``LowPrecisionSolarModel`` is the default strategy;
``SkyfieldSolarModel`` exists for cross-validation against a JPL kernel.
"""

import logging
import math
from datetime import datetime
from typing import Protocol

from ephemlight.clock import J2000_JD
from ephemlight.kernels import KernelSource, ProviderUnavailable
from ephemlight.models import EquatorialPosition

logger = logging.getLogger(__name__)

OBLIQUITY_J2000_DEG = 23.439291


def _clamp(x: float) -> float:
    return max(-1.0, min(1.0, x))


def julian_centuries(jd: float) -> float:
    """Julian centuries since J2000.0."""
    return (jd - J2000_JD) / 36525.0


def mean_obliquity_deg(jd: float) -> float:
    """Mean obliquity of the ecliptic, degrees (linear term)."""
    return OBLIQUITY_J2000_DEG - 0.0130042 * julian_centuries(jd)


def solar_true_longitude_deg(jd: float) -> float:
    """Geometric ecliptic longitude of the Sun, degrees [0, 360)."""
    T = julian_centuries(jd)

    # Mean longitude and mean anomaly
    L0 = (280.46646 + T * (36000.76983 + 0.0003032 * T)) % 360.0
    M = (357.52911 + T * (35999.05029 - 0.0001537 * T)) % 360.0
    M_rad = math.radians(M)

    # Equation of center
    C = (
        (1.914602 - T * (0.004817 + 0.000014 * T)) * math.sin(M_rad)
        + (0.019993 - 0.000101 * T) * math.sin(2.0 * M_rad)
        + 0.000289 * math.sin(3.0 * M_rad)
    )
    return (L0 + C) % 360.0


def solar_equatorial_position(
    jd: float, logger: logging.Logger = logger
) -> EquatorialPosition:
    """Apparent-of-date solar right ascension and declination.

    Args:
        jd: Julian Day (UTC-based; the TT-UT difference is ignored).
        logger: Destination for intermediate values.

    Returns:
        EquatorialPosition with RA in (-π, π] and Dec in [-π/2, π/2].
    """
    L_rad = math.radians(solar_true_longitude_deg(jd))
    eps_rad = math.radians(mean_obliquity_deg(jd))

    ra = math.atan2(math.cos(eps_rad) * math.sin(L_rad), math.cos(L_rad))
    dec = math.asin(_clamp(math.sin(eps_rad) * math.sin(L_rad)))

    logger.debug(
        f"solar/position jd={jd:.5f} lambda={math.degrees(L_rad):.4f} "
        f"eps={math.degrees(eps_rad):.6f} ra={math.degrees(ra):.4f} "
        f"dec={math.degrees(dec):.4f}"
    )
    return EquatorialPosition(ra_rad=ra, dec_rad=dec)


class SolarModel(Protocol):
    """Strategy returning the Sun's equatorial position of date."""

    name: str

    def equatorial(self, instant: datetime, jd: float) -> EquatorialPosition: ...


class LowPrecisionSolarModel:
    """Default strategy: the closed-form model above."""

    name = "low-precision"

    def __init__(self, logger: logging.Logger = logger):
        self.logger = logger

    def equatorial(self, instant: datetime, jd: float) -> EquatorialPosition:
        return solar_equatorial_position(jd, logger=self.logger)


class SkyfieldSolarModel:
    """Alternate strategy: apparent geocentric Sun from a JPL kernel via skyfield.

    Used to cross-validate the default model. Raises ``ProviderUnavailable``
    when the kernel cannot be loaded or does not cover the instant.
    """

    name = "skyfield"

    def __init__(self, source: KernelSource):
        self.source = source

    def equatorial(self, instant: datetime, jd: float) -> EquatorialPosition:
        eph = self.source.ephemeris
        t = self.source.time(instant)
        try:
            apparent = eph["earth"].at(t).observe(eph["sun"]).apparent()
            ra, dec, _ = apparent.radec(epoch="date")
        except Exception as exc:
            # EphemerisRangeError outside the kernel span, among others
            raise ProviderUnavailable(f"skyfield Sun query failed at {instant}: {exc}") from exc
        return EquatorialPosition(ra_rad=ra.radians, dec_rad=dec.radians)
