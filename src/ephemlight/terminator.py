"""Day/night terminator longitude.

The morning terminator crosses the equator 90° west of the sub-solar
meridian. The result depends on the instant only; observer coordinates are
accepted for interface symmetry with ``compute_ephemeris``.
"""

import logging
import math
from datetime import datetime

from ephemlight.clock import ensure_utc, julian_day
from ephemlight.kernels import ProviderUnavailable
from ephemlight.sidereal import gmst_deg, wrap_180
from ephemlight.solar import LowPrecisionSolarModel, SolarModel

logger = logging.getLogger(__name__)


def subsolar_longitude(ra_deg: float, gst_hours: float) -> float:
    """Geographic longitude of the sub-solar point, degrees [-180, 180)."""
    return wrap_180(ra_deg - gst_hours * 15.0)


def terminator_from_sidereal(ra_deg: float, gst_hours: float) -> float:
    """Terminator longitude from solar RA (degrees) and Greenwich sidereal time (hours)."""
    return wrap_180(subsolar_longitude(ra_deg, gst_hours) - 90.0)


def terminator_estimate(instant: datetime) -> float:
    """Rough terminator longitude from the UTC clock alone."""
    dt = ensure_utc(instant)
    hours = dt.hour + dt.minute / 60.0
    return wrap_180(hours * 15.0 + 90.0)


def terminator_longitude(
    instant: datetime,
    lat_deg: float,
    lon_deg: float,
    solar: SolarModel | None = None,
    logger: logging.Logger = logger,
) -> float:
    """Longitude of the day/night boundary at ``instant``, degrees [-180, 180].

    Uses the solar model and GMST. If the solar model is unavailable or
    yields a non-finite value, falls back to ``terminator_estimate`` and logs
    a warning.
    """
    solar = solar or LowPrecisionSolarModel(logger=logger)
    jd = julian_day(instant)
    try:
        eq = solar.equatorial(instant, jd)
    except ProviderUnavailable as exc:
        logger.warning(f"terminator/fallback solar model {solar.name} unavailable: {exc}")
        return terminator_estimate(instant)

    gst_hours = gmst_deg(jd) / 15.0
    result = terminator_from_sidereal(eq.ra_deg, gst_hours)
    if not math.isfinite(result):
        logger.warning(f"terminator/fallback non-finite result ra={eq.ra_deg} gst={gst_hours}")
        return terminator_estimate(instant)

    logger.debug(
        f"terminator/calculation ra={eq.ra_deg:.2f} gst={gst_hours:.4f} "
        f"subsolar={subsolar_longitude(eq.ra_deg, gst_hours):.2f} terminator={result:.2f}"
    )
    return result


calculate_terminator_longitude = terminator_longitude
