"""Equatorial → horizontal (altitude/azimuth) transform."""

import logging
import math

from ephemlight.models import HorizontalPosition
from ephemlight.sidereal import wrap_360

logger = logging.getLogger(__name__)

# Horizontal projection below this (~0.06° from zenith/nadir) leaves azimuth undefined
ZENITH_EPSILON = 1e-3


def zenith_placeholder_azimuth(lat_deg: float, hour_angle_rad: float) -> float:
    """Stand-in azimuth for a body at the zenith or nadir.

    Carries no physical meaning; it only keeps NaN out of the frame chain.
    Near the equator the hour angle picks 0° (within 5° of the meridian)
    or 180°; elsewhere the hemisphere does.
    """
    if abs(lat_deg) < 5.0:
        return 0.0 if abs(math.degrees(hour_angle_rad)) < 5.0 else 180.0
    return 0.0 if lat_deg > 0 else 180.0


def to_horizontal(
    lat_deg: float,
    dec_rad: float,
    hour_angle_rad: float,
    logger: logging.Logger = logger,
) -> HorizontalPosition:
    """Convert declination + hour angle to altitude/azimuth for an observer.

    Azimuth comes from the east/north components of the direction vector
    rather than the classical cos(alt) quotient, so it stays finite up to
    the zenith. Convention: 0°=N, increasing through E.

    Args:
        lat_deg: Observer latitude, degrees.
        dec_rad: Declination, radians.
        hour_angle_rad: Hour angle, radians, positive west.
        logger: Destination for intermediate values.

    Returns:
        HorizontalPosition. ``azimuth_defined`` is False when the body is
        within ZENITH_EPSILON of the zenith or nadir.
    """
    phi = math.radians(lat_deg)
    sin_phi, cos_phi = math.sin(phi), math.cos(phi)
    sin_dec, cos_dec = math.sin(dec_rad), math.cos(dec_rad)
    cos_h = math.cos(hour_angle_rad)

    sin_alt = sin_phi * sin_dec + cos_phi * cos_dec * cos_h
    alt_deg = math.degrees(math.asin(max(-1.0, min(1.0, sin_alt))))

    # H > 0 is west of the meridian, so the east component is negative there
    x_east = -cos_dec * math.sin(hour_angle_rad)
    y_north = cos_phi * sin_dec - sin_phi * cos_dec * cos_h

    if math.hypot(x_east, y_north) < ZENITH_EPSILON:
        az_deg = zenith_placeholder_azimuth(lat_deg, hour_angle_rad)
        logger.debug(
            f"horizontal/zenith projection={math.hypot(x_east, y_north):.6f} "
            f"h={math.degrees(hour_angle_rad):.2f} lat={lat_deg:.2f} az_placeholder={az_deg:.0f}"
        )
        return HorizontalPosition(alt_deg=alt_deg, az_deg=az_deg, azimuth_defined=False)

    az_deg = wrap_360(math.degrees(math.atan2(x_east, y_north)))
    logger.debug(f"horizontal/altaz alt={alt_deg:.2f} az={az_deg:.2f} lat={lat_deg:.2f}")
    return HorizontalPosition(alt_deg=alt_deg, az_deg=az_deg, azimuth_defined=True)
