"""Sidereal time and hour angle."""

import math

from ephemlight.clock import J2000_JD

TWO_PI = 2.0 * math.pi


def wrap_360(deg: float) -> float:
    """Wrap an angle into [0, 360)."""
    w = deg % 360.0
    # -1e-17 % 360 rounds to exactly 360.0
    return 0.0 if w >= 360.0 else w


def wrap_180(deg: float) -> float:
    """Wrap an angle into [-180, 180)."""
    return wrap_360(deg + 180.0) - 180.0


def wrap_pi(rad: float) -> float:
    """Wrap an angle into (-π, π]."""
    w = math.pi - ((math.pi - rad) % TWO_PI)
    return math.pi if w <= -math.pi else w


def gmst_deg(jd: float) -> float:
    """Greenwich Mean Sidereal Time in degrees [0, 360).

    Linear term only; the T² correction is below the precision of the
    solar model it is paired with.
    """
    return wrap_360(280.46061837 + 360.98564736629 * (jd - J2000_JD))


def lst_deg(gmst: float, lon_deg: float) -> float:
    """Local Sidereal Time in degrees [0, 360). Longitude positive east."""
    return wrap_360(gmst + lon_deg)


def hour_angle(lst: float, ra_rad: float) -> float:
    """Hour angle in radians (-π, π]. Positive west of the meridian."""
    return wrap_pi(math.radians(lst) - ra_rad)
