"""Reference frame chain: horizontal → ENU → ECEF → render world.

ECEF here is the astronomical Z-up frame (x toward lon 0, z toward the
north pole). The render world is Y-up; ``ecef_to_world`` is the only
place the axes are permuted and must stay in step with the renderer.
"""

import math

from ephemlight.models import UnitVector3


def altaz_to_enu(az_deg: float, alt_deg: float) -> tuple[float, float, float]:
    """Alt/az → local tangent-plane (east, up, north) components."""
    az = math.radians(az_deg)
    alt = math.radians(alt_deg)
    east = math.sin(az) * math.cos(alt)
    up = math.sin(alt)
    north = math.cos(az) * math.cos(alt)
    return east, up, north


def enu_to_ecef(
    enu: tuple[float, float, float], lat_deg: float, lon_deg: float
) -> UnitVector3:
    """Express an (east, up, north) vector in ECEF through the local basis."""
    east, up, north = enu
    phi = math.radians(lat_deg)
    lam = math.radians(lon_deg)
    sin_phi, cos_phi = math.sin(phi), math.cos(phi)
    sin_lam, cos_lam = math.sin(lam), math.cos(lam)

    # Local basis vectors in ECEF
    E = (-sin_lam, cos_lam, 0.0)
    N = (-sin_phi * cos_lam, -sin_phi * sin_lam, cos_phi)
    U = (cos_phi * cos_lam, cos_phi * sin_lam, sin_phi)

    return UnitVector3(
        x=east * E[0] + up * U[0] + north * N[0],
        y=east * E[1] + up * U[1] + north * N[1],
        z=east * E[2] + up * U[2] + north * N[2],
    )


def ecef_to_world(v: UnitVector3) -> UnitVector3:
    """Z-up ECEF → Y-up render world: (x, y, z) → (x, z, y)."""
    return UnitVector3(x=v.x, y=v.z, z=v.y)


def observer_ecef(lat_deg: float, lon_deg: float) -> UnitVector3:
    """Observer position direction in Z-up ECEF."""
    phi = math.radians(lat_deg)
    lam = math.radians(lon_deg)
    return UnitVector3(
        x=math.cos(phi) * math.cos(lam),
        y=math.cos(phi) * math.sin(lam),
        z=math.sin(phi),
    )


def altaz_to_world(
    az_deg: float, alt_deg: float, lat_deg: float, lon_deg: float
) -> UnitVector3:
    """Full chain for one body: alt/az → ENU → ECEF → world."""
    return ecef_to_world(enu_to_ecef(altaz_to_enu(az_deg, alt_deg), lat_deg, lon_deg))
