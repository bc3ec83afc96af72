"""Ephemeris computation layer: ties the time, solar, lunar and frame stages together."""

import logging
import math
from datetime import datetime

from ephemlight.clock import ensure_utc, format_utc, julian_day, to_utc_from_local
from ephemlight.frames import altaz_to_world, ecef_to_world, observer_ecef
from ephemlight.horizontal import to_horizontal
from ephemlight.kernels import ProviderUnavailable
from ephemlight.lunar import AnalyticLunarProvider, LunarProvider
from ephemlight.models import Ephemeris, GeoCoordinate, LunarSample, QueryInput
from ephemlight.sidereal import gmst_deg, hour_angle, lst_deg
from ephemlight.solar import LowPrecisionSolarModel, SolarModel
from ephemlight.terminator import terminator_longitude

logger = logging.getLogger(__name__)

FALLBACK_ILLUMINATION = 0.5


def _observe_moon(
    lunar: LunarProvider,
    instant: datetime,
    geo: GeoCoordinate,
    logger: logging.Logger,
) -> tuple[LunarSample, float]:
    """Query the lunar provider, degrading to the analytic model on failure.

    Any exception from the provider is logged as a warning; the Moon position
    then comes from ``AnalyticLunarProvider`` and the illumination is 0.5.
    """
    try:
        sample = lunar.lunar_horizontal(instant, geo)
        illumination = lunar.lunar_illumination(instant)
    except Exception as exc:
        logger.warning(
            f"lunar/provider-unavailable {type(lunar).__name__}: {exc}; "
            f"using analytic position and illumination={FALLBACK_ILLUMINATION}"
        )
        sample = AnalyticLunarProvider(logger=logger).lunar_horizontal(instant, geo)
        illumination = FALLBACK_ILLUMINATION
    return sample, min(1.0, max(0.0, illumination))


def compute_ephemeris(
    instant: datetime,
    lat_deg: float,
    lon_deg: float,
    lunar: LunarProvider | None = None,
    solar: SolarModel | None = None,
    logger: logging.Logger = logger,
) -> Ephemeris:
    """Compute Sun/Moon lighting vectors for an observer at a UTC instant.

    Args:
        instant: UTC instant. Naive datetimes are taken to be UTC.
        lat_deg: Observer latitude, degrees [-90, 90].
        lon_deg: Observer longitude, degrees, positive east (wrapped into (-180, 180]).
        lunar: Lunar provider. Defaults to ``AnalyticLunarProvider``.
        solar: Solar strategy. Defaults to ``LowPrecisionSolarModel``.
        logger: Destination for intermediate values and fallback warnings.

    Returns:
        Ephemeris with render-world (Y-up) unit vectors.

    Raises:
        ValueError: If the latitude is outside [-90, 90].
    """
    geo = GeoCoordinate.of(lat_deg, lon_deg)
    utc_dt = ensure_utc(instant)
    lunar = lunar or AnalyticLunarProvider(logger=logger)
    solar = solar or LowPrecisionSolarModel(logger=logger)
    logger.debug(f"ephemeris/begin utc={format_utc(utc_dt)} lat={geo.lat_deg} lon={geo.lon_deg} solar={solar.name}")

    # Sun: JD → RA/Dec → hour angle → alt/az
    jd = julian_day(utc_dt)
    try:
        sun_eq = solar.equatorial(utc_dt, jd)
    except ProviderUnavailable as exc:
        logger.warning(f"solar/provider-unavailable {solar.name}: {exc}; using low-precision model")
        solar = LowPrecisionSolarModel(logger=logger)
        sun_eq = solar.equatorial(utc_dt, jd)
    gmst = gmst_deg(jd)
    lst = lst_deg(gmst, geo.lon_deg)
    h = hour_angle(lst, sun_eq.ra_rad)
    logger.debug(
        f"ephemeris/sidereal gmst={gmst:.2f} lst={lst:.2f} h={math.degrees(h):.2f} "
        f"ra={sun_eq.ra_deg:.2f} dec={sun_eq.dec_deg:.2f}"
    )
    sun = to_horizontal(geo.lat_deg, sun_eq.dec_rad, h, logger=logger)
    sun_world = altaz_to_world(sun.az_deg, sun.alt_deg, geo.lat_deg, geo.lon_deg)

    # Moon
    moon, illumination = _observe_moon(lunar, utc_dt, geo, logger)
    moon_world = altaz_to_world(moon.az_deg, moon.alt_deg, geo.lat_deg, geo.lon_deg).normalized()

    terminator = terminator_longitude(utc_dt, geo.lat_deg, geo.lon_deg, solar=solar, logger=logger)

    logger.debug(
        f"ephemeris/result alt={sun.alt_deg:.2f} az={sun.az_deg:.2f} "
        f"az_defined={sun.azimuth_defined} sun_world={sun_world.as_tuple()} "
        f"illumination={illumination:.3f}"
    )
    return Ephemeris(
        time=utc_dt,
        sun_world=sun_world,
        moon_world=moon_world,
        observer_ecef=ecef_to_world(observer_ecef(geo.lat_deg, geo.lon_deg)),
        alt_deg=sun.alt_deg,
        az_deg=sun.az_deg,
        azimuth_defined=sun.azimuth_defined,
        illumination=illumination,
        moon_alt_deg=moon.alt_deg,
        moon_az_deg=moon.az_deg,
        terminator_lon_deg=terminator,
    )


def run(
    query: QueryInput,
    lunar: LunarProvider | None = None,
    logger: logging.Logger = logger,
) -> Ephemeris:
    """Top-level entry point: takes a QueryInput and returns an Ephemeris.

    Args:
        query: User input (local time string, observer coordinates).
        lunar: Lunar provider, passed through to ``compute_ephemeris``.

    Returns:
        Fully computed Ephemeris.

    Raises:
        InvalidTimeFormat: If ``query.when`` is malformed.
    """
    utc_dt = to_utc_from_local(query.when, query.lon_deg)
    return compute_ephemeris(utc_dt, query.lat_deg, query.lon_deg, lunar=lunar, logger=logger)
