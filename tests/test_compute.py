"""Tests for the ephemeris facade."""

from __future__ import annotations

import dataclasses
import logging
import math
from datetime import datetime, timedelta, timezone

import pytest

from conftest import ExplodingLunarProvider, OutOfRangeSource, UnavailableSolarModel
from ephemlight.clock import InvalidTimeFormat, julian_day
from ephemlight.compute import FALLBACK_ILLUMINATION, compute_ephemeris, run
from ephemlight.frames import altaz_to_world
from ephemlight.lunar import SkyfieldLunarProvider, StaticLunarProvider
from ephemlight.models import QueryInput
from ephemlight.sidereal import gmst_deg
from ephemlight.solar import SkyfieldSolarModel, solar_equatorial_position
from ephemlight.terminator import subsolar_longitude


def test_equatorial_noon_sun_is_near_zenith() -> None:
    eph = compute_ephemeris(datetime(2024, 3, 21, 12, tzinfo=timezone.utc), 0.0, 0.0)

    assert eph.alt_deg >= 80.0
    assert eph.sun_world.x > 0.98


def test_midnight_sun_on_arctic_circle() -> None:
    eph = compute_ephemeris(datetime(2024, 6, 21, 0), 66.55, 0.0)

    assert eph.alt_deg >= -5.0
    assert eph.alt_deg == pytest.approx(0.0, abs=1.0)
    assert eph.az_deg == pytest.approx(0.0, abs=5.0) or eph.az_deg == pytest.approx(360.0, abs=5.0)


def test_polar_night_on_arctic_circle() -> None:
    eph = compute_ephemeris(datetime(2024, 12, 21, 12), 66.55, 0.0)

    assert eph.alt_deg <= 1.0
    assert eph.az_deg == pytest.approx(180.0, abs=5.0)


@pytest.mark.parametrize("lat", [5.0, 23.0, 31.2, 45.0, 60.0, 75.0, 89.0])
@pytest.mark.parametrize("month", [6, 7, 8])
@pytest.mark.parametrize("lon", [0.0, 90.0, -120.0])
def test_northern_summer_noon_sun_is_up(lat: float, month: int, lon: float) -> None:
    """Mean local noon in June-August keeps the Sun above the horizon north of the equator."""
    for day in (1, 15, 28):
        noon = datetime(2024, month, day, 12) - timedelta(hours=lon / 15.0)
        eph = compute_ephemeris(noon, lat, lon)
        assert eph.alt_deg >= 0.0


def test_observer_at_subsolar_point_flags_azimuth() -> None:
    """Standing exactly under the Sun drives the horizontal projection to zero."""
    when = datetime(2024, 5, 1, 9, 17)
    jd = julian_day(when)
    sun = solar_equatorial_position(jd)
    lat = math.degrees(sun.dec_rad)
    lon = subsolar_longitude(sun.ra_deg, gmst_deg(jd) / 15.0)

    eph = compute_ephemeris(when, lat, lon)

    assert not eph.azimuth_defined
    assert -90.0 <= eph.alt_deg <= 90.0
    assert eph.alt_deg == pytest.approx(90.0, abs=0.01)
    assert eph.sun_world.length() == pytest.approx(1.0, abs=1e-3)


def test_morning_sun_rises_in_the_east() -> None:
    """08:00 solar time at Shanghai in June: Sun in the east."""
    eph = compute_ephemeris(datetime(2024, 6, 21, 0), 31.2, 121.5)

    assert 45.0 < eph.az_deg < 135.0
    assert eph.alt_deg > 0.0


def test_outputs_within_ranges_and_unit_length() -> None:
    start = datetime(2024, 1, 1, 0, 0)
    for step in range(0, 24):
        when = start + timedelta(days=step * 15, hours=step * 5, minutes=step * 7)
        for lat, lon in [(0.0, 0.0), (31.2, 121.5), (-33.9, 151.2), (66.55, -20.0), (-89.9, 45.0)]:
            eph = compute_ephemeris(when, lat, lon)
            assert -90.0 <= eph.alt_deg <= 90.0
            assert 0.0 <= eph.az_deg < 360.0
            assert 0.0 <= eph.illumination <= 1.0
            assert -180.0 <= eph.terminator_lon_deg <= 180.0
            for v in (eph.sun_world, eph.moon_world, eph.observer_ecef):
                assert abs(v.length() - 1.0) <= 1e-3


def test_same_input_same_output() -> None:
    when = datetime(2024, 6, 21, 4)

    assert compute_ephemeris(when, 31.2, 121.5) == compute_ephemeris(when, 31.2, 121.5)


def test_naive_datetime_is_utc() -> None:
    naive = compute_ephemeris(datetime(2024, 6, 21, 4), 31.2, 121.5)
    aware = compute_ephemeris(datetime(2024, 6, 21, 4, tzinfo=timezone.utc), 31.2, 121.5)

    assert naive == aware
    assert naive.time.utcoffset() == timedelta(0)


def test_longitude_is_wrapped() -> None:
    when = datetime(2024, 6, 21, 4)

    assert compute_ephemeris(when, 10.0, 360.0) == compute_ephemeris(when, 10.0, 0.0)


@pytest.mark.parametrize("lat", [90.5, -91.0, 180.0])
def test_latitude_out_of_range_is_rejected(lat: float) -> None:
    with pytest.raises(ValueError):
        compute_ephemeris(datetime(2024, 6, 21), lat, 0.0)


def test_observer_direction_in_world_frame() -> None:
    when = datetime(2024, 6, 21)

    assert compute_ephemeris(when, 0.0, 0.0).observer_ecef.as_tuple() == pytest.approx((1.0, 0.0, 0.0), abs=1e-12)
    assert compute_ephemeris(when, 90.0, 0.0).observer_ecef.as_tuple() == pytest.approx((0.0, 1.0, 0.0), abs=1e-12)


def test_result_is_frozen_and_vectors_are_distinct() -> None:
    eph = compute_ephemeris(datetime(2024, 6, 21), 31.2, 121.5)

    assert eph.sun_world is not eph.moon_world
    with pytest.raises(dataclasses.FrozenInstanceError):
        eph.alt_deg = 0.0  # type: ignore[misc]


def test_static_lunar_provider_drives_moon_vector() -> None:
    lunar = StaticLunarProvider(az_deg=200.0, alt_deg=30.0, illumination=0.3)

    eph = compute_ephemeris(datetime(2024, 6, 21), 31.2, 121.5, lunar=lunar)

    expected = altaz_to_world(200.0, 30.0, 31.2, 121.5)
    assert eph.moon_world.as_tuple() == pytest.approx(expected.as_tuple(), abs=1e-12)
    assert eph.moon_alt_deg == 30.0
    assert eph.moon_az_deg == 200.0
    assert eph.illumination == 0.3


def test_illumination_is_clamped() -> None:
    eph = compute_ephemeris(datetime(2024, 6, 21), 0.0, 0.0, lunar=StaticLunarProvider(illumination=1.3))

    assert eph.illumination == 1.0


@pytest.mark.parametrize("exc", [None, RuntimeError("kernel corrupt"), OSError("offline")])
def test_lunar_provider_failure_degrades(caplog, exc) -> None:
    caplog.set_level(logging.WARNING, logger="ephemlight.compute")

    eph = compute_ephemeris(datetime(2024, 6, 21), 31.2, 121.5, lunar=ExplodingLunarProvider(exc))

    assert eph.illumination == FALLBACK_ILLUMINATION
    assert eph.moon_world.length() == pytest.approx(1.0, abs=1e-3)
    assert "lunar/provider-unavailable" in caplog.text


def test_unavailable_solar_strategy_falls_back(caplog) -> None:
    when = datetime(2024, 6, 21, 4)
    caplog.set_level(logging.WARNING, logger="ephemlight.compute")

    eph = compute_ephemeris(when, 31.2, 121.5, solar=UnavailableSolarModel())

    assert eph == compute_ephemeris(when, 31.2, 121.5)
    assert "solar/provider-unavailable" in caplog.text


def test_injected_logger_receives_diagnostics(caplog) -> None:
    injected = logging.getLogger("ephemlight.tests.compute")
    caplog.set_level(logging.DEBUG, logger="ephemlight.tests.compute")

    compute_ephemeris(datetime(2024, 6, 21), 31.2, 121.5, logger=injected)

    messages = [r.getMessage() for r in caplog.records if r.name == "ephemlight.tests.compute"]
    assert any(m.startswith("ephemeris/begin") for m in messages)
    assert any(m.startswith("ephemeris/result") for m in messages)


def test_run_converts_local_time() -> None:
    eph = run(QueryInput(when="1993-08-01T11:00", lat_deg=31.2, lon_deg=121.5))

    assert eph.time == datetime(1993, 8, 1, 3, 0, tzinfo=timezone.utc)
    assert eph.alt_deg > 40.0


def test_run_rejects_malformed_time() -> None:
    with pytest.raises(InvalidTimeFormat):
        run(QueryInput(when="1993/08/01 11:00", lat_deg=31.2, lon_deg=121.5))


def test_instant_outside_kernel_span_degrades(caplog) -> None:
    """Skyfield range errors for an 1850 instant never escape the facade."""
    when = datetime(1850, 6, 21, 4)
    caplog.set_level(logging.WARNING, logger="ephemlight.compute")

    eph = compute_ephemeris(
        when,
        31.2,
        121.5,
        lunar=SkyfieldLunarProvider(OutOfRangeSource()),
        solar=SkyfieldSolarModel(OutOfRangeSource()),
    )

    reference = compute_ephemeris(when, 31.2, 121.5)
    assert eph.sun_world == reference.sun_world
    assert eph.terminator_lon_deg == reference.terminator_lon_deg
    assert eph.moon_world == reference.moon_world
    assert eph.illumination == FALLBACK_ILLUMINATION
    assert "solar/provider-unavailable" in caplog.text
    assert "lunar/provider-unavailable" in caplog.text
