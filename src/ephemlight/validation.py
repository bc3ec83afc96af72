"""Physical-plausibility regression harness for the ephemeris chain.

The case table covers the situations that broke earlier versions of the
solar pipeline: solstice/equinox noons, polar day and night, the
equatorial zenith, and the date line.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from ephemlight.clock import J2000_JD, ensure_utc, julian_day
from ephemlight.compute import compute_ephemeris
from ephemlight.lunar import LunarProvider
from ephemlight.solar import OBLIQUITY_J2000_DEG, LowPrecisionSolarModel, SolarModel

logger = logging.getLogger(__name__)

TOLERANCE_DEG = 5.0

# Slightly wider than the mathematical range to absorb rounding
MIN_ALTITUDE = -90.1
MAX_ALTITUDE = 90.1
MIN_AZIMUTH = -0.1
MAX_AZIMUTH = 360.1

SUMMER_MONTHS = (6, 7, 8)


@dataclass(frozen=True)
class ValidationCase:
    """One row of the regression table."""

    name: str
    time: str  # UTC, ISO 8601 with Z suffix
    lat_deg: float
    lon_deg: float
    min_alt: float | None = None
    max_alt: float | None = None
    description: str = ""


@dataclass
class ValidationResult:
    """Outcome of one case."""

    case: ValidationCase
    alt_deg: float
    az_deg: float
    sun_world: tuple[float, float, float]
    issues: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.issues


CRITICAL_CASES: tuple[ValidationCase, ...] = (
    ValidationCase("Shanghai summer solstice noon", "2024-06-21T04:00:00Z", 31.2, 121.5,
                   min_alt=0.0, description="Sun above the horizon at local noon"),
    ValidationCase("Shanghai winter solstice noon", "2024-12-21T04:00:00Z", 31.2, 121.5,
                   min_alt=0.0, description="Sun above the horizon at local noon"),
    ValidationCase("Shanghai vernal equinox noon", "2024-03-21T04:00:00Z", 31.2, 121.5,
                   min_alt=0.0, description="Sun above the horizon at local noon"),
    ValidationCase("Arctic circle midsummer midnight", "2024-06-21T00:00:00Z", 66.55, 0.0,
                   min_alt=-5.0, description="Midnight sun, grazing the horizon"),
    ValidationCase("Arctic circle midwinter noon", "2024-12-21T12:00:00Z", 66.55, 0.0,
                   max_alt=1.0, description="Polar night, Sun at most grazing the horizon"),
    ValidationCase("Equator equinox noon", "2024-03-21T12:00:00Z", 0.0, 0.0,
                   min_alt=80.0, description="Sun near the zenith"),
    ValidationCase("0°E midsummer noon", "2024-06-21T12:00:00Z", 31.2, 0.0,
                   min_alt=-15.0, description="Sun above the horizon"),
    ValidationCase("180°E midsummer midnight", "2024-06-21T12:00:00Z", 31.2, 180.0,
                   max_alt=-5.0, description="Sun below the horizon"),
)


def parse_case_time(value: str) -> datetime:
    """Parse an ISO timestamp with or without Z suffix as UTC."""
    return ensure_utc(datetime.fromisoformat(value.rstrip("Z")))


def check_physical_limits(alt_deg: float, az_deg: float) -> list[str]:
    """Issues for altitude/azimuth values outside their physical ranges."""
    issues = []
    if not MIN_ALTITUDE <= alt_deg <= MAX_ALTITUDE:
        issues.append(f"altitude out of range: {alt_deg}°")
    if not MIN_AZIMUTH <= az_deg <= MAX_AZIMUTH:
        issues.append(f"azimuth out of range: {az_deg}°")
    return issues


def check_seasonal_consistency(instant: datetime, lat_deg: float, alt_deg: float) -> list[str]:
    """Northern-summer guard: at local noon the Sun must be above the horizon.

    Only meaningful for instants at local solar noon; callers choose the instant.
    """
    month = ensure_utc(instant).month
    if lat_deg > 0 and month in SUMMER_MONTHS and alt_deg < 0:
        return [f"northern summer Sun below horizon (month {month}, altitude {alt_deg:.2f}°)"]
    return []


def is_near_local_noon(instant: datetime, lon_deg: float, window_hours: float = 1.0) -> bool:
    """True when the mean solar time at lon_deg is within window_hours of 12:00."""
    dt = ensure_utc(instant)
    solar_hours = (dt.hour + dt.minute / 60.0 + lon_deg / 15.0) % 24.0
    return abs(solar_hours - 12.0) <= window_hours


def check_constants() -> list[str]:
    """Sanity checks on the hard-wired astronomical constants."""
    issues = []
    if not 20.0 < OBLIQUITY_J2000_DEG < 30.0:
        issues.append(f"obliquity out of range: {OBLIQUITY_J2000_DEG}")
    if not 2450000.0 < J2000_JD < 2460000.0:
        issues.append(f"J2000 epoch out of range: {J2000_JD}")
    if abs(julian_day(datetime(2000, 1, 1, 12)) - J2000_JD) > 1e-9:
        issues.append("Julian day of 2000-01-01T12:00Z is not J2000.0")
    return issues


def run_case(
    case: ValidationCase,
    lunar: LunarProvider | None = None,
    tolerance: float = TOLERANCE_DEG,
) -> ValidationResult:
    """Compute the ephemeris for one case and collect issues."""
    when = parse_case_time(case.time)
    eph = compute_ephemeris(when, case.lat_deg, case.lon_deg, lunar=lunar)
    result = ValidationResult(
        case=case,
        alt_deg=eph.alt_deg,
        az_deg=eph.az_deg,
        sun_world=eph.sun_world.as_tuple(),
    )
    result.issues.extend(check_physical_limits(eph.alt_deg, eph.az_deg))

    if case.min_alt is not None and eph.alt_deg < case.min_alt - tolerance:
        result.issues.append(
            f"altitude too low: {eph.alt_deg:.2f}° < {case.min_alt - tolerance}°"
        )
    if case.max_alt is not None and eph.alt_deg > case.max_alt + tolerance:
        result.issues.append(
            f"altitude too high: {eph.alt_deg:.2f}° > {case.max_alt + tolerance}°"
        )

    length = eph.sun_world.length()
    if abs(length - 1.0) > 1e-3:
        result.warnings.append(f"sun vector length {length:.4f}, expected 1")
    if not eph.azimuth_defined:
        result.warnings.append("azimuth undefined near zenith; placeholder used")

    if is_near_local_noon(when, case.lon_deg):
        result.issues.extend(check_seasonal_consistency(when, case.lat_deg, eph.alt_deg))
    return result


def run_validation(
    cases: tuple[ValidationCase, ...] = CRITICAL_CASES,
    lunar: LunarProvider | None = None,
) -> list[ValidationResult]:
    """Run every case; logs a summary line and each failure."""
    results = [run_case(case, lunar=lunar) for case in cases]
    for r in results:
        if not r.passed:
            logger.warning(f"validation/failed {r.case.name}: {r.issues}")
    passed = sum(r.passed for r in results)
    logger.info(f"validation/summary {passed}/{len(results)} passed")
    return results


def cross_validate_solar(
    instant: datetime,
    alternate: SolarModel,
    reference: SolarModel | None = None,
) -> float:
    """Angular separation (degrees) between two solar strategies at an instant."""
    reference = reference or LowPrecisionSolarModel()
    jd = julian_day(instant)
    a = reference.equatorial(instant, jd)
    b = alternate.equatorial(instant, jd)
    cos_sep = math.sin(a.dec_rad) * math.sin(b.dec_rad) + math.cos(a.dec_rad) * math.cos(
        b.dec_rad
    ) * math.cos(a.ra_rad - b.ra_rad)
    return math.degrees(math.acos(max(-1.0, min(1.0, cos_sep))))


@dataclass(frozen=True)
class PhaseSample:
    when: datetime
    fraction: float


@dataclass(frozen=True)
class PhaseExtrema:
    """Daily illumination samples of one month and their notable points."""

    samples: tuple[PhaseSample, ...]
    new_moon: PhaseSample
    full_moon: PhaseSample
    quarters: tuple[PhaseSample, ...]  # the two samples nearest half illumination


def moon_phase_extrema(provider: LunarProvider, year: int, month: int) -> PhaseExtrema:
    """Sample illumination daily at 12:00 UTC through one month."""
    start = ensure_utc(datetime(year, month, 1, 12))
    samples = []
    day = start
    while day.month == month:
        samples.append(PhaseSample(when=day, fraction=provider.lunar_illumination(day)))
        day = day + timedelta(days=1)

    nearest_half = sorted(samples, key=lambda s: abs(s.fraction - 0.5))[:2]
    return PhaseExtrema(
        samples=tuple(samples),
        new_moon=min(samples, key=lambda s: s.fraction),
        full_moon=max(samples, key=lambda s: s.fraction),
        quarters=tuple(sorted(nearest_half, key=lambda s: s.when)),
    )


def run_moon_phase_checks(
    provider: LunarProvider,
    months: tuple[tuple[int, int], ...] = ((2024, 3), (2024, 6)),
) -> dict[str, bool]:
    """New moon ≤ 0.05 and full moon ≥ 0.95 within each month. Keys name the check."""
    results: dict[str, bool] = {}
    for year, month in months:
        ext = moon_phase_extrema(provider, year, month)
        results[f"{year}-{month:02d} new moon"] = ext.new_moon.fraction <= 0.05
        results[f"{year}-{month:02d} full moon"] = ext.full_moon.fraction >= 0.95
    failed = [k for k, ok in results.items() if not ok]
    if failed:
        logger.warning(f"moonphase/failed {failed}")
    return results
