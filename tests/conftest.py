"""Shared test doubles."""

from __future__ import annotations

import math
from datetime import datetime

import pytest

from ephemlight.kernels import KernelSource, ProviderUnavailable
from ephemlight.models import EquatorialPosition, GeoCoordinate, LunarSample


class BrokenLoader:
    """Stands in for skyfield's Loader when no kernel can be had."""

    def __init__(self) -> None:
        self.calls = 0

    def timescale(self):
        self.calls += 1
        raise OSError("network is unreachable")

    def __call__(self, filename: str):
        self.calls += 1
        raise OSError("network is unreachable")


class ExplodingLunarProvider:
    """Lunar provider whose every query fails."""

    def __init__(self, exc: Exception | None = None) -> None:
        self.exc = exc or ProviderUnavailable("kernel missing")

    def lunar_horizontal(self, instant: datetime, geo: GeoCoordinate) -> LunarSample:
        raise self.exc

    def lunar_illumination(self, instant: datetime) -> float:
        raise self.exc


class UnavailableSolarModel:
    name = "unavailable"

    def equatorial(self, instant: datetime, jd: float) -> EquatorialPosition:
        raise ProviderUnavailable("no kernel")


class NaNSolarModel:
    name = "nan"

    def equatorial(self, instant: datetime, jd: float) -> EquatorialPosition:
        return EquatorialPosition(ra_rad=math.nan, dec_rad=0.0)


@pytest.fixture
def broken_source(tmp_path) -> KernelSource:
    return KernelSource(tmp_path, "de421.bsp", loader=BrokenLoader())


class OutOfRangeBody:
    """Kernel body whose segment does not cover the requested instant."""

    def __add__(self, other):
        return self

    def at(self, t):
        # skyfield's EphemerisRangeError is a ValueError
        raise ValueError("ephemeris segment only covers 1899-07-28 to 2053-10-08")


class OutOfRangeSource:
    """Loaded kernel source whose queries all fall outside the kernel span."""

    def __init__(self) -> None:
        body = OutOfRangeBody()
        self.ephemeris = {"earth": body, "sun": body, "moon": body}

    def time(self, instant: datetime):
        return instant
