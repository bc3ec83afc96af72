"""Script entry point printing a Sun/Moon ephemeris report.

Edit the when/lat/lon variables at the top, then run:
    ephemlight-report

Kernel location, log level and report language come from EPHEMLIGHT_*
environment variables (a .env file is honoured).
"""

import logging

from dotenv import load_dotenv

from ephemlight.clock import InvalidTimeFormat, format_utc
from ephemlight.compute import run
from ephemlight.config import Settings
from ephemlight.i18n import t
from ephemlight.lunar import SkyfieldLunarProvider
from ephemlight.models import Ephemeris, QueryInput

when = "1993-08-01T11:00"  # local civil time at lon
lat = 31.2
lon = 121.5


def format_report(eph: Ephemeris, lat_deg: float, lon_deg: float, lang: str = "en") -> str:
    """Render an Ephemeris as aligned text lines."""
    az = f"{eph.az_deg:.2f}°"
    if not eph.azimuth_defined:
        az += f" ({t('az_undefined', lang)})"

    def vec(v) -> str:
        return "({:+.3f}, {:+.3f}, {:+.3f})".format(*v.as_tuple())

    rows = [
        (t("label_time", lang), format_utc(eph.time)),
        (t("label_observer", lang), f"{lat_deg:.4f}, {lon_deg:.4f}"),
        (t("label_sun_alt", lang), f"{eph.alt_deg:.2f}°"),
        (t("label_sun_az", lang), az),
        (t("label_moon_alt", lang), f"{eph.moon_alt_deg:.2f}°"),
        (t("label_moon_az", lang), f"{eph.moon_az_deg:.2f}°"),
        (t("label_illumination", lang), f"{eph.illumination * 100:.1f}%"),
        (t("label_terminator", lang), f"{eph.terminator_lon_deg:.2f}°"),
        (t("label_sun_world", lang), vec(eph.sun_world)),
        (t("label_moon_world", lang), vec(eph.moon_world)),
    ]
    width = max(len(label) for label, _ in rows)
    lines = [t("report_title", lang)]
    lines += [f"  {label.ljust(width)}  {value}" for label, value in rows]
    return "\n".join(lines)


def main() -> int:
    load_dotenv()
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level_value,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    lunar = SkyfieldLunarProvider(settings.kernel_source())
    try:
        eph = run(QueryInput(when=when, lat_deg=lat, lon_deg=lon), lunar=lunar)
    except InvalidTimeFormat as exc:
        print(t("error_time", settings.lang).format(error=exc))
        return 1
    print(format_report(eph, lat, lon, settings.lang))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
