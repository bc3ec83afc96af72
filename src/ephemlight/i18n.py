"""Simple two-language (en/zh) translation helper for the text report."""

_STRINGS: dict[str, dict[str, str]] = {
    "report_title": {
        "en": "Sun & Moon ephemeris",
        "zh": "日月星历",
    },
    "label_time": {
        "en": "UTC time",
        "zh": "UTC 时间",
    },
    "label_observer": {
        "en": "Observer",
        "zh": "观测者",
    },
    "label_sun_alt": {
        "en": "Sun altitude",
        "zh": "太阳高度角",
    },
    "label_sun_az": {
        "en": "Sun azimuth",
        "zh": "太阳方位角",
    },
    "az_undefined": {
        "en": "undefined near zenith",
        "zh": "天顶附近无定义",
    },
    "label_moon_alt": {
        "en": "Moon altitude",
        "zh": "月亮高度角",
    },
    "label_moon_az": {
        "en": "Moon azimuth",
        "zh": "月亮方位角",
    },
    "label_illumination": {
        "en": "Moon illumination",
        "zh": "月相照亮比例",
    },
    "label_terminator": {
        "en": "Terminator longitude",
        "zh": "晨昏线经度",
    },
    "label_sun_world": {
        "en": "Sun (world)",
        "zh": "太阳方向（世界坐标）",
    },
    "label_moon_world": {
        "en": "Moon (world)",
        "zh": "月亮方向（世界坐标）",
    },
    "error_time": {
        "en": "Invalid time. Use YYYY-MM-DDTHH:mm. ({error})",
        "zh": "时间格式错误，请使用 YYYY-MM-DDTHH:mm。（{error}）",
    },
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key
