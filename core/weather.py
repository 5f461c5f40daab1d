# =============================================================================
# core/weather.py  -  The "get-weather" tool (Open-Meteo)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Fetches current conditions plus hourly and daily forecasts for a
#   coordinate from the Open-Meteo API (free, no API key) and turns them into
#   a multi-section text report.
#
# THE REPORT IS A SEQUENCE OF SECTIONS:
#   Each section builder below takes the decoded JSON payload and returns
#   either one text fragment or None.  format_weather_report() joins the
#   fragments that exist:
#
#     header_section    📍 coordinates, timezone, elevation
#     current_section   🌤️ current temperature, weather, humidity, wind
#     daily_section     📅 one line per day, min(forecast_days, days returned)
#     hourly_section    ⏰ the next 24 hours from the current hour
#
#   A field missing from the payload is dropped from its line; a block missing
#   from the payload drops the whole section.  Nothing here raises on a
#   partial payload.
#
# ERRORS:
#   Open-Meteo reports bad requests as HTTP 400 with {"error": true,
#   "reason": "..."}.  That body is checked FIRST so the caller sees the
#   reason (UpstreamAPIError); any other non-2xx is UpstreamRequestError.
# =============================================================================

import logging
from typing import Any, Callable, Optional, Sequence

from core.context import ToolContext
from core.errors import UpstreamAPIError, UpstreamRequestError
from core.models import InvocationResult
from core.schemas import WeatherInput

logger = logging.getLogger(__name__)

OPEN_METEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

CURRENT_FIELDS = (
    "temperature_2m",
    "relative_humidity_2m",
    "weather_code",
    "wind_speed_10m",
    "wind_direction_10m",
)
HOURLY_FIELDS = (
    "temperature_2m",
    "relative_humidity_2m",
    "precipitation",
    "weather_code",
    "wind_speed_10m",
    "wind_direction_10m",
)
DAILY_FIELDS = (
    "weather_code",
    "temperature_2m_max",
    "temperature_2m_min",
    "precipitation_sum",
    "wind_speed_10m_max",
)

HOURLY_WINDOW = 24

_DEFAULT_UNITS = {
    "temperature_2m": "°C",
    "temperature_2m_max": "°C",
    "temperature_2m_min": "°C",
    "relative_humidity_2m": "%",
    "precipitation": "mm",
    "precipitation_sum": "mm",
    "wind_speed_10m": "km/h",
    "wind_speed_10m_max": "km/h",
    "wind_direction_10m": "°",
}


# =============================================================================
# WMO Weather Code Mapping
# =============================================================================
# Open-Meteo returns WMO (World Meteorological Organization) weather codes
# instead of human-readable strings.  Codes not listed here are decoded as
# "unknown" rather than failing.
# =============================================================================
WEATHER_CODES: dict[int, str] = {
    0: "☀️ 맑음",
    1: "🌤️ 대체로 맑음",
    2: "⛅ 부분적으로 흐림",
    3: "☁️ 흐림",
    45: "🌫️ 안개",
    48: "🌫️ 서리 안개",
    51: "🌦️ 약한 이슬비",
    53: "🌦️ 이슬비",
    55: "🌧️ 강한 이슬비",
    56: "🌧️ 약한 어는 이슬비",
    57: "🌧️ 강한 어는 이슬비",
    61: "🌧️ 약한 비",
    63: "🌧️ 비",
    65: "🌧️ 강한 비",
    66: "🌨️ 약한 어는 비",
    67: "🌨️ 강한 어는 비",
    71: "🌨️ 약한 눈",
    73: "❄️ 눈",
    75: "❄️ 강한 눈",
    77: "🌨️ 싸락눈",
    80: "🌦️ 약한 소나기",
    81: "🌧️ 소나기",
    82: "⛈️ 강한 소나기",
    85: "🌨️ 약한 눈 소나기",
    86: "❄️ 강한 눈 소나기",
    95: "⛈️ 뇌우",
    96: "⛈️ 약한 우박을 동반한 뇌우",
    99: "⛈️ 강한 우박을 동반한 뇌우",
}

_COMPASS_POINTS = ("북", "북동", "동", "남동", "남", "남서", "서", "북서")


def describe_weather_code(code: Any) -> str:
    """Decode a WMO code; unknown or missing codes never raise."""
    try:
        key = int(code)
    except (TypeError, ValueError):
        return "❓ 알 수 없음"
    return WEATHER_CODES.get(key, f"❓ 알 수 없음 (코드 {key})")


def compass_direction(degrees: Any) -> Optional[str]:
    """Map 0-360° to one of eight Korean compass points (0° = 북)."""
    try:
        value = float(degrees) % 360
    except (TypeError, ValueError):
        return None
    return _COMPASS_POINTS[int((value + 22.5) // 45) % 8]


# =============================================================================
# Request
# =============================================================================
def build_query_params(args: WeatherInput) -> dict[str, str]:
    return {
        "latitude": str(args.latitude),
        "longitude": str(args.longitude),
        "forecast_days": str(args.forecast_days),
        "timezone": args.timezone or "auto",
        "current": ",".join(CURRENT_FIELDS),
        "hourly": ",".join(HOURLY_FIELDS),
        "daily": ",".join(DAILY_FIELDS),
    }


async def fetch_forecast(args: WeatherInput, context: ToolContext) -> dict[str, Any]:
    """Call Open-Meteo and return the decoded payload.

    Raises:
        UpstreamAPIError: the API answered with {"error": true, "reason": ...}.
        UpstreamRequestError: any other non-2xx, transport failure, timeout,
            or a body that is not a JSON object.
    """
    response = await context.get(OPEN_METEO_FORECAST_URL, params=build_query_params(args))

    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict) and payload.get("error"):
        raise UpstreamAPIError(str(payload.get("reason", "알 수 없는 오류")), label="날씨 API 오류")
    if not response.is_success:
        raise UpstreamRequestError.from_status(response.status_code)
    if not isinstance(payload, dict):
        raise UpstreamRequestError("API 요청 실패: 잘못된 JSON 응답")
    return payload


# =============================================================================
# Section builders
# =============================================================================
def _unit(payload: dict, block: str, field: str) -> str:
    units = payload.get(f"{block}_units") or {}
    return units.get(field) or _DEFAULT_UNITS.get(field, "")


def _at(values: Any, index: int) -> Any:
    if isinstance(values, Sequence) and not isinstance(values, str) and index < len(values):
        return values[index]
    return None


def _wind(speed: Any, direction: Any, unit: str) -> Optional[str]:
    if speed is None:
        return None
    text = f"{speed} {unit}"
    compass = compass_direction(direction)
    if compass is not None:
        text += f" ({compass}, {direction}°)"
    return text


def header_section(payload: dict, args: WeatherInput) -> Optional[str]:
    latitude = payload.get("latitude", args.latitude)
    longitude = payload.get("longitude", args.longitude)
    lines = [f"📍 위치: 위도 {latitude}, 경도 {longitude}"]

    tz = payload.get("timezone")
    if tz:
        abbreviation = payload.get("timezone_abbreviation")
        lines.append(f"🕐 시간대: {tz}" + (f" ({abbreviation})" if abbreviation else ""))
    if payload.get("elevation") is not None:
        lines.append(f"⛰️ 고도: {payload['elevation']}m")
    return "\n".join(lines)


def current_section(payload: dict, args: WeatherInput) -> Optional[str]:
    current = payload.get("current")
    if not isinstance(current, dict):
        return None

    lines = ["🌤️ 현재 날씨"]
    if current.get("temperature_2m") is not None:
        lines.append(f"온도: {current['temperature_2m']}{_unit(payload, 'current', 'temperature_2m')}")
    if current.get("weather_code") is not None:
        lines.append(f"날씨: {describe_weather_code(current['weather_code'])}")
    if current.get("relative_humidity_2m") is not None:
        lines.append(
            f"습도: {current['relative_humidity_2m']}{_unit(payload, 'current', 'relative_humidity_2m')}"
        )
    wind = _wind(
        current.get("wind_speed_10m"),
        current.get("wind_direction_10m"),
        _unit(payload, "current", "wind_speed_10m"),
    )
    if wind:
        lines.append(f"바람: {wind}")
    if current.get("time"):
        lines.append(f"관측 시각: {current['time']}")

    return "\n".join(lines) if len(lines) > 1 else None


def daily_section(payload: dict, args: WeatherInput) -> Optional[str]:
    daily = payload.get("daily")
    if not isinstance(daily, dict) or not daily.get("time"):
        return None

    days = min(len(daily["time"]), args.forecast_days)
    t_unit = _unit(payload, "daily", "temperature_2m_max")
    p_unit = _unit(payload, "daily", "precipitation_sum")
    w_unit = _unit(payload, "daily", "wind_speed_10m_max")

    lines = [f"📅 {days}일 예보"]
    for i in range(days):
        parts = []
        low = _at(daily.get("temperature_2m_min"), i)
        high = _at(daily.get("temperature_2m_max"), i)
        if low is not None and high is not None:
            parts.append(f"{low}{t_unit} ~ {high}{t_unit}")
        elif high is not None:
            parts.append(f"최고 {high}{t_unit}")
        elif low is not None:
            parts.append(f"최저 {low}{t_unit}")
        code = _at(daily.get("weather_code"), i)
        if code is not None:
            parts.append(describe_weather_code(code))
        precipitation = _at(daily.get("precipitation_sum"), i)
        if precipitation is not None:
            parts.append(f"강수량 {precipitation}{p_unit}")
        wind = _at(daily.get("wind_speed_10m_max"), i)
        if wind is not None:
            parts.append(f"최대 풍속 {wind} {w_unit}")
        date = daily["time"][i]
        lines.append(f"{date}: " + ", ".join(parts) if parts else str(date))
    return "\n".join(lines)


def hourly_start(hourly_times: list, current_time: Optional[str]) -> int:
    """Index of the first hourly slot at or after the current hour."""
    if not current_time:
        return 0
    current_hour = current_time[:13]  # "YYYY-MM-DDTHH"
    for i, stamp in enumerate(hourly_times):
        if str(stamp)[:13] >= current_hour:
            return i
    return len(hourly_times)


def hourly_section(payload: dict, args: WeatherInput) -> Optional[str]:
    hourly = payload.get("hourly")
    if not isinstance(hourly, dict) or not hourly.get("time"):
        return None

    times = hourly["time"]
    current = payload.get("current") or {}
    start = hourly_start(times, current.get("time"))
    end = min(start + HOURLY_WINDOW, len(times))
    if start >= end:
        return None

    t_unit = _unit(payload, "hourly", "temperature_2m")
    h_unit = _unit(payload, "hourly", "relative_humidity_2m")
    p_unit = _unit(payload, "hourly", "precipitation")
    w_unit = _unit(payload, "hourly", "wind_speed_10m")

    lines = [f"⏰ 시간별 예보 (향후 {end - start}시간)"]
    for i in range(start, end):
        parts = []
        temperature = _at(hourly.get("temperature_2m"), i)
        if temperature is not None:
            parts.append(f"{temperature}{t_unit}")
        humidity = _at(hourly.get("relative_humidity_2m"), i)
        if humidity is not None:
            parts.append(f"습도 {humidity}{h_unit}")
        precipitation = _at(hourly.get("precipitation"), i)
        if precipitation:
            parts.append(f"강수 {precipitation}{p_unit}")
        wind = _wind(_at(hourly.get("wind_speed_10m"), i), _at(hourly.get("wind_direction_10m"), i), w_unit)
        if wind:
            parts.append(f"바람 {wind}")
        code = _at(hourly.get("weather_code"), i)
        if code is not None:
            parts.append(describe_weather_code(code))
        stamp = str(times[i]).replace("T", " ")
        lines.append(f"{stamp}: " + ", ".join(parts) if parts else stamp)
    return "\n".join(lines)


SECTION_BUILDERS: tuple[Callable[[dict, WeatherInput], Optional[str]], ...] = (
    header_section,
    current_section,
    daily_section,
    hourly_section,
)


def format_weather_report(payload: dict, args: WeatherInput) -> str:
    fragments = (build(payload, args) for build in SECTION_BUILDERS)
    return "\n\n".join(fragment for fragment in fragments if fragment)


# =============================================================================
# Handler
# =============================================================================
async def get_weather(args: WeatherInput, context: ToolContext) -> InvocationResult:
    payload = await fetch_forecast(args, context)
    logger.info(
        "Forecast for %s,%s: %d daily / %d hourly entries",
        args.latitude,
        args.longitude,
        len((payload.get("daily") or {}).get("time") or []),
        len((payload.get("hourly") or {}).get("time") or []),
    )
    return InvocationResult.text(format_weather_report(payload, args))
