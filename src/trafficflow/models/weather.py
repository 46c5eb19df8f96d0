"""Open-Meteo weather response model and WMO code descriptions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

WMO_WEATHER_CODES: dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snowfall",
    73: "Moderate snowfall",
    75: "Heavy snowfall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}


def describe_weather_code(code: int | None) -> str | None:
    """Return the description of a WMO weather code, or None if unknown."""
    if code is None:
        return None
    return WMO_WEATHER_CODES.get(code)


class CurrentWeather(BaseModel):
    """The ``current`` block of an Open-Meteo forecast response."""

    model_config = ConfigDict(frozen=True)

    time: str | None = None
    temperature_2m: float | None = None
    weather_code: int | None = None
