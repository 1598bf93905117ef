"""OpenWeather current weather lookup by city name."""
from __future__ import annotations

import math
from typing import Optional

from pydantic import ValidationError

from .base import EmptyInput, TransportFailure, WeatherProvider
from ..entities import WeatherReading, icon_for_code
from ..schemas import CurrentWeatherPayload


def _ms_to_kmh(value: float) -> float:
    return round(value * 3.6, 2)


class OpenWeatherProvider(WeatherProvider):
    name = "openweather"
    base_url = "https://api.openweathermap.org/data/2.5/weather"
    units = "metric"

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key
        self.base_url = base_url or self.base_url

    # Public API ---------------------------------------------------------
    def fetch_weather(self, city_name: str) -> WeatherReading:
        """Return the current reading for *city_name*.

        Raises EmptyInput, ProviderRejected or TransportFailure.
        """
        city = (city_name or "").strip()
        if not city:
            raise EmptyInput()

        params = {"q": city, "units": self.units, "appid": self.api_key}
        self._log.info("Fetching weather for %s", city)
        response = self._request("GET", self.base_url, params=params)
        payload = self._parse(self._json(response))
        return self._build_reading(payload)

    # helpers ------------------------------------------------------------
    def _parse(self, data: object) -> CurrentWeatherPayload:
        try:
            return CurrentWeatherPayload.model_validate(data)
        except ValidationError as exc:
            self._log.error("Unexpected payload shape: %s", exc)
            raise TransportFailure("malformed payload") from exc

    def _build_reading(self, payload: CurrentWeatherPayload) -> WeatherReading:
        return WeatherReading(
            temperature=math.floor(payload.main.temp),
            humidity_percent=payload.main.humidity,
            wind_speed_kmh=_ms_to_kmh(payload.wind.speed),
            location_name=payload.name,
            condition_icon=icon_for_code(payload.icon_code),
        )


__all__ = ["OpenWeatherProvider"]
