from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ConditionIcon(str, Enum):
    """Icon keys understood by the presentation layer."""

    CLEAR = "clear"
    CLOUD = "cloud"
    DRIZZLE = "drizzle"
    RAIN = "rain"
    SNOW = "snow"


# OpenWeather icon codes; day ("d") and night ("n") variants share an icon.
ICON_CODES: Mapping[str, ConditionIcon] = {
    "01d": ConditionIcon.CLEAR,
    "01n": ConditionIcon.CLEAR,
    "02d": ConditionIcon.CLOUD,
    "02n": ConditionIcon.CLOUD,
    "03d": ConditionIcon.CLOUD,
    "03n": ConditionIcon.CLOUD,
    "04d": ConditionIcon.DRIZZLE,
    "04n": ConditionIcon.DRIZZLE,
    "09d": ConditionIcon.RAIN,
    "09n": ConditionIcon.RAIN,
    "10d": ConditionIcon.RAIN,
    "10n": ConditionIcon.RAIN,
    "13d": ConditionIcon.SNOW,
    "13n": ConditionIcon.SNOW,
}

DEFAULT_ICON = ConditionIcon.CLEAR


def icon_for_code(code: Optional[str]) -> ConditionIcon:
    """Map a provider icon code to a :class:`ConditionIcon`, defaulting to clear."""
    if not code:
        return DEFAULT_ICON
    return ICON_CODES.get(code, DEFAULT_ICON)


@dataclass(frozen=True)
class WeatherReading:
    """Normalized weather snapshot for one location.

    Values use the units shown to the user:
    - temperature in whole degrees Celsius (floored)
    - humidity in percent
    - wind speed in kilometres per hour (km/h)
    """

    temperature: int
    humidity_percent: int
    wind_speed_kmh: float
    location_name: str
    condition_icon: ConditionIcon

    def to_dict(self) -> Dict[str, Any]:
        return {
            "temperature": self.temperature,
            "humidity_percent": self.humidity_percent,
            "wind_speed_kmh": self.wind_speed_kmh,
            "location_name": self.location_name,
            "condition_icon": self.condition_icon.value,
        }


__all__ = ["ConditionIcon", "ICON_CODES", "DEFAULT_ICON", "icon_for_code", "WeatherReading"]
