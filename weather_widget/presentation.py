"""Text rendering of search snapshots plus the light/dark theme toggle."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping

from .entities import ConditionIcon
from .services.search import SearchState

ICON_ASSETS: Mapping[ConditionIcon, str] = {
    ConditionIcon.CLEAR: "clear.png",
    ConditionIcon.CLOUD: "cloud.png",
    ConditionIcon.DRIZZLE: "drizzle.png",
    ConditionIcon.RAIN: "rain.png",
    ConditionIcon.SNOW: "snow.png",
}

SEARCH_ASSET = "search.png"
HUMIDITY_ASSET = "humidity.png"
WIND_ASSET = "wind.png"


@dataclass
class ThemeToggle:
    """Independent light/dark flag owned by the presentation layer."""

    dark: bool = False

    def toggle(self) -> bool:
        self.dark = not self.dark
        return self.dark

    @property
    def mode(self) -> str:
        return "dark" if self.dark else "light"

    @property
    def label(self) -> str:
        return f"Toggle {'Light' if self.dark else 'Dark'} Mode"


def asset_for(icon: ConditionIcon) -> str:
    return ICON_ASSETS.get(icon, ICON_ASSETS[ConditionIcon.CLEAR])


def reading_fields(state: SearchState) -> Dict[str, str]:
    """Formatted display values, empty when nothing has loaded yet."""
    reading = state.reading
    if reading is None:
        return {}
    return {
        "icon": asset_for(reading.condition_icon),
        "temperature": f"{reading.temperature}°c",
        "location": reading.location_name,
        "humidity": f"{reading.humidity_percent}%",
        "wind_speed": f"{reading.wind_speed_kmh:g} km/h",
    }


def render_state(state: SearchState, theme: ThemeToggle) -> str:
    lines: List[str] = [f"[{theme.mode}] {theme.label}"]
    if state.pending:
        lines.append("Loading...")
    fields = reading_fields(state)
    if fields:
        lines.append(f"{fields['icon']}  {fields['temperature']}")
        lines.append(fields["location"])
        lines.append(f"{HUMIDITY_ASSET}  {fields['humidity']} Humidity")
        lines.append(f"{WIND_ASSET}  {fields['wind_speed']} Wind Speed")
    return "\n".join(lines)


__all__ = [
    "ICON_ASSETS",
    "SEARCH_ASSET",
    "HUMIDITY_ASSET",
    "WIND_ASSET",
    "ThemeToggle",
    "asset_for",
    "reading_fields",
    "render_state",
]
