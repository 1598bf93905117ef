"""Process-wide settings for the weather widget, read once at startup."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


class ImproperlyConfigured(RuntimeError):
    """Raised when a required setting is missing or invalid."""


def env(name: str, default: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> str:
    """Fetch environment variables while allowing explicit defaults."""

    source = os.environ if environ is None else environ
    value = source.get(name, default)
    if value is None or value == "":
        raise ImproperlyConfigured(f"Environment variable {name} is required")
    return value


def _env_number(name: str, default: str, environ: Optional[Mapping[str, str]], cast=float):
    raw = env(name, default, environ)
    try:
        return cast(raw)
    except ValueError as exc:
        raise ImproperlyConfigured(f"Environment variable {name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    api_key: str
    base_url: str = "https://api.openweathermap.org/data/2.5/weather"
    default_city: str = "Lahore"
    debounce_ms: int = 500
    http_timeout: float = 10.0
    log_level: str = "INFO"

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        debounce_ms = _env_number("WEATHER_DEBOUNCE_MS", "500", environ, cast=int)
        if debounce_ms < 0:
            raise ImproperlyConfigured("WEATHER_DEBOUNCE_MS must not be negative")
        return cls(
            api_key=env("OPENWEATHER_API_KEY", environ=environ),
            base_url=env("OPENWEATHER_BASE_URL", cls.base_url, environ),
            default_city=env("WEATHER_DEFAULT_CITY", cls.default_city, environ),
            debounce_ms=debounce_ms,
            http_timeout=_env_number("WEATHER_HTTP_TIMEOUT", "10", environ),
            log_level=env("WEATHER_LOG_LEVEL", cls.log_level, environ).upper(),
        )


__all__ = ["ImproperlyConfigured", "Settings", "env"]
