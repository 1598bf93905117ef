"""Pydantic schemas for the OpenWeather current weather payload."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

__all__ = ["CurrentWeatherPayload", "ErrorPayload"]


class _Main(BaseModel):
    temp: float
    humidity: int = Field(ge=0, le=100)


class _Wind(BaseModel):
    speed: float = Field(ge=0)


class _Condition(BaseModel):
    icon: Optional[str] = None


class CurrentWeatherPayload(BaseModel):
    """The subset of ``/data/2.5/weather`` the widget relies on.

    Extra keys are ignored so provider additions never break parsing.
    """

    main: _Main
    wind: _Wind
    weather: List[_Condition]
    name: str

    @field_validator("weather")
    @classmethod
    def _require_condition(cls, value: List[_Condition]) -> List[_Condition]:
        if not value:
            raise ValueError("weather must contain at least one condition")
        return value

    @property
    def icon_code(self) -> Optional[str]:
        return self.weather[0].icon


class ErrorPayload(BaseModel):
    """Body returned alongside non-2xx statuses."""

    cod: Optional[str] = None
    message: Optional[str] = None

    @field_validator("cod", mode="before")
    @classmethod
    def _coerce_code(cls, value: object) -> Optional[str]:
        # OpenWeather sends "404" for some errors and 401 for others.
        if value is None:
            return None
        return str(value)
