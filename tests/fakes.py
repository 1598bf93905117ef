"""Test doubles shared by the suite."""
from __future__ import annotations

from concurrent.futures import Executor, Future
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from weather_widget.entities import ConditionIcon, WeatherReading


class _ManualTimer:
    def __init__(self, due_ms: int, fn: Callable[[], Any]) -> None:
        self.due_ms = due_ms
        self.fn = fn
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler driven by an explicit millisecond clock."""

    def __init__(self) -> None:
        self.now_ms = 0
        self.timers: List[_ManualTimer] = []

    def schedule_after(self, delay: float, fn: Callable[[], Any]) -> _ManualTimer:
        timer = _ManualTimer(self.now_ms + round(delay * 1000), fn)
        self.timers.append(timer)
        return timer

    @property
    def active(self) -> List[_ManualTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def advance(self, ms: int) -> None:
        target = self.now_ms + ms
        while True:
            due = sorted((t for t in self.active if t.due_ms <= target), key=lambda t: t.due_ms)
            if not due:
                break
            timer = due[0]
            self.now_ms = timer.due_ms
            timer.fired = True
            timer.fn()
        self.now_ms = target


class ImmediateExecutor(Executor):
    """Runs submitted work synchronously in the calling thread."""

    def submit(self, fn, *args, **kwargs) -> Future:
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future


class DeferredExecutor(Executor):
    """Holds submitted work until a test decides which task completes."""

    def __init__(self) -> None:
        self.tasks: List[Tuple[Future, Callable[..., Any], tuple]] = []

    def submit(self, fn, *args, **kwargs) -> Future:
        future: Future = Future()
        self.tasks.append((future, fn, args))
        return future

    def run(self, index: int) -> None:
        future, fn, args = self.tasks[index]
        try:
            future.set_result(fn(*args))
        except Exception as exc:
            future.set_exception(exc)


class FakeWeather:
    """Provider stub returning scripted readings or raising scripted errors."""

    def __init__(self, results: Optional[Dict[str, Union[WeatherReading, Exception]]] = None) -> None:
        self.results = results or {}
        self.calls: List[str] = []

    def fetch_weather(self, city_name: str) -> WeatherReading:
        self.calls.append(city_name)
        result = self.results.get(city_name)
        if result is None:
            return make_reading(city_name)
        if isinstance(result, Exception):
            raise result
        return result


def make_reading(location: str, temperature: int = 20) -> WeatherReading:
    return WeatherReading(
        temperature=temperature,
        humidity_percent=50,
        wind_speed_kmh=7.2,
        location_name=location,
        condition_icon=ConditionIcon.CLOUD,
    )


def openweather_payload(
    name: str = "Lahore",
    temp: float = 31.7,
    humidity: int = 40,
    wind_speed: float = 3.2,
    icon: str = "01d",
) -> dict:
    return {
        "coord": {"lon": 74.3436, "lat": 31.5497},
        "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": icon}],
        "main": {"temp": temp, "feels_like": temp, "pressure": 1008, "humidity": humidity},
        "wind": {"speed": wind_speed, "deg": 300},
        "name": name,
        "cod": 200,
    }


