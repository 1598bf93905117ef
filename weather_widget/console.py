"""Interactive terminal front end for the weather widget.

Usage:
    weather-widget                 # interactive mode, loads the default city
    weather-widget --city Paris    # single lookup, prints JSON

Plain lines are treated as edits of the search box and are debounced.
``/search <city>`` runs immediately, ``/theme`` flips light/dark mode and
``/quit`` exits.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
import threading
from typing import Callable, Iterable, List, Optional, TextIO

from .presentation import ThemeToggle, render_state
from .providers.base import ProviderError, RequestConfig
from .providers.openweather import OpenWeatherProvider
from .services.search import SearchController, SearchState
from .settings import ImproperlyConfigured, Settings

logger = logging.getLogger(__name__)

_QUIT_COMMANDS = ("/quit", "/q", "/exit")


def build_provider(settings: Settings) -> OpenWeatherProvider:
    return OpenWeatherProvider(
        api_key=settings.api_key,
        base_url=settings.base_url,
        request_config=RequestConfig(timeout=settings.http_timeout),
    )


def build_controller(
    settings: Settings,
    provider: OpenWeatherProvider,
    *,
    on_change: Optional[Callable[[SearchState], None]] = None,
    notify: Optional[Callable[[str], None]] = None,
    **kwargs,
) -> SearchController:
    """Create the controller and load the default city straight away."""
    controller = SearchController(
        provider,
        debounce_seconds=settings.debounce_seconds,
        default_city=settings.default_city,
        on_change=on_change,
        notify=notify,
        **kwargs,
    )
    controller.start()
    return controller


class ConsoleView:
    """Prints state snapshots and notifications to a text stream."""

    def __init__(self, out: TextIO, theme: Optional[ThemeToggle] = None) -> None:
        self.out = out
        self.theme = theme or ThemeToggle()
        self._last_rendered: Optional[str] = None
        self._lock = threading.Lock()

    def show_state(self, state: SearchState) -> None:
        with self._lock:
            rendered = render_state(state, self.theme)
            if rendered == self._last_rendered:
                return
            self._last_rendered = rendered
            print(rendered, file=self.out, flush=True)

    def alert(self, message: str) -> None:
        with self._lock:
            print(f"! {message}", file=self.out, flush=True)


def run_interactive(controller: SearchController, view: ConsoleView, lines: Iterable[str]) -> None:
    for raw in lines:
        line = raw.rstrip("\n")
        command = line.strip()
        if command.lower() in _QUIT_COMMANDS:
            break
        if command == "/theme":
            view.theme.toggle()
            view.show_state(controller.state)
            continue
        if command == "/search" or command.startswith("/search "):
            controller.on_explicit_search(command[len("/search"):])
            continue
        controller.on_input_change(line)


def _lookup_once(settings: Settings, city: str, out: TextIO) -> int:
    provider = build_provider(settings)
    try:
        reading = provider.fetch_weather(city)
    except ProviderError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        provider.close()
    print(json.dumps(reading.to_dict()), file=out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="weather-widget", description="Current weather by city name")
    parser.add_argument("--city", type=str, help="Look up a single city and print JSON")
    parser.add_argument("--dark", action="store_true", help="Start in dark mode")
    return parser


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    args = build_parser().parse_args(argv)
    out = stdout or sys.stdout
    try:
        settings = Settings.from_env()
    except ImproperlyConfigured as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))

    if args.city is not None:
        return _lookup_once(settings, args.city, out)

    view = ConsoleView(out, ThemeToggle(dark=args.dark))
    provider = build_provider(settings)
    controller = build_controller(settings, provider, on_change=view.show_state, notify=view.alert)
    try:
        run_interactive(controller, view, stdin or sys.stdin)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        controller.close()
        provider.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
