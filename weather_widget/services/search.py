from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Protocol

from ..entities import WeatherReading
from ..providers.base import EmptyInput, ErrorKind, ProviderError, ProviderRejected, TransportFailure
from ..scheduling import Debouncer, Scheduler, ThreadingScheduler


class WeatherQuery(Protocol):
    """Anything that turns a city name into a reading."""

    def fetch_weather(self, city_name: str) -> WeatherReading:
        ...


class SearchPhase(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    IN_FLIGHT = "in_flight"


@dataclass(frozen=True)
class SearchState:
    """Snapshot of the search pipeline as seen by the presentation layer."""

    pending: bool = False
    reading: Optional[WeatherReading] = None
    last_error: Optional[ErrorKind] = None
    message: Optional[str] = None
    phase: SearchPhase = SearchPhase.IDLE
    query: Optional[str] = None


class SearchController:
    """Debounced, sequence-guarded search over a :class:`WeatherQuery`.

    Only the controller writes :class:`SearchState`; listeners receive
    immutable snapshots through ``on_change``. Every search takes the next
    sequence number and a result is applied only if its number is still the
    latest issued, so a slow response can never overwrite a newer one.
    """

    EMPTY_INPUT_MESSAGE = "Enter City Name"
    TRANSPORT_FAILURE_MESSAGE = "Error fetching weather data"
    DEFAULT_CITY = "Lahore"
    DEBOUNCE_SECONDS = 0.5

    def __init__(
        self,
        provider: WeatherQuery,
        *,
        scheduler: Optional[Scheduler] = None,
        executor: Optional[Executor] = None,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        default_city: str = DEFAULT_CITY,
        on_change: Optional[Callable[[SearchState], None]] = None,
        notify: Optional[Callable[[str], None]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._provider = provider
        self._debouncer = Debouncer(scheduler or ThreadingScheduler(), debounce_seconds)
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=4, thread_name_prefix="weather-query")
        self.default_city = default_city
        self._on_change = on_change
        self._notify = notify
        self._log = logger or logging.getLogger(self.__class__.__name__)
        self._lock = threading.Lock()
        # Serialises on_change calls; reentrant so listeners may call back in.
        self._publish_lock = threading.RLock()
        self._state = SearchState()
        self._sequence = 0
        self._closed = False

    # Public API ---------------------------------------------------------
    @property
    def state(self) -> SearchState:
        with self._lock:
            return self._state

    @property
    def sequence(self) -> int:
        """Number of searches started so far."""
        with self._lock:
            return self._sequence

    def start(self) -> Optional[Future]:
        """Load the default city once, bypassing the debounce window."""
        self._log.info("Loading default city %s", self.default_city)
        return self.run_search(self.default_city)

    def on_input_change(self, raw_text: str) -> None:
        self._ensure_open()
        self._transition(lambda state: replace(state, phase=SearchPhase.DEBOUNCING))
        self._debouncer.call(self.run_search, raw_text)

    def on_explicit_search(self, raw_text: str) -> Optional[Future]:
        self._ensure_open()
        self._debouncer.cancel()
        return self.run_search(raw_text)

    def cancel_pending(self) -> bool:
        """Drop a debounced search that has not fired yet."""
        cancelled = self._debouncer.cancel()
        if cancelled:
            self._transition(lambda state: replace(state, phase=self._resting_phase(state.pending)))
        return cancelled

    def run_search(self, text: str) -> Optional[Future]:
        """Start a search for *text*.

        Returns the future of the provider call, or None when the input was
        rejected before any query was issued or the controller is closed.
        """
        city = (text or "").strip()
        with self._lock:
            if self._closed:
                # A debounce timer can fire while close() is running.
                self._log.debug("Ignoring search for %r after close", city)
                return None
            self._sequence += 1
            sequence = self._sequence
            if city:
                self._state = replace(self._state, pending=True, phase=SearchPhase.IN_FLIGHT, query=city)
        if not city:
            self._settle_error(sequence, EmptyInput())
            return None

        self._log.debug("Search #%s started for %s", sequence, city)
        self._emit()
        try:
            future = self._executor.submit(self._provider.fetch_weather, city)
        except RuntimeError:
            if not self._closed:
                raise
            self._log.debug("Controller closed before search #%s was submitted", sequence)
            return None
        future.add_done_callback(lambda done: self._complete(sequence, done))
        return future

    def close(self, wait: bool = True) -> None:
        """Cancel the pending debounce and stop the executor this controller created.

        With *wait*, searches already in flight are allowed to settle first.
        """
        self._debouncer.cancel()
        with self._lock:
            self._closed = True
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def __enter__(self) -> SearchController:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # Helpers ------------------------------------------------------------
    def _complete(self, sequence: int, future: Future) -> None:
        try:
            reading = future.result()
        except ProviderError as exc:
            self._settle_error(sequence, exc)
            return
        except Exception as exc:
            self._log.error("Unexpected error from weather provider", exc_info=exc)
            self._settle_error(sequence, TransportFailure(str(exc)))
            return
        self._settle_success(sequence, reading)

    def _settle_success(self, sequence: int, reading: WeatherReading) -> None:
        with self._lock:
            if not self._is_current(sequence):
                return
            self._state = replace(
                self._state,
                pending=False,
                reading=reading,
                last_error=None,
                message=None,
                phase=self._resting_phase(pending=False),
            )
        self._log.info("Weather updated for %s", reading.location_name)
        self._emit()

    def _settle_error(self, sequence: int, error: ProviderError) -> None:
        message = self._user_message(error)
        with self._lock:
            if not self._is_current(sequence):
                return
            # Only a success replaces the reading.
            self._state = replace(
                self._state,
                pending=False,
                last_error=error.kind,
                message=message,
                phase=self._resting_phase(pending=False),
            )
        if error.kind is ErrorKind.PROVIDER_REJECTED:
            self._log.warning("Search #%s rejected by provider: %s", sequence, message)
        else:
            self._log.info("Search #%s failed (%s): %s", sequence, error.kind.value, message)
        self._emit()
        if self._notify is not None:
            self._notify(message)

    def _is_current(self, sequence: int) -> bool:
        if sequence != self._sequence:
            self._log.debug("Discarding stale result #%s (latest is #%s)", sequence, self._sequence)
            return False
        return True

    def _resting_phase(self, pending: bool) -> SearchPhase:
        if self._debouncer.pending:
            return SearchPhase.DEBOUNCING
        if pending:
            return SearchPhase.IN_FLIGHT
        return SearchPhase.IDLE

    def _user_message(self, error: ProviderError) -> str:
        if isinstance(error, EmptyInput):
            return self.EMPTY_INPUT_MESSAGE
        if isinstance(error, ProviderRejected):
            return error.message
        return self.TRANSPORT_FAILURE_MESSAGE

    def _transition(self, update: Callable[[SearchState], SearchState]) -> None:
        with self._lock:
            self._state = update(self._state)
        self._emit()

    def _emit(self) -> None:
        """Publish the latest state, never a snapshot captured earlier."""
        if self._on_change is None:
            return
        with self._publish_lock:
            with self._lock:
                state = self._state
            self._on_change(state)

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("search controller is closed")


__all__ = ["WeatherQuery", "SearchPhase", "SearchState", "SearchController"]
