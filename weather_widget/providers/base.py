from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import requests
from requests import Response

from ..schemas import ErrorPayload


class ErrorKind(str, Enum):
    EMPTY_INPUT = "empty_input"
    PROVIDER_REJECTED = "provider_rejected"
    TRANSPORT_FAILURE = "transport_failure"


class ProviderError(RuntimeError):
    """Base provider error."""

    kind: ErrorKind = ErrorKind.TRANSPORT_FAILURE


class EmptyInput(ProviderError):
    """Raised before any I/O when the city name is blank."""

    kind = ErrorKind.EMPTY_INPUT

    def __init__(self) -> None:
        super().__init__("Enter City Name")


class ProviderRejected(ProviderError):
    """Raised when the provider answers with a non-2xx status."""

    kind = ErrorKind.PROVIDER_REJECTED

    def __init__(self, status_code: int, message: Optional[str] = None) -> None:
        self.status_code = status_code
        self.message = message or f"HTTP {status_code}"
        super().__init__(self.message)


class TransportFailure(ProviderError):
    """Raised on network errors and unparseable responses."""

    kind = ErrorKind.TRANSPORT_FAILURE


@dataclass
class RequestConfig:
    timeout: float = 10.0


class WeatherProvider:
    """Base class that adds timeouts and error classification for HTTP providers.

    A single attempt is made per call; callers decide whether to try again.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self.request_config = request_config or RequestConfig()
        self.session = session or requests.Session()
        self._log = logging.getLogger(self.__class__.__name__)

    def close(self) -> None:
        self.session.close()

    def _handle_response(self, response: Response) -> Response:
        if response.status_code >= 300:
            message = self._error_message(response)
            self._log.warning("Provider returned %s: %s", response.status_code, message)
            raise ProviderRejected(response.status_code, message)
        return response

    def _error_message(self, response: Response) -> Optional[str]:
        try:
            return ErrorPayload.model_validate(response.json()).message or None
        except ValueError:
            return None

    def _request(self, method: str, url: str, **kwargs: Any) -> Response:
        try:
            response = self.session.request(
                method,
                url,
                timeout=self.request_config.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            self._log.error("Request timed out", exc_info=exc)
            raise TransportFailure("timeout") from exc
        except requests.RequestException as exc:
            self._log.error("Request failed", exc_info=exc)
            raise TransportFailure("request failed") from exc
        return self._handle_response(response)

    def _json(self, response: Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            self._log.error("Failed to decode JSON", exc_info=exc)
            raise TransportFailure("invalid json") from exc


__all__ = [
    "ErrorKind",
    "ProviderError",
    "EmptyInput",
    "ProviderRejected",
    "TransportFailure",
    "RequestConfig",
    "WeatherProvider",
]
