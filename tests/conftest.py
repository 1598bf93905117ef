from __future__ import annotations

import pytest

from fakes import FakeWeather, ManualScheduler


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def provider() -> FakeWeather:
    return FakeWeather()
