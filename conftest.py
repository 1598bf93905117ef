from __future__ import annotations

import os

import pytest
import requests_mock as requests_mock_lib


os.environ.setdefault("OPENWEATHER_API_KEY", "test-key")


@pytest.fixture()
def requests_mock():
    with requests_mock_lib.Mocker(case_sensitive=True) as mocker:
        yield mocker
