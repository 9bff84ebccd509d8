"""Pytest fixtures for retdec tests."""

import json

import pytest

from retdec.config import DEFAULT_API_URL
from retdec.services.connection import APIResponse
from retdec.services.memory import InMemoryAPIConnection


def json_response(content, status_code: int = 200, status_message: str = "OK") -> APIResponse:
    return APIResponse(
        status_code=status_code,
        status_message=status_message,
        headers=[("Content-Type", "application/json")],
        body=json.dumps(content).encode("utf-8"),
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's RETDEC_* variables out of the tests."""
    for name in ("RETDEC_API_KEY", "RETDEC_API_URL", "RETDEC_REQUEST_TIMEOUT_S", "RETDEC_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def conn():
    return InMemoryAPIConnection(DEFAULT_API_URL)


@pytest.fixture
def sleeps(monkeypatch):
    """Replace time.sleep in the polling loop and record requested delays."""
    calls: list[float] = []
    monkeypatch.setattr("retdec.services.resource.time.sleep", calls.append)
    return calls
