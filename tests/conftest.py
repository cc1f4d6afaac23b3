"""
Shared pytest fixtures for the api_client tests.

The client is always driven through a MagicMock standing in for
``requests.Session``: ``session.request`` is both the fake transport and the
call-count spy.  Backoff waits go to a recording ``sleep`` so no test ever
actually waits.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest
import requests

from src.api_client.client import ResilientApiClient
from src.api_client.data_builder import DataBuilder
from src.api_client.logger import RunLogger


# ---------------------------------------------------------------------------
# Fake transport helpers
# ---------------------------------------------------------------------------

def make_response(
    status_code: int = 200,
    body=None,
    text: str | None = None,
    content_type: str = "application/json",
    reason: str = "",
) -> MagicMock:
    """
    Build a response double exposing the attributes the client reads.

    ``body`` is JSON-encoded; ``text`` is used verbatim and wins over ``body``.
    """
    if text is None:
        text = "" if body is None else json.dumps(body)
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    resp.reason = reason
    resp.headers = {"Content-Type": content_type} if content_type else {}
    return resp


def echo_responder(method, url, data=None, **kwargs):  # noqa: ARG001
    """Transport that returns the request body as a 200 JSON response."""
    body = data.decode("utf-8") if isinstance(data, bytes) else (data or "")
    return make_response(200, text=body)


class RecordingSleep:
    """Callable replacement for time.sleep that records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.delays)


RESOURCE_6 = {
    "id": "6",
    "name": "Updated Name",
    "updatedAt": "2024-10-04T10:30:00Z",
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def session():
    """Session double; configure ``session.request`` per test."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def run_logger():
    return RunLogger()


@pytest.fixture
def client(session, sleep, run_logger):
    """Client with 3 attempts and a 1 s backoff unit, wired to the doubles."""
    return ResilientApiClient(
        "https://api.example.test",
        session=session,
        max_retries=3,
        retry_delay=1.0,
        logger=run_logger,
        sleep=sleep,
    )


@pytest.fixture
def builder():
    return DataBuilder(seed=1234)
