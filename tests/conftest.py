"""
Shared test fixtures and helpers for the tinycert test suite.

Provides an in-memory FakeTransport that implements the SignedTransport
port: it records every call and replays queued (or computed) responses,
so Session and resource tests never touch the network.
"""

from __future__ import annotations

import json
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import pytest

from tinycert.domain.ports import FieldMap, RawResponse
from tinycert.session import Session

API_KEY = b"test-api-key"
TOKEN = "session-token-123"


@dataclass(frozen=True)
class RecordedCall:
    endpoint: str
    fields: dict[str, str | None]
    timeout: float | None


def json_response(status: int, payload: Any, endpoint: str = "") -> RawResponse:
    """Build a RawResponse whose body is `payload` serialized as JSON."""
    return RawResponse(status_code=status, body=json.dumps(payload).encode(), endpoint=endpoint)


class FakeTransport:
    """
    SignedTransport double.

    Responses are served from a FIFO queue, or from `handler` when set
    (a callable receiving endpoint and fields, used to simulate the service).
    """

    def __init__(self) -> None:
        self.calls: list[RecordedCall] = []
        self.handler: Callable[[str, dict[str, str | None]], RawResponse] | None = None
        self._responses: deque[RawResponse | BaseException] = deque()

    def queue(self, status: int, payload: Any = None, *, body: bytes | None = None) -> None:
        if body is not None:
            self._responses.append(RawResponse(status_code=status, body=body))
        else:
            self._responses.append(json_response(status, payload))

    def queue_exception(self, exc: BaseException) -> None:
        self._responses.append(exc)

    def send(self, endpoint: str, fields: FieldMap, *, timeout: float | None = None) -> RawResponse:
        recorded = dict(fields)
        self.calls.append(RecordedCall(endpoint=endpoint, fields=recorded, timeout=timeout))
        if self.handler is not None:
            return self.handler(endpoint, recorded)
        item = self._responses.popleft()
        if isinstance(item, BaseException):
            raise item
        return RawResponse(status_code=item.status_code, body=item.body, endpoint=endpoint)

    @property
    def last(self) -> RecordedCall:
        return self.calls[-1]


@pytest.fixture()
def fake_transport() -> FakeTransport:
    """A fresh FakeTransport with an empty response queue."""
    return FakeTransport()


@pytest.fixture()
def session(fake_transport: FakeTransport) -> Session:
    """A Session already connected with TOKEN; the connect call is not kept in `calls`."""
    fake_transport.queue(200, {"token": TOKEN})
    session = Session(fake_transport)
    session.connect("user@example.com", "passphrase")
    fake_transport.calls.clear()
    return session
