"""
Ports: Protocol-based interfaces between the session and the network.

The session depends only on the SignedTransport contract, so tests can
swap the httpx adapter for an in-memory fake:

  Session ← SignedTransport (protocol) ← HttpSignedTransport (httpx)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol, TypeAlias, runtime_checkable

FieldMap: TypeAlias = Mapping[str, str | None]


@dataclass(frozen=True, slots=True)
class RawResponse:
    """
    Status and body of an HTTP exchange, before any decoding.

    Produced for every response the server sends, including non-2xx ones.
    """

    status_code: int
    body: bytes = field(repr=False)
    endpoint: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class SignedTransport(Protocol):
    """
    Port: sign a field map and POST it to an API endpoint.

    Returns the RawResponse whatever its status. Raises TransportFailure
    when no response could be obtained at all.
    """

    def send(
        self,
        endpoint: str,
        fields: FieldMap,
        *,
        timeout: float | None = None,
    ) -> RawResponse: ...
