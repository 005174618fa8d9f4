"""
Session: the authenticated context every API call runs in.

Owns the server-issued session token and the signed transport (which
holds the shared API key). It is the only stateful object of the client:

  connect()     → POST connect {email, passphrase}  → stores token
  disconnect()  → POST disconnect {token}           → clears token on success
  request_*()   → sign + send + dispatch, used by the resource facades

Sessions share nothing, so several can be used side by side. A single
Session is not safe for concurrent connect/disconnect without external
locking.
"""

from __future__ import annotations

from types import TracebackType
from typing import TypeVar

import structlog
from pydantic import BaseModel

from tinycert.dispatch import decode_array, decode_object, raise_for_error
from tinycert.domain.errors import TinyCertError
from tinycert.domain.models import ConnectResponse
from tinycert.domain.ports import FieldMap, SignedTransport

log = structlog.get_logger()

M = TypeVar("M", bound=BaseModel)

TOKEN_FIELD = "token"


class Session:
    """
    Authenticated API session.

        session = Session(HttpSignedTransport(api_key))
        session.connect("me@example.com", "passphrase")
        cas = CertificateAuthorities(session).list()
        session.disconnect()
    """

    def __init__(self, transport: SignedTransport) -> None:
        self._transport = transport
        self._token: str | None = None

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_connected(self) -> bool:
        return self._token is not None

    def connect(self, email: str, passphrase: str, *, timeout: float | None = None) -> str:
        """
        Authenticate and store the session token.

        Raises ApiError when the service rejects the credentials.
        """
        response = self.request_object(
            ConnectResponse,
            "connect",
            {"email": email, "passphrase": passphrase},
            timeout=timeout,
        )
        self._token = response.token
        log.info("session.connected")
        return response.token

    def disconnect(self, *, timeout: float | None = None) -> None:
        """
        Invalidate the session token on the server.

        The local token is cleared only once the server confirms; on any
        error it is kept and the error propagates.
        """
        self.request_ack("disconnect", self.authorized({}), timeout=timeout)
        self._token = None
        log.info("session.disconnected")

    def authorized(self, fields: FieldMap) -> dict[str, str | None]:
        """Copy of `fields` carrying the current session token."""
        return {**fields, TOKEN_FIELD: self._token}

    # ─────────────────────── Transport + dispatch primitives ───────────────────────

    def request_object(
        self,
        shape: type[M],
        endpoint: str,
        fields: FieldMap,
        *,
        timeout: float | None = None,
    ) -> M:
        """Call `endpoint` and decode the response as a single `shape`."""
        return decode_object(shape, self._transport.send(endpoint, fields, timeout=timeout))

    def request_array(
        self,
        shape: type[M],
        endpoint: str,
        fields: FieldMap,
        *,
        timeout: float | None = None,
    ) -> list[M]:
        """Call `endpoint` and decode the response as a list of `shape`."""
        return decode_array(shape, self._transport.send(endpoint, fields, timeout=timeout))

    def request_ack(
        self,
        endpoint: str,
        fields: FieldMap,
        *,
        timeout: float | None = None,
    ) -> None:
        """Call `endpoint` for its side effect; the success body is discarded."""
        raise_for_error(self._transport.send(endpoint, fields, timeout=timeout))

    # ─────────────────────── Context manager ───────────────────────

    def __enter__(self) -> Session:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if not self.is_connected:
            return
        if exc is None:
            self.disconnect()
            return
        # the body's exception wins; a failed disconnect is only attached to it
        try:
            self.disconnect()
        except TinyCertError as e:
            log.warning("session.disconnect_failed", error=type(e).__name__)
            exc.add_note(f"disconnect during cleanup also failed: {e!r}")
