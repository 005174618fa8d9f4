"""
Client entry point: wires settings, transport, session and resources.

Composition root: the only place where the httpx transport is created
from configuration. Typical use:

    settings = TinyCertSettings()
    configure_structlog(settings.log_level)
    with TinyCertClient.from_settings(settings) as client:
        ca_id = client.cas.create("ACME", "Amsterdam", "NH", "NL")
        cert_id = client.certs.create(ca_id, "www.acme.test", sans=[SAN.dns("acme.test")])
        pem = client.certs.get(cert_id, What.CERTIFICATE)
"""

from __future__ import annotations

import logging
import sys
from types import TracebackType

import structlog

from tinycert.adapters.http_transport import HttpSignedTransport
from tinycert.config import TinyCertSettings
from tinycert.domain.ports import SignedTransport
from tinycert.resources import CertificateAuthorities, Certificates
from tinycert.session import Session


def configure_structlog(log_level: str = "INFO", *, json_output: bool = False) -> None:
    """
    Route the client's structlog events to stderr.

    Console rendering by default, one JSON object per line with
    `json_output=True`. Unknown level names fall back to INFO. Loggers are
    not cached, so an application may call this again to reconfigure.
    """
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


class TinyCertClient:
    """
    One session plus its two resource facades.

    Used as a context manager, connects with the configured credentials on
    enter (if not yet connected) and disconnects on exit.
    """

    def __init__(
        self,
        transport: SignedTransport,
        email: str | None = None,
        passphrase: str | None = None,
    ) -> None:
        self.session = Session(transport)
        self.cas = CertificateAuthorities(self.session)
        self.certs = Certificates(self.session)
        self._email = email
        self._passphrase = passphrase

    @classmethod
    def from_settings(cls, settings: TinyCertSettings) -> TinyCertClient:
        transport = HttpSignedTransport(
            api_key=settings.api_key.get_secret_value(),
            host=settings.host,
            timeout=settings.timeout_seconds,
        )
        passphrase = settings.passphrase.get_secret_value() if settings.passphrase else None
        return cls(transport, email=settings.email, passphrase=passphrase)

    def connect(self) -> str:
        """Connect with the configured credentials."""
        if self._email is None or self._passphrase is None:
            raise ValueError("email and passphrase must be configured to connect")
        return self.session.connect(self._email, self._passphrase)

    def __enter__(self) -> TinyCertClient:
        if not self.session.is_connected:
            self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.session.__exit__(exc_type, exc, tb)
