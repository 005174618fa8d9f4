"""
Certificate authority resource: create, inspect, fetch and delete CAs.

Stateless facade over a Session: each method assembles the field map for
one endpoint, attaches the session token and returns a typed result.
"""

from __future__ import annotations

import structlog

from tinycert.domain.constants import HashAlgorithm, What
from tinycert.domain.models import CADetails, CAIDResponse, CAListItem, GetResponse
from tinycert.session import Session

log = structlog.get_logger()


class CertificateAuthorities:
    """Operations on the `ca/*` endpoints."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(
        self,
        organization: str,
        locality: str,
        state: str,
        country: str,
        hash_method: HashAlgorithm | str = HashAlgorithm.SHA256,
        *,
        timeout: float | None = None,
    ) -> int:
        """Create a new certificate authority and return its id."""
        fields = self._session.authorized(
            {
                "C": country,
                "L": locality,
                "O": organization,
                "ST": state,
                "hash_method": str(hash_method),
            }
        )
        ca_id = self._session.request_object(CAIDResponse, "ca/new", fields, timeout=timeout).ca_id
        log.info("ca.created", ca_id=ca_id)
        return ca_id

    def delete(self, ca_id: int, *, timeout: float | None = None) -> None:
        """Delete a certificate authority together with its certificates."""
        fields = self._session.authorized({"ca_id": str(ca_id)})
        self._session.request_ack("ca/delete", fields, timeout=timeout)
        log.info("ca.deleted", ca_id=ca_id)

    def details(self, ca_id: int, *, timeout: float | None = None) -> CADetails:
        fields = self._session.authorized({"ca_id": str(ca_id)})
        return self._session.request_object(CADetails, "ca/details", fields, timeout=timeout)

    def get(self, ca_id: int, what: What | str, *, timeout: float | None = None) -> str | None:
        """Fetch one artefact of the CA; PEM text, or the PKCS#12 bundle if that was asked for."""
        fields = self._session.authorized({"ca_id": str(ca_id), "what": str(what)})
        return self._session.request_object(GetResponse, "ca/get", fields, timeout=timeout).material

    def get_certificate(self, ca_id: int, *, timeout: float | None = None) -> str | None:
        """The CA's own certificate as PEM."""
        fields = self._session.authorized({"ca_id": str(ca_id), "what": What.CERTIFICATE.value})
        return self._session.request_object(GetResponse, "ca/get", fields, timeout=timeout).pem

    def list(self, *, timeout: float | None = None) -> list[CAListItem]:
        fields = self._session.authorized({})
        return self._session.request_array(CAListItem, "ca/list", fields, timeout=timeout)
