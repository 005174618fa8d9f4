"""
Certificate resource: issue, inspect, fetch, list, reissue and revoke certificates.

Stateless facade over a Session. Subject alternative names are sent as
indexed, bracketed field names, one entry per SAN in input order:

  SANs[0][DNS]=www.example.com
  SANs[1][IP]=192.0.2.10
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from tinycert.domain.constants import CertStatus, CertStatusName, What
from tinycert.domain.models import SAN, CertDetails, CertIDResponse, CertListItem, GetResponse
from tinycert.session import Session

log = structlog.get_logger()


def flatten_sans(sans: Iterable[SAN]) -> dict[str, str]:
    """
    Flatten SAN entries into form fields, indexed from 0 without gaps.

    Raises ValueError for an entry with no populated field, before any
    request is made.

    >>> flatten_sans([SAN.dns("a.com"), SAN.ip("1.2.3.4")])
    {'SANs[0][DNS]': 'a.com', 'SANs[1][IP]': '1.2.3.4'}
    """
    fields: dict[str, str] = {}
    for index, san in enumerate(sans):
        populated = san.populated()
        if not populated:
            raise ValueError(f"SAN entry {index} must set one of DNS, email, IP or URI")
        for tag, value in populated:
            fields[f"SANs[{index}][{tag}]"] = value
    return fields


class Certificates:
    """Operations on the `cert/*` endpoints."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(
        self,
        ca_id: int,
        common_name: str,
        organizational_unit: str | None = None,
        organization: str | None = None,
        locality: str | None = None,
        state: str | None = None,
        country: str | None = None,
        sans: Iterable[SAN] = (),
        *,
        timeout: float | None = None,
    ) -> int:
        """Issue a new certificate under `ca_id` and return its id."""
        fields = self._session.authorized(
            {
                "C": country,
                "CN": common_name,
                "L": locality,
                "O": organization,
                "OU": organizational_unit,
                "ST": state,
                "ca_id": str(ca_id),
                **flatten_sans(sans),
            }
        )
        cert_id = self._session.request_object(CertIDResponse, "cert/new", fields, timeout=timeout).cert_id
        log.info("cert.created", ca_id=ca_id, cert_id=cert_id)
        return cert_id

    def details(self, cert_id: int, *, timeout: float | None = None) -> CertDetails:
        fields = self._session.authorized({"cert_id": str(cert_id)})
        return self._session.request_object(CertDetails, "cert/details", fields, timeout=timeout)

    def get(self, cert_id: int, what: What | str, *, timeout: float | None = None) -> str | None:
        """
        Fetch one artefact of the certificate.

        Returns the PEM text, or the PKCS#12 bundle when `what` is What.PKCS12.
        """
        fields = self._session.authorized({"cert_id": str(cert_id), "what": str(what)})
        return self._session.request_object(GetResponse, "cert/get", fields, timeout=timeout).material

    def list(
        self,
        ca_id: int,
        status_mask: CertStatus | int = CertStatus.ALL,
        *,
        timeout: float | None = None,
    ) -> list[CertListItem]:
        """Certificates of `ca_id` whose status is selected by `status_mask`."""
        fields = self._session.authorized({"ca_id": str(ca_id), "what": str(int(status_mask))})
        return self._session.request_array(CertListItem, "cert/list", fields, timeout=timeout)

    def reissue(self, cert_id: int, *, timeout: float | None = None) -> int:
        """Reissue a certificate with the same subject; returns the new certificate id."""
        fields = self._session.authorized({"cert_id": str(cert_id)})
        new_id = self._session.request_object(CertIDResponse, "cert/reissue", fields, timeout=timeout).cert_id
        log.info("cert.reissued", cert_id=cert_id, new_cert_id=new_id)
        return new_id

    def status(self, cert_id: int, new_status: CertStatusName | str, *, timeout: float | None = None) -> None:
        """Move a certificate to another lifecycle state (e.g. revoked, hold)."""
        fields = self._session.authorized({"cert_id": str(cert_id), "status": str(new_status)})
        self._session.request_ack("cert/status", fields, timeout=timeout)
        log.info("cert.status_changed", cert_id=cert_id, status=str(new_status))
