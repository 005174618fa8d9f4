"""
Domain models: typed shapes of TinyCert API requests and responses.

Every response body is decoded into one of these pydantic models by the
dispatcher. Models are frozen (immutable) and:
  - require every field the service always sends (ids, names, error codes)
  - default optional fields to None when the service leaves them out
  - ignore undeclared fields so additive server changes stay compatible

Field names mirror the wire names exactly (C, ST, L, O, OU, CN, E, ...).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class _Response(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


# ─────────────────────── Subject Alternative Names ───────────────────────


class SAN(_Response):
    """
    A single Subject Alternative Name entry.

    Exactly one of DNS, email, IP or URI is expected to be set. Used both
    for certificate creation and in CertDetails responses. Response entries
    with none of the four (or only undeclared kinds) still decode; creation
    rejects them in flatten_sans.
    """

    DNS: str | None = None
    email: str | None = None
    IP: str | None = None
    URI: str | None = None

    @classmethod
    def dns(cls, value: str) -> SAN:
        return cls(DNS=value)

    @classmethod
    def mail(cls, value: str) -> SAN:
        return cls(email=value)

    @classmethod
    def ip(cls, value: str) -> SAN:
        return cls(IP=value)

    @classmethod
    def uri(cls, value: str) -> SAN:
        return cls(URI=value)

    def populated(self) -> list[tuple[str, str]]:
        """(wire tag, value) pairs for the fields set on this entry, in tag order."""
        return [
            (tag, value)
            for tag, value in (("DNS", self.DNS), ("email", self.email), ("IP", self.IP), ("URI", self.URI))
            if value is not None
        ]


# ─────────────────────── Single-object responses ───────────────────────


class ErrorBody(_Response):
    """Body of every failure response: {"code": ..., "text": ...}."""

    code: str
    text: str


class ConnectResponse(_Response):
    token: str


class CAIDResponse(_Response):
    ca_id: int


class CertIDResponse(_Response):
    cert_id: int


class GetResponse(_Response):
    """
    Response of `ca/get` and `cert/get`.

    Only one of pem / pkcs12 is populated, depending on the `what` selector.
    """

    pem: str | None = None
    pkcs12: str | None = None

    @property
    def material(self) -> str | None:
        """The PEM text if present, otherwise the PKCS#12 bundle."""
        return self.pem if self.pem is not None else self.pkcs12


class CADetails(_Response):
    """Subject and hash algorithm of a certificate authority."""

    id: int
    C: str | None = None
    ST: str | None = None
    L: str | None = None
    O: str | None = None  # noqa: E741
    OU: str | None = None
    CN: str | None = None
    E: str | None = None
    hash_alg: str | None = None


class CertDetails(_Response):
    """Subject, status and alternative names of an issued certificate."""

    id: int
    status: str | None = None
    C: str | None = None
    ST: str | None = None
    L: str | None = None
    O: str | None = None  # noqa: E741
    OU: str | None = None
    CN: str | None = None
    Alt: list[SAN] | None = None


# ─────────────────────── Array item responses ───────────────────────


class CAListItem(_Response):
    id: int
    name: str


class CertListItem(_Response):
    """One row of `cert/list`; `expires` is a UNIX timestamp."""

    id: int
    name: str
    status: str | None = None
    expires: int | None = None
