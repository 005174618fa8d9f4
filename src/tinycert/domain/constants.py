"""
Constants surfaced to callers of the TinyCert API.

  - What           → selector for the `get` endpoints (which artefact to fetch)
  - HashAlgorithm  → signature hash for new certificate authorities
  - CertStatus     → bit flags used to filter certificate listings
  - CertStatusName → lifecycle names the service reports and accepts
"""

from __future__ import annotations

from enum import IntFlag, StrEnum, unique


@unique
class What(StrEnum):
    """Artefact selector for `ca/get` and `cert/get`."""

    CERTIFICATE = "cert"
    CHAIN = "chain"
    PRIVKEY_DECRYPTED = "key.dec"
    PRIVKEY_ENCRYPTED = "key.enc"
    PKCS12 = "pkcs12"
    REQUEST = "csr"


@unique
class HashAlgorithm(StrEnum):
    """Hash identifiers accepted by `ca/new`."""

    SHA1 = "sha1"
    SHA256 = "sha256"


class CertStatus(IntFlag):
    """
    Status filter flags for `cert/list`.

    Combine with `|` and send the decimal value:

    >>> str(int(CertStatus.GOOD | CertStatus.REVOKED))
    '6'
    """

    EXPIRED = 1
    GOOD = 2
    REVOKED = 4
    HOLD = 8
    ALL = EXPIRED | GOOD | REVOKED | HOLD


@unique
class CertStatusName(StrEnum):
    """Certificate lifecycle states as reported by the service."""

    EXPIRED = "expired"
    GOOD = "good"
    REVOKED = "revoked"
    HOLD = "hold"

    @property
    def flag(self) -> CertStatus:
        return CertStatus[self.name]

    @classmethod
    def from_flags(cls, mask: CertStatus | int) -> list[CertStatusName]:
        """Expand a status mask into the names it selects, in flag order."""
        mask = CertStatus(mask)
        return [name for name in cls if name.flag in mask]
