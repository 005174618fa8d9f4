"""
tinycert: client library for the TinyCert certificate-authority API.

Signs every call with HMAC-SHA256 over a canonical form-encoded body,
maps HTTP/JSON outcomes onto typed results or typed errors, and exposes
certificate authorities and certificates as two resource facades over a
single authenticated session.
"""

from tinycert.adapters.http_transport import HttpSignedTransport
from tinycert.client import TinyCertClient, configure_structlog
from tinycert.config import TinyCertSettings
from tinycert.domain.constants import CertStatus, CertStatusName, HashAlgorithm, What
from tinycert.domain.errors import ApiError, SchemaMismatchError, TinyCertError, TransportFailure
from tinycert.domain.models import SAN, CADetails, CAListItem, CertDetails, CertListItem
from tinycert.resources import CertificateAuthorities, Certificates
from tinycert.session import Session

__all__ = [
    "SAN",
    "ApiError",
    "CADetails",
    "CAListItem",
    "CertDetails",
    "CertListItem",
    "CertStatus",
    "CertStatusName",
    "CertificateAuthorities",
    "Certificates",
    "HashAlgorithm",
    "HttpSignedTransport",
    "SchemaMismatchError",
    "Session",
    "TinyCertClient",
    "TinyCertError",
    "TinyCertSettings",
    "TransportFailure",
    "What",
    "configure_structlog",
]

__version__ = "0.1.0"
