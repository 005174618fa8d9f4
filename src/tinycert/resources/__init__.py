"""Resource facades: stateless wrappers that turn method calls into signed API calls."""

from tinycert.resources.authority import CertificateAuthorities
from tinycert.resources.certificate import Certificates, flatten_sans

__all__ = ["CertificateAuthorities", "Certificates", "flatten_sans"]
