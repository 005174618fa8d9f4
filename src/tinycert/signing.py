"""
Request signing: canonical form-encoding and HMAC-SHA256 digest.

Pure functions, no I/O. The signed body of every API call is built as:

  1. drop fields whose value is None
  2. sort the remaining fields by key (ordinal byte order, case-sensitive)
  3. form-encode each key and value and join as k=v&k=v...
  4. HMAC-SHA256 the result with the API key, render as lowercase hex
  5. append &digest=<hex>

The server repeats steps 1-4 on the received fields (minus digest) and
rejects the call if the digests differ, so the encoding must match the
server's byte for byte: alphanumerics and "-_." pass through, space
becomes "+", everything else is %XX (upper-case hex of the UTF-8 bytes).
"""

from __future__ import annotations

import hashlib
import hmac
from urllib.parse import quote_plus

from tinycert.domain.ports import FieldMap

DIGEST_FIELD = "digest"


def form_encode(value: str) -> str:
    """
    Form-encode a single key or value.

    >>> form_encode("a b&c=d~")
    'a+b%26c%3Dd%7E'
    """
    # quote_plus always keeps "~"; the server's encoder does not
    return quote_plus(value, safe="").replace("~", "%7E")


def canonical_items(fields: FieldMap) -> list[tuple[str, str]]:
    """Populated fields sorted by the UTF-8 bytes of their keys."""
    return sorted(
        ((key, value) for key, value in fields.items() if value is not None),
        key=lambda item: item[0].encode("utf-8"),
    )


def canonical_body(fields: FieldMap) -> str:
    """
    The digest-free request body.

    >>> canonical_body({"token": "t", "C": "NL", "skip": None})
    'C=NL&token=t'
    """
    return "&".join(f"{form_encode(key)}={form_encode(value)}" for key, value in canonical_items(fields))


def compute_digest(body: str, secret: bytes) -> str:
    """Lowercase hex HMAC-SHA256 of the body bytes keyed with the shared secret."""
    return hmac.new(secret, body.encode("utf-8"), hashlib.sha256).hexdigest()


def sign(fields: FieldMap, secret: bytes) -> str:
    """Canonical body with its trailing digest field: the exact bytes to POST."""
    body = canonical_body(fields)
    digest = compute_digest(body, secret)
    if not body:
        return f"{DIGEST_FIELD}={digest}"
    return f"{body}&{DIGEST_FIELD}={digest}"
