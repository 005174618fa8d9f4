"""
HTTP adapter: signed form POSTs to the TinyCert API via httpx.

Adapter layer: implements the SignedTransport port.

Every call:
  1. signs the field map (see tinycert.signing)
  2. POSTs it as application/x-www-form-urlencoded to
     https://{host}/api/v1/{endpoint}
  3. returns status + body for ANY response, including 4xx/5xx

Only the absence of a response (DNS, connect, timeout, protocol errors)
is raised here, as TransportFailure. Deciding whether a response is an
API error is the dispatcher's job. No retries: a failure is surfaced on
the first attempt.
"""

from __future__ import annotations

import httpx
import structlog

from tinycert.domain.errors import TransportFailure
from tinycert.domain.ports import FieldMap, RawResponse
from tinycert.signing import sign

log = structlog.get_logger()

DEFAULT_HOST = "www.tinycert.org"
API_PREFIX = "/api/v1/"
CONTENT_TYPE = "application/x-www-form-urlencoded"


class HttpSignedTransport:
    """
    Sign and send API calls over HTTPS.

    Implements the SignedTransport port. A short-lived httpx.Client is
    opened per call unless a client is injected (e.g. for pooling).
    """

    def __init__(
        self,
        api_key: str | bytes,
        host: str = DEFAULT_HOST,
        timeout: float = 30,
        client: httpx.Client | None = None,
    ) -> None:
        self._secret = api_key.encode("utf-8") if isinstance(api_key, str) else api_key
        self._host = host
        self._timeout = timeout
        self._client = client

    @property
    def host(self) -> str:
        return self._host

    def url_for(self, endpoint: str) -> str:
        """
        Absolute URL of an endpoint; a leading "/" on the endpoint is ignored.

        >>> HttpSignedTransport(b"k").url_for("/ca/list")
        'https://www.tinycert.org/api/v1/ca/list'
        """
        return f"https://{self._host}{API_PREFIX}{endpoint.lstrip('/')}"

    def send(
        self,
        endpoint: str,
        fields: FieldMap,
        *,
        timeout: float | None = None,
    ) -> RawResponse:
        """
        POST the signed field map and capture the response.

        `timeout` (seconds) overrides the default for this call only.
        Raises TransportFailure if no response is received.
        """
        body = sign(fields, self._secret).encode("utf-8")
        url = self.url_for(endpoint)
        effective_timeout = self._timeout if timeout is None else timeout
        log.debug("api.request", endpoint=endpoint, size_bytes=len(body))
        try:
            response = self._post(url, body, effective_timeout)
        except httpx.TransportError as e:
            log.warning("api.transport_failure", endpoint=endpoint, error=type(e).__name__)
            raise TransportFailure(endpoint) from e
        log.debug("api.response", endpoint=endpoint, status=response.status_code)
        return RawResponse(status_code=response.status_code, body=response.content, endpoint=endpoint)

    def _post(self, url: str, body: bytes, timeout: float) -> httpx.Response:
        headers = {"Content-Type": CONTENT_TYPE}
        if self._client is not None:
            return self._client.post(url, content=body, headers=headers, timeout=timeout)
        with httpx.Client(timeout=timeout) as client:
            return client.post(url, content=body, headers=headers)
