"""
Unit tests for the HTTP adapter: signed form POSTs via httpx.

Uses respx to mock httpx HTTP calls (never makes real HTTP requests).

Test categories:
  - Request shape: URL, content type, signed body
  - Any response: 2xx and non-2xx both come back as RawResponse
  - No response: timeout / network errors raise TransportFailure
  - Timeouts: default and per-call override reach httpx
"""

from __future__ import annotations

import hashlib
import hmac

import httpx
import pytest
import respx

from tinycert.adapters.http_transport import HttpSignedTransport
from tinycert.domain.errors import ApiError, TransportFailure
from tinycert.domain.ports import RawResponse, SignedTransport

# ─────────────────────── Fixtures ───────────────────────

API_KEY = "test-api-key"
HOST = "api.example.com"
LIST_URL = f"https://{HOST}/api/v1/ca/list"


@pytest.fixture()
def transport() -> HttpSignedTransport:
    """Create an HttpSignedTransport against a test host."""
    return HttpSignedTransport(api_key=API_KEY, host=HOST, timeout=5)


def _split_digest(body: str) -> tuple[str, str]:
    payload, _, digest = body.rpartition("&digest=")
    return payload, digest


# ═══════════════════════════════════════════════════════════════════════
# Request shape
# ═══════════════════════════════════════════════════════════════════════


class TestRequestShape:
    """
    GIVEN a field map
    WHEN send is called
    THEN a signed form POST is issued to https://{host}/api/v1/{endpoint}.
    """

    def test_implements_port(self, transport: HttpSignedTransport) -> None:
        """HttpSignedTransport satisfies the SignedTransport protocol."""
        assert isinstance(transport, SignedTransport)

    @respx.mock
    def test_posts_to_endpoint_url(self, transport: HttpSignedTransport) -> None:
        """
        GIVEN endpoint "ca/list"
        WHEN send is called
        THEN a POST hits https://api.example.com/api/v1/ca/list.
        """
        route = respx.post(LIST_URL).mock(return_value=httpx.Response(200, json=[]))
        transport.send("ca/list", {"token": "t"})
        assert route.called

    @respx.mock
    def test_leading_slash_is_ignored(self, transport: HttpSignedTransport) -> None:
        """GIVEN endpoint "/ca/list" THEN the URL has no double slash."""
        route = respx.post(LIST_URL).mock(return_value=httpx.Response(200, json=[]))
        transport.send("/ca/list", {"token": "t"})
        assert route.called

    @respx.mock
    def test_sends_form_content_type(self, transport: HttpSignedTransport) -> None:
        """The request is sent as application/x-www-form-urlencoded."""
        route = respx.post(LIST_URL).mock(return_value=httpx.Response(200, json=[]))
        transport.send("ca/list", {"token": "t"})
        request = route.calls.last.request
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"

    @respx.mock
    def test_body_is_sorted_encoded_and_signed(self, transport: HttpSignedTransport) -> None:
        """
        GIVEN fields {token, C, O (with a space), OU=None}
        WHEN send is called
        THEN the body is the sorted, encoded fields plus the HMAC of exactly that prefix.
        """
        route = respx.post(f"https://{HOST}/api/v1/ca/new").mock(
            return_value=httpx.Response(200, json={"ca_id": 1})
        )
        transport.send("ca/new", {"token": "t", "O": "ACME Corp", "C": "NL", "OU": None})
        payload, digest = _split_digest(route.calls.last.request.content.decode())
        assert payload == "C=NL&O=ACME+Corp&token=t"
        expected = hmac.new(API_KEY.encode(), payload.encode(), hashlib.sha256).hexdigest()
        assert digest == expected

    @respx.mock
    def test_bytes_api_key_accepted(self) -> None:
        """GIVEN the API key as bytes THEN it signs the same as the str key."""
        route = respx.post(LIST_URL).mock(return_value=httpx.Response(200, json=[]))
        HttpSignedTransport(api_key=API_KEY.encode(), host=HOST).send("ca/list", {"token": "t"})
        HttpSignedTransport(api_key=API_KEY, host=HOST).send("ca/list", {"token": "t"})
        first, second = (call.request.content for call in route.calls)
        assert first == second

    def test_default_host(self) -> None:
        """Without a host argument the public TinyCert API is used."""
        assert HttpSignedTransport(api_key=API_KEY).url_for("connect") == (
            "https://www.tinycert.org/api/v1/connect"
        )


# ═══════════════════════════════════════════════════════════════════════
# Responses
# ═══════════════════════════════════════════════════════════════════════


class TestResponses:
    """
    GIVEN the server answers
    WHEN send is called
    THEN status and body are captured whatever the status (no raising).
    """

    @respx.mock
    def test_success_response_captured(self, transport: HttpSignedTransport) -> None:
        """GIVEN 200 with a JSON array THEN RawResponse carries status and raw body."""
        respx.post(LIST_URL).mock(return_value=httpx.Response(200, content=b'[{"id":1,"name":"a"}]'))
        response = transport.send("ca/list", {"token": "t"})
        assert response == RawResponse(status_code=200, body=b'[{"id":1,"name":"a"}]', endpoint="ca/list")
        assert response.is_success

    @respx.mock
    def test_error_status_is_not_raised(self, transport: HttpSignedTransport) -> None:
        """
        GIVEN 401 with an error body
        WHEN send is called
        THEN a RawResponse is returned (error decoding is the dispatcher's job).
        """
        respx.post(LIST_URL).mock(
            return_value=httpx.Response(401, json={"code": "AuthError", "text": "bad token"})
        )
        response = transport.send("ca/list", {"token": "t"})
        assert response.status_code == 401
        assert not response.is_success


# ═══════════════════════════════════════════════════════════════════════
# No response
# ═══════════════════════════════════════════════════════════════════════


class TestTransportFailure:
    """
    GIVEN no response can be obtained
    WHEN send is called
    THEN TransportFailure is raised, never an ApiError with a made-up code.
    """

    @pytest.mark.parametrize(
        "error",
        [
            httpx.ConnectError("connection refused"),
            httpx.ConnectTimeout("timed out"),
            httpx.ReadTimeout("timed out"),
            httpx.RemoteProtocolError("server hung up"),
        ],
    )
    @respx.mock
    def test_raises_transport_failure(
        self, transport: HttpSignedTransport, error: httpx.TransportError
    ) -> None:
        respx.post(LIST_URL).mock(side_effect=error)
        with pytest.raises(TransportFailure) as excinfo:
            transport.send("ca/list", {"token": "t"})
        assert not isinstance(excinfo.value, ApiError)
        assert excinfo.value.endpoint == "ca/list"
        assert isinstance(excinfo.value.__cause__, type(error))

    @respx.mock
    def test_not_retried(self, transport: HttpSignedTransport) -> None:
        """GIVEN a connect error THEN exactly one attempt is made."""
        route = respx.post(LIST_URL).mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(TransportFailure):
            transport.send("ca/list", {"token": "t"})
        assert route.call_count == 1


# ═══════════════════════════════════════════════════════════════════════
# Timeouts
# ═══════════════════════════════════════════════════════════════════════


class TestTimeouts:
    """Verify the default and per-call deadlines are handed to httpx."""

    @respx.mock
    def test_default_timeout(self, transport: HttpSignedTransport) -> None:
        """GIVEN timeout=5 at construction THEN the request carries a 5s read timeout."""
        route = respx.post(LIST_URL).mock(return_value=httpx.Response(200, json=[]))
        transport.send("ca/list", {"token": "t"})
        assert route.calls.last.request.extensions["timeout"]["read"] == 5

    @respx.mock
    def test_per_call_timeout_overrides_default(self, transport: HttpSignedTransport) -> None:
        """GIVEN timeout=1.5 on the call THEN that value wins over the default."""
        route = respx.post(LIST_URL).mock(return_value=httpx.Response(200, json=[]))
        transport.send("ca/list", {"token": "t"}, timeout=1.5)
        assert route.calls.last.request.extensions["timeout"]["read"] == 1.5

    @respx.mock
    def test_injected_client_is_used(self) -> None:
        """GIVEN an injected httpx.Client THEN requests go through it with the per-call timeout."""
        route = respx.post(LIST_URL).mock(return_value=httpx.Response(200, json=[]))
        with httpx.Client() as client:
            transport = HttpSignedTransport(api_key=API_KEY, host=HOST, timeout=9, client=client)
            transport.send("ca/list", {"token": "t"}, timeout=2)
        assert route.calls.last.request.extensions["timeout"]["read"] == 2
