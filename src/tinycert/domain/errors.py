"""
Error taxonomy for the TinyCert client.

Three disjoint failure kinds, all rooted at TinyCertError:

  TransportFailure     no HTTP response was obtained (DNS, connect, timeout)
  ApiError             a response was obtained and it signals failure
  SchemaMismatchError  a success response did not match the expected shape

Nothing is retried or swallowed: every failure reaches the immediate caller.
Each error pickles with its own constructor arguments, so it survives
being handed to another process.
"""

from __future__ import annotations

UNKNOWN_ERROR_CODE = "UnknownError"
NO_STATUS = -1


class TinyCertError(Exception):
    """Base exception for all TinyCert client errors."""


class TransportFailure(TinyCertError):
    """No response was received from the API server."""

    def __init__(self, endpoint: str, message: str = "No response from the API server") -> None:
        super().__init__(f"{message} ({endpoint})")
        self.endpoint = endpoint
        self.message = message

    def __reduce__(self) -> tuple:
        return type(self), (self.endpoint, self.message)


class ApiError(TinyCertError):
    """
    The API server answered with a failure.

    `status` is the HTTP status code, or -1 when the failure body could not
    be decoded (degraded form, `code` is then "UnknownError").
    """

    def __init__(self, status: int, code: str, text: str) -> None:
        super().__init__(text)
        self.status = status
        self.code = code
        self.text = text

    def __reduce__(self) -> tuple:
        return type(self), (self.status, self.code, self.text)

    @classmethod
    def unknown(cls, text: str) -> ApiError:
        return cls(NO_STATUS, UNKNOWN_ERROR_CODE, text)

    def __repr__(self) -> str:
        return f"ApiError(status={self.status}, code={self.code!r}, text={self.text!r})"


class SchemaMismatchError(TinyCertError):
    """A successful response body did not decode into the expected shape."""

    def __init__(self, endpoint: str, shape: str) -> None:
        super().__init__(f"Response from {endpoint} does not match {shape}")
        self.endpoint = endpoint
        self.shape = shape

    def __reduce__(self) -> tuple:
        return type(self), (self.endpoint, self.shape)


__all__ = [
    "ApiError",
    "NO_STATUS",
    "SchemaMismatchError",
    "TinyCertError",
    "TransportFailure",
    "UNKNOWN_ERROR_CODE",
]
