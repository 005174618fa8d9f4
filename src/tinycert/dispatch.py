"""
Response dispatcher: classify a RawResponse and decode it into a typed shape.

  non-2xx  → decode {code, text} → raise ApiError(status, code, text)
             undecodable body    → raise ApiError(-1, "UnknownError", ...)
  2xx      → validate body against the caller's pydantic model
             (single object or homogeneous array)
             mismatch            → raise SchemaMismatchError

Callers name the expected shape at each call site; the same dispatcher
serves every response shape of the API.
"""

from __future__ import annotations

from functools import cache
from typing import TypeVar

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from tinycert.domain.errors import ApiError, SchemaMismatchError
from tinycert.domain.models import ErrorBody
from tinycert.domain.ports import RawResponse

log = structlog.get_logger()

M = TypeVar("M", bound=BaseModel)


def raise_for_error(response: RawResponse) -> None:
    """Raise ApiError if the response status signals failure; otherwise do nothing."""
    if response.is_success:
        return
    try:
        error = ErrorBody.model_validate_json(response.body)
    except ValidationError:
        log.warning("api.error_unparseable", endpoint=response.endpoint, status=response.status_code)
        raise ApiError.unknown(
            f"Unparseable error response from {response.endpoint or 'API'} (HTTP {response.status_code})"
        ) from None
    log.info("api.error", endpoint=response.endpoint, status=response.status_code, code=error.code)
    raise ApiError(response.status_code, error.code, error.text)


def decode_object(shape: type[M], response: RawResponse) -> M:
    """Decode a successful response into a single `shape` instance."""
    raise_for_error(response)
    try:
        return shape.model_validate_json(response.body)
    except ValidationError as e:
        raise SchemaMismatchError(response.endpoint, shape.__name__) from e


def decode_array(shape: type[M], response: RawResponse) -> list[M]:
    """Decode a successful response into a list of `shape` instances."""
    raise_for_error(response)
    try:
        return _array_adapter(shape).validate_json(response.body)
    except ValidationError as e:
        raise SchemaMismatchError(response.endpoint, f"list[{shape.__name__}]") from e


@cache
def _array_adapter(shape: type[M]) -> TypeAdapter[list[M]]:
    return TypeAdapter(list[shape])  # type: ignore[valid-type]
