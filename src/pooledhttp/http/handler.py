# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Response classification into result envelopes and tagged outcomes."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, TypeVar

from .. import codec
from ..errors import ItemNotFoundError, UnauthorizedAccessError
from .models import (
    NOT_FOUND_MESSAGE,
    Failure,
    HttpResponse,
    NotFound,
    Ok,
    Outcome,
    ResultEnvelope,
    Unauthorized,
    is_success_status,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _classify_failure(response: HttpResponse) -> ResultEnvelope[Any] | None:
    status = response.status_code
    if status == HTTPStatus.UNAUTHORIZED:
        raise UnauthorizedAccessError(response.url, status)
    if status == HTTPStatus.NOT_FOUND:
        return ResultEnvelope.failure(status, NOT_FOUND_MESSAGE)
    if not is_success_status(status):
        return ResultEnvelope.failure(status, response.text)
    return None


def classify(response: HttpResponse, result_type: type[T] | Any = Any) -> ResultEnvelope[T]:
    """
    Map a raw response onto a ResultEnvelope.

    401 raises UnauthorizedAccessError, 404 becomes an "Item not found" failure and any
    other non-2xx status becomes a failure carrying the raw body. A 2xx body is decoded
    into ``result_type``; a blank body yields ``data=None``. Malformed bodies raise
    DeserializationError.
    """
    failure = _classify_failure(response)
    if failure is not None:
        logger.debug("%s -> %s failure", response.url, response.status_code)
        return failure

    data = None
    if response.text and response.text.strip():
        data = codec.loads(response.text, result_type)
    return ResultEnvelope.success(response.status_code, data)


def classify_untyped(response: HttpResponse) -> ResultEnvelope[None]:
    """Same status rules as :func:`classify` without decoding the body."""
    failure = _classify_failure(response)
    if failure is not None:
        return failure
    return ResultEnvelope.success(response.status_code)


def to_outcome(response: HttpResponse, result_type: type[T] | Any = Any) -> Outcome[T]:
    """Classify into a tagged Outcome so callers can ``match`` instead of catching."""
    try:
        envelope = classify(response, result_type)
    except UnauthorizedAccessError as exc:
        return Unauthorized(exc.url)
    if envelope.is_success:
        return Ok(envelope.data)
    if envelope.is_not_found:
        return NotFound(envelope.message)
    return Failure(envelope.message, envelope.status_code)


def unwrap(envelope: ResultEnvelope[T], url: str | None = None) -> T | None:
    """
    Return the envelope payload directly.

    Raises ItemNotFoundError for a not-found envelope. Any other failure returns
    ``None`` rather than raising, so callers that need to tell failures apart should
    use the envelope or :func:`to_outcome` instead.
    """
    if envelope.is_not_found:
        raise ItemNotFoundError(url)
    return envelope.data


__all__ = ["classify", "classify_untyped", "to_outcome", "unwrap"]
