# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used across pooledhttp."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")

Headers = dict[str, str]

SUCCESS_MESSAGE = "SUCCESS"
NOT_FOUND_MESSAGE = "Item not found"


def coerce_status(status_code: int) -> HTTPStatus | int:
    """Return an HTTPStatus member when the code is a known one."""
    try:
        return HTTPStatus(status_code)
    except ValueError:
        return int(status_code)


def is_success_status(status_code: int | None) -> bool:
    return status_code is not None and 200 <= int(status_code) <= 299


# --- request bodies ---------------------------------------------------------


@dataclass(frozen=True)
class RawJson:
    """Already-serialized JSON text, sent verbatim."""

    text: str


@dataclass(frozen=True)
class JsonPayload:
    """Structured value serialized to JSON by the codec before sending."""

    value: Any


@dataclass(frozen=True)
class FormPayload:
    """URL-encoded form fields."""

    fields: Mapping[str, str] | None


@dataclass(frozen=True)
class MultipartPayload:
    """Multipart form handed to the transport unmodified (httpx ``files``/``data``)."""

    files: Any = None
    data: Mapping[str, Any] | None = None


JsonBody = Union[RawJson, JsonPayload]
RequestBody = Union[RawJson, JsonPayload, FormPayload, MultipartPayload]


def as_json_body(value: Any) -> JsonBody | None:
    """Normalize a caller-supplied JSON body into its tagged variant."""
    if value is None or isinstance(value, (RawJson, JsonPayload)):
        return value
    if isinstance(value, str):
        return RawJson(value)
    return JsonPayload(value)


# --- transport-level request/response --------------------------------------


@dataclass
class HttpRequest:
    """Normalized request representation consumed by transport handles."""

    url: str
    method: str = "GET"
    headers: list[tuple[str, str]] = field(default_factory=list)
    content: bytes | None = None
    data: Mapping[str, Any] | None = None
    files: Any = None
    timeout: float | None = None
    client_name: str = ""


@dataclass
class HttpResponse:
    """Normalized HTTP response returned by transport handles and the raw operations."""

    status_code: int
    headers: Headers = field(default_factory=dict)
    text: str = ""
    content: bytes = b""
    url: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return is_success_status(self.status_code)


# --- result envelope ----------------------------------------------------------


@dataclass(frozen=True)
class ResultEnvelope(Generic[T]):
    """
    Success/failure wrapper returned by every classified operation.

    A successful envelope always carries a 2xx status and the message ``"SUCCESS"``;
    a failed one never carries data. Use :meth:`success` and :meth:`failure` to build one.
    """

    is_success: bool
    message: str
    status_code: HTTPStatus | int
    data: T | None = None

    def __post_init__(self) -> None:
        if self.is_success:
            if not is_success_status(self.status_code) or self.message != SUCCESS_MESSAGE:
                raise ValueError("Successful envelopes need a 2xx status and the SUCCESS message")
        elif self.data is not None:
            raise ValueError("Failed envelopes cannot carry data")

    @classmethod
    def success(cls, status_code: int, data: T | None = None) -> ResultEnvelope[T]:
        return cls(is_success=True, message=SUCCESS_MESSAGE, status_code=coerce_status(status_code), data=data)

    @classmethod
    def failure(cls, status_code: int, message: str) -> ResultEnvelope[T]:
        return cls(is_success=False, message=message, status_code=coerce_status(status_code))

    @property
    def is_not_found(self) -> bool:
        return not self.is_success and int(self.status_code) == HTTPStatus.NOT_FOUND

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_success": self.is_success,
            "message": self.message,
            "status_code": int(self.status_code),
            "data": self.data,
        }


# --- tagged outcome -----------------------------------------------------------


@dataclass(frozen=True)
class Ok(Generic[T]):
    data: T | None


@dataclass(frozen=True)
class NotFound:
    message: str = NOT_FOUND_MESSAGE


@dataclass(frozen=True)
class Unauthorized:
    url: str | None = None


@dataclass(frozen=True)
class Failure:
    message: str
    status_code: HTTPStatus | int


Outcome = Union[Ok[T], NotFound, Unauthorized, Failure]


__all__ = [
    "Failure",
    "FormPayload",
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "JsonBody",
    "JsonPayload",
    "MultipartPayload",
    "NOT_FOUND_MESSAGE",
    "NotFound",
    "Ok",
    "Outcome",
    "RawJson",
    "RequestBody",
    "ResultEnvelope",
    "SUCCESS_MESSAGE",
    "Unauthorized",
    "as_json_body",
    "coerce_status",
    "is_success_status",
]
