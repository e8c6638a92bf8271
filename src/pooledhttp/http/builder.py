# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Outbound request assembly: header merging and body attachment."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

from .. import codec
from ..errors import ArgumentError
from .client import TransportProfile
from .headers import has_header, iter_header_items
from .models import (
    FormPayload,
    HttpRequest,
    JsonPayload,
    MultipartPayload,
    RawJson,
    RequestBody,
)

JSON_MEDIA_TYPE = "application/json"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@dataclass(frozen=True)
class BuiltContent:
    """Body ready for the transport: either encoded bytes or opaque multipart parts."""

    content: bytes | None = None
    content_type: str | None = None
    data: Mapping[str, Any] | None = None
    files: Any = None


def _blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def build_headers(
    defaults: Any = None,
    auth_header_name: str | None = None,
    token: str | None = None,
    extra_headers: Mapping[str, str] | None = None,
) -> list[tuple[str, str]]:
    """
    Merge transport defaults, the auth header and caller headers.

    The auth header is added whenever both name and token are non-blank, even if the
    transport already carries one. Extra headers never overwrite a name that is already
    present. ``Accept: application/json`` is added last when no Accept header exists.
    """
    headers = iter_header_items(defaults)

    if not _blank(auth_header_name) and not _blank(token):
        headers.append((str(auth_header_name).strip(), str(token)))

    for name, value in iter_header_items(extra_headers):
        if not has_header(headers, name):
            headers.append((name, value))

    if not has_header(headers, "Accept"):
        headers.append(("Accept", JSON_MEDIA_TYPE))

    return headers


def require_form(payload: FormPayload | Mapping[str, str] | None) -> FormPayload:
    """Return a FormPayload, rejecting absent or empty field sets."""
    fields = payload.fields if isinstance(payload, FormPayload) else payload
    if not fields:
        raise ArgumentError("Payload cannot be null or empty.", "payload")
    return payload if isinstance(payload, FormPayload) else FormPayload(dict(fields))


def attach_body(body: RequestBody | None) -> BuiltContent:
    """Encode a tagged request body for the transport."""
    if body is None:
        return BuiltContent()
    if isinstance(body, RawJson):
        return BuiltContent(content=body.text.encode("utf-8"), content_type=JSON_CONTENT_TYPE)
    if isinstance(body, JsonPayload):
        return BuiltContent(content=codec.dumps(body.value).encode("utf-8"), content_type=JSON_CONTENT_TYPE)
    if isinstance(body, FormPayload):
        form = require_form(body)
        encoded = urlencode([(str(k), "" if v is None else str(v)) for k, v in form.fields.items()])
        return BuiltContent(content=encoded.encode("utf-8"), content_type=FORM_CONTENT_TYPE)
    if isinstance(body, MultipartPayload):
        return BuiltContent(data=body.data, files=body.files)
    raise ArgumentError(f"Unsupported request body type {type(body).__name__}", "body")


def timeout_from_minutes(timeout_minutes: float | None) -> float | None:
    """Convert a per-call override in minutes to seconds; non-positive values mean no override."""
    if timeout_minutes is None or timeout_minutes <= 0:
        return None
    return float(timeout_minutes) * 60.0


def build_request(
    method: str,
    uri: str,
    profile: TransportProfile,
    *,
    auth_header_name: str | None = None,
    token: str | None = None,
    headers: Mapping[str, str] | None = None,
    body: RequestBody | None = None,
    timeout_minutes: float | None = None,
) -> HttpRequest:
    """Assemble the single request sent for one facade call."""
    if uri is None:
        raise ArgumentError("Request URI is required.", "uri")
    merged = build_headers(profile.default_headers, auth_header_name, token, headers)
    built = attach_body(body)
    # Inherited Content-Type never applies: httpx labels multipart bodies itself.
    merged = [(k, v) for k, v in merged if k.lower() != "content-type"]
    if built.content_type:
        merged.append(("Content-Type", built.content_type))
    return HttpRequest(
        url=uri,
        method=method.upper(),
        headers=merged,
        content=built.content,
        data=built.data,
        files=built.files,
        timeout=timeout_from_minutes(timeout_minutes),
        client_name=profile.name,
    )


__all__ = [
    "BuiltContent",
    "FORM_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
    "attach_body",
    "build_headers",
    "build_request",
    "require_form",
    "timeout_from_minutes",
]
