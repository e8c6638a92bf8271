# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP transport, request building and response classification exports."""

from .adapters import StubTransport
from .builder import attach_body, build_headers, build_request, require_form
from .client import TransportHandle, TransportProfile, create_default_pool
from .handler import classify, classify_untyped, to_outcome, unwrap
from .headers import has_header, header_value, normalize_headers
from .httpx_client import HttpxTransport
from .models import (
    Failure,
    FormPayload,
    Headers,
    HttpRequest,
    HttpResponse,
    JsonPayload,
    MultipartPayload,
    NotFound,
    Ok,
    Outcome,
    RawJson,
    ResultEnvelope,
    Unauthorized,
)
from .pool import DEFAULT_CLIENT_NAME, TransportPool

__all__ = [
    "DEFAULT_CLIENT_NAME",
    "Failure",
    "FormPayload",
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "HttpxTransport",
    "JsonPayload",
    "MultipartPayload",
    "NotFound",
    "Ok",
    "Outcome",
    "RawJson",
    "ResultEnvelope",
    "StubTransport",
    "TransportHandle",
    "TransportPool",
    "TransportProfile",
    "Unauthorized",
    "attach_body",
    "build_headers",
    "build_request",
    "classify",
    "classify_untyped",
    "create_default_pool",
    "has_header",
    "header_value",
    "normalize_headers",
    "require_form",
    "to_outcome",
    "unwrap",
]
