# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
pooledhttp package entrypoint.

This package wraps a pool of named httpx transports behind an asynchronous facade that
assembles headers and bodies, sends each request once and classifies the response into a
success/failure envelope. Transports are injectable, and domain objects are modeled with
typed dataclasses.
"""

from .config import HttpSettings, load_http_settings
from .errors import (
    ArgumentError,
    ConfigurationError,
    DeserializationError,
    ErrorCategory,
    ItemNotFoundError,
    PooledHttpError,
    UnauthorizedAccessError,
)
from .http import (
    Failure,
    FormPayload,
    HttpRequest,
    HttpResponse,
    HttpxTransport,
    JsonPayload,
    MultipartPayload,
    NotFound,
    Ok,
    Outcome,
    RawJson,
    ResultEnvelope,
    TransportPool,
    Unauthorized,
    create_default_pool,
)
from .log import setup_logging
from .service import HttpClientFactoryService
from .version import __version__

__all__ = [
    "ArgumentError",
    "ConfigurationError",
    "DeserializationError",
    "ErrorCategory",
    "Failure",
    "FormPayload",
    "HttpClientFactoryService",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxTransport",
    "ItemNotFoundError",
    "JsonPayload",
    "MultipartPayload",
    "NotFound",
    "Ok",
    "Outcome",
    "PooledHttpError",
    "RawJson",
    "ResultEnvelope",
    "TransportPool",
    "Unauthorized",
    "UnauthorizedAccessError",
    "create_default_pool",
    "load_http_settings",
    "setup_logging",
    "__version__",
]
