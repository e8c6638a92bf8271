# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum

import httpx


class PooledHttpError(Exception):
    """Base class for errors raised by pooledhttp itself."""


class ConfigurationError(PooledHttpError, LookupError):
    """A named transport was requested that the pool does not know about."""

    def __init__(self, client_name: str):
        super().__init__(f"No transport registered under the name {client_name!r}")
        self.client_name = client_name


class ArgumentError(PooledHttpError, ValueError):
    """A required argument was missing or empty."""

    def __init__(self, message: str, param_name: str | None = None):
        super().__init__(f"{message} (Parameter '{param_name}')" if param_name else message)
        self.param_name = param_name


class UnauthorizedAccessError(PooledHttpError):
    """The remote service answered 401 Unauthorized."""

    def __init__(self, url: str | None = None, status_code: int = 401):
        super().__init__(f"Unauthorized access to {url}" if url else "Unauthorized access")
        self.url = url
        self.status_code = status_code


class ItemNotFoundError(PooledHttpError, KeyError):
    """Raised by unwrap-style helpers when the remote item does not exist."""

    def __init__(self, url: str | None = None):
        super().__init__(url or "Item not found")
        self.url = url

    def __str__(self) -> str:
        return f"Item not found: {self.url}" if self.url else "Item not found"


class DeserializationError(PooledHttpError, ValueError):
    """A success body could not be decoded into the requested shape."""

    def __init__(self, message: str, body: str | None = None, target: object = None):
        super().__init__(message)
        self.body = body
        self.target = target


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx transport exceptions to ErrorCategory.
    """
    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    cause = exc.__cause__ or exc.__context__
    if isinstance(exc, httpx.ConnectError) and isinstance(cause, socket.gaierror):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Network timeout",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.UNKNOWN_ERROR: "Network error",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Request failed due to network error")


__all__ = [
    "ArgumentError",
    "ConfigurationError",
    "DeserializationError",
    "ErrorCategory",
    "ItemNotFoundError",
    "PooledHttpError",
    "UnauthorizedAccessError",
    "categorize_exception",
    "error_category_to_reason",
]
