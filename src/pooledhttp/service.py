# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
High-level asynchronous HTTP facade over the named transport pool.

Every operation acquires a pooled transport, assembles one request, sends it once and
either classifies the response into a ResultEnvelope or returns it raw. Nothing is
retried, and transport errors (connection, DNS, timeout) propagate unchanged.

Every operation takes the same keyword-only options:

- ``auth_header_name`` / ``token``: added as one header when both are non-blank.
- ``headers``: extra headers; a name the transport already sends is left untouched.
- ``client_name``: registered transport profile; blank selects the default transport.
- ``timeout_minutes``: positive per-call timeout override.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from .config import HttpSettings
from .http.builder import build_request, require_form
from .http.client import TransportHandle, create_default_pool
from .http.handler import classify, classify_untyped, to_outcome, unwrap
from .http.models import (
    FormPayload,
    HttpResponse,
    JsonBody,
    MultipartPayload,
    Outcome,
    RawJson,
    RequestBody,
    ResultEnvelope,
    as_json_body,
)
from .http.pool import DEFAULT_CLIENT_NAME, TransportPool

T = TypeVar("T")

logger = logging.getLogger(__name__)


class HttpClientFactoryService:
    """Request/response normalization over a shared :class:`TransportPool`."""

    def __init__(self, pool: TransportPool | None = None, settings: HttpSettings | None = None):
        self.pool = pool or create_default_pool(settings)

    async def _send(
        self,
        method: str,
        uri: str,
        *,
        body: RequestBody | None = None,
        auth_header_name: str | None = None,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_minutes: float | None = None,
    ) -> HttpResponse:
        handle: TransportHandle = self.pool.acquire(client_name)
        request = build_request(
            method,
            uri,
            handle.profile,
            auth_header_name=auth_header_name,
            token=token,
            headers=headers,
            body=body,
            timeout_minutes=timeout_minutes,
        )
        logger.debug("%s %s via %r", request.method, request.url, request.client_name)
        response = await handle.send(request)
        logger.debug("%s %s -> %s", request.method, request.url, response.status_code)
        return response

    # -- GET -------------------------------------------------------------------

    async def get(
        self,
        uri: str,
        result_type: type[T] | Any = Any,
        *,
        auth_header_name: str | None = None,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_minutes: float | None = None,
    ) -> ResultEnvelope[T]:
        response = await self._send(
            "GET",
            uri,
            auth_header_name=auth_header_name,
            token=token,
            headers=headers,
            client_name=client_name,
            timeout_minutes=timeout_minutes,
        )
        return classify(response, result_type)

    async def get_raw(
        self,
        uri: str,
        *,
        auth_header_name: str | None = None,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_minutes: float | None = None,
    ) -> HttpResponse:
        return await self._send(
            "GET",
            uri,
            auth_header_name=auth_header_name,
            token=token,
            headers=headers,
            client_name=client_name,
            timeout_minutes=timeout_minutes,
        )

    async def get_bytes(
        self,
        uri: str,
        *,
        auth_header_name: str | None = None,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_minutes: float | None = None,
    ) -> bytes:
        """Return the response body bytes whatever the status code."""
        response = await self.get_raw(
            uri,
            auth_header_name=auth_header_name,
            token=token,
            headers=headers,
            client_name=client_name,
            timeout_minutes=timeout_minutes,
        )
        return response.content

    async def get_object(
        self,
        uri: str,
        result_type: type[T] | Any = Any,
        *,
        auth_header_name: str | None = None,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_minutes: float | None = None,
    ) -> T | None:
        """
        GET and return the decoded payload without the envelope.

        Raises ItemNotFoundError on 404 and UnauthorizedAccessError on 401. Other
        failures return None; use :meth:`get_outcome` to tell them apart.
        """
        envelope = await self.get(
            uri,
            result_type,
            auth_header_name=auth_header_name,
            token=token,
            headers=headers,
            client_name=client_name,
            timeout_minutes=timeout_minutes,
        )
        return unwrap(envelope, uri)

    async def get_outcome(
        self,
        uri: str,
        result_type: type[T] | Any = Any,
        *,
        auth_header_name: str | None = None,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_minutes: float | None = None,
    ) -> Outcome[T]:
        """GET classified as ``Ok | NotFound | Unauthorized | Failure``."""
        response = await self.get_raw(
            uri,
            auth_header_name=auth_header_name,
            token=token,
            headers=headers,
            client_name=client_name,
            timeout_minutes=timeout_minutes,
        )
        return to_outcome(response, result_type)

    # -- DELETE ----------------------------------------------------------------

    async def delete(
        self,
        uri: str,
        *,
        auth_header_name: str | None = None,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_minutes: float | None = None,
    ) -> ResultEnvelope[None]:
        response = await self.delete_raw(
            uri,
            auth_header_name=auth_header_name,
            token=token,
            headers=headers,
            client_name=client_name,
            timeout_minutes=timeout_minutes,
        )
        return classify_untyped(response)

    async def delete_raw(
        self,
        uri: str,
        *,
        auth_header_name: str | None = None,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_minutes: float | None = None,
    ) -> HttpResponse:
        return await self._send(
            "DELETE",
            uri,
            auth_header_name=auth_header_name,
            token=token,
            headers=headers,
            client_name=client_name,
            timeout_minutes=timeout_minutes,
        )

    # -- POST / PUT / PATCH JSON -------------------------------------------------

    async def _send_json(
        self,
        method: str,
        uri: str,
        result_type: Any,
        body: JsonBody | str | Any,
        **options: Any,
    ) -> ResultEnvelope[Any]:
        response = await self._send(method, uri, body=as_json_body(body), **options)
        return classify(response, result_type)

    async def post(
        self,
        uri: str,
        result_type: type[T] | Any = Any,
        body: JsonBody | str | Any = None,
        *,
        auth_header_name: str | None = None,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_minutes: float | None = None,
    ) -> ResultEnvelope[T]:
        """POST a JSON body (``str`` is sent verbatim, other values are serialized)."""
        return await self._send_json(
            "POST",
            uri,
            result_type,
            body,
            auth_header_name=auth_header_name,
            token=token,
            headers=headers,
            client_name=client_name,
            timeout_minutes=timeout_minutes,
        )

    async def post_untyped(
        self,
        uri: str,
        body: JsonBody | str | Any = None,
        *,
        auth_header_name: str | None = None,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_minutes: float | None = None,
    ) -> ResultEnvelope[None]:
        """POST a JSON body and classify without decoding. Blank raw JSON sends no body."""
        json_body = as_json_body(body)
        if isinstance(json_body, RawJson) and not json_body.text.strip():
            json_body = None
        response = await self._send(
            "POST",
            uri,
            body=json_body,
            auth_header_name=auth_header_name,
            token=token,
            headers=headers,
            client_name=client_name,
            timeout_minutes=timeout_minutes,
        )
        return classify_untyped(response)

    async def post_raw(
        self,
        uri: str,
        body: JsonBody | str | Any = None,
        *,
        auth_header_name: str | None = None,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_minutes: float | None = None,
    ) -> HttpResponse:
        """POST a JSON body and return the unclassified response. ``None`` sends an empty JSON body."""
        return await self._send(
            "POST",
            uri,
            body=as_json_body(body) or RawJson(""),
            auth_header_name=auth_header_name,
            token=token,
            headers=headers,
            client_name=client_name,
            timeout_minutes=timeout_minutes,
        )

    async def put(
        self,
        uri: str,
        result_type: type[T] | Any = Any,
        body: JsonBody | str | Any = None,
        *,
        auth_header_name: str | None = None,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_minutes: float | None = None,
    ) -> ResultEnvelope[T]:
        return await self._send_json(
            "PUT",
            uri,
            result_type,
            body,
            auth_header_name=auth_header_name,
            token=token,
            headers=headers,
            client_name=client_name,
            timeout_minutes=timeout_minutes,
        )

    async def put_raw(
        self,
        uri: str,
        body: JsonBody | str | Any = None,
        *,
        auth_header_name: str | None = None,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_minutes: float | None = None,
    ) -> HttpResponse:
        return await self._send(
            "PUT",
            uri,
            body=as_json_body(body) or RawJson(""),
            auth_header_name=auth_header_name,
            token=token,
            headers=headers,
            client_name=client_name,
            timeout_minutes=timeout_minutes,
        )

    async def patch(
        self,
        uri: str,
        result_type: type[T] | Any = Any,
        body: JsonBody | str | Any = None,
        *,
        auth_header_name: str | None = None,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_minutes: float | None = None,
    ) -> ResultEnvelope[T]:
        return await self._send_json(
            "PATCH",
            uri,
            result_type,
            body,
            auth_header_name=auth_header_name,
            token=token,
            headers=headers,
            client_name=client_name,
            timeout_minutes=timeout_minutes,
        )

    # -- POST form / multipart -------------------------------------------------

    async def post_form(
        self,
        uri: str,
        result_type: type[T] | Any = Any,
        payload: FormPayload | Mapping[str, str] | None = None,
        *,
        auth_header_name: str | None = None,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_minutes: float | None = None,
    ) -> ResultEnvelope[T]:
        """POST URL-encoded fields. Raises ArgumentError for an empty payload before sending."""
        form = require_form(payload)
        response = await self._send(
            "POST",
            uri,
            body=form,
            auth_header_name=auth_header_name,
            token=token,
            headers=headers,
            client_name=client_name,
            timeout_minutes=timeout_minutes,
        )
        return classify(response, result_type)

    async def post_form_untyped(
        self,
        uri: str,
        payload: FormPayload | Mapping[str, str] | None = None,
        *,
        auth_header_name: str | None = None,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_minutes: float | None = None,
    ) -> ResultEnvelope[None]:
        form = require_form(payload)
        response = await self._send(
            "POST",
            uri,
            body=form,
            auth_header_name=auth_header_name,
            token=token,
            headers=headers,
            client_name=client_name,
            timeout_minutes=timeout_minutes,
        )
        return classify_untyped(response)

    async def post_multipart(
        self,
        uri: str,
        result_type: type[T] | Any = Any,
        form: MultipartPayload | None = None,
        *,
        auth_header_name: str | None = None,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_minutes: float | None = None,
    ) -> ResultEnvelope[T]:
        response = await self.post_multipart_raw(
            uri,
            form,
            auth_header_name=auth_header_name,
            token=token,
            headers=headers,
            client_name=client_name,
            timeout_minutes=timeout_minutes,
        )
        return classify(response, result_type)

    async def post_multipart_raw(
        self,
        uri: str,
        form: MultipartPayload | None = None,
        *,
        auth_header_name: str | None = None,
        token: str | None = None,
        headers: Mapping[str, str] | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout_minutes: float | None = None,
    ) -> HttpResponse:
        return await self._send(
            "POST",
            uri,
            body=form,
            auth_header_name=auth_header_name,
            token=token,
            headers=headers,
            client_name=client_name,
            timeout_minutes=timeout_minutes,
        )

    async def aclose(self) -> None:
        await self.pool.aclose()

    async def __aenter__(self) -> HttpClientFactoryService:
        return self

    async def __aexit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        await self.aclose()


__all__ = ["HttpClientFactoryService"]
