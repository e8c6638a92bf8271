# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed TransportHandle implementation."""

from __future__ import annotations

import logging

import httpx

from ..config import HttpSettings, load_http_settings
from ..errors import categorize_exception, error_category_to_reason
from .client import TransportHandle, TransportProfile
from .headers import normalize_headers
from .models import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


class HttpxTransport(TransportHandle):
    """Asynchronous httpx client bound to one transport profile."""

    def __init__(
        self,
        profile: TransportProfile,
        settings: HttpSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings or load_http_settings()
        self._profile = profile
        timeout = profile.timeout if profile.timeout is not None else self.settings.timeout
        self._client = client or httpx.AsyncClient(
            base_url=profile.base_url,
            follow_redirects=self.settings.allow_redirects,
            timeout=timeout,
            verify=self.settings.verify_ssl,
            limits=httpx.Limits(
                max_connections=self.settings.max_connections,
                max_keepalive_connections=self.settings.max_keepalive_connections,
            ),
            transport=transport,
        )

    @property
    def profile(self) -> TransportProfile:
        return self._profile

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def send(self, request: HttpRequest) -> HttpResponse:
        extra = {}
        if request.timeout is not None:
            extra["timeout"] = request.timeout

        try:
            resp = await self._client.request(
                request.method,
                request.url,
                headers=request.headers,
                content=request.content,
                data=request.data,
                files=request.files,
                **extra,
            )
        except httpx.HTTPError as exc:
            category = categorize_exception(exc)
            logger.warning(
                "%s %s via %r failed: %s (%s)",
                request.method,
                request.url,
                self._profile.name,
                error_category_to_reason(category),
                category.value,
            )
            raise

        return HttpResponse(
            status_code=resp.status_code,
            headers=normalize_headers(resp.headers),
            text=resp.text,
            content=resp.content,
            url=str(resp.url),
            meta={
                "client_name": self._profile.name,
                "http_version": resp.http_version,
            },
        )

    async def aclose(self) -> None:
        await self._client.aclose()
