# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process transport handles for wiring tests and demos without a network."""

from __future__ import annotations

from .client import TransportHandle, TransportProfile
from .models import HttpRequest, HttpResponse


class StubTransport(TransportHandle):
    """Deterministic, programmable TransportHandle for tests."""

    def __init__(
        self,
        responses: dict[str, HttpResponse] | None = None,
        profile: TransportProfile | None = None,
    ):
        self._responses = dict(responses or {})
        self._profile = profile or TransportProfile()
        self.requests: list[HttpRequest] = []
        self.closed = False

    @property
    def profile(self) -> TransportProfile:
        return self._profile

    @property
    def is_closed(self) -> bool:
        return self.closed

    def bind(self, profile: TransportProfile) -> StubTransport:
        """Return a stub sharing this one's responses and request log under another profile."""
        clone = StubTransport(profile=profile)
        clone._responses = self._responses
        clone.requests = self.requests
        return clone

    def add(self, url: str, response: HttpResponse, method: str | None = None) -> None:
        key = f"{method.upper()} {url}" if method else url
        self._responses[key] = response

    async def send(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        for key in (f"{request.method.upper()} {request.url}", request.url):
            if key in self._responses:
                return self._responses[key]
        return HttpResponse(status_code=599, text="No stubbed response configured", url=request.url)

    async def aclose(self) -> None:
        self.closed = True
