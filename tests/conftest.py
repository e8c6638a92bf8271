# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import httpx
import pytest

from pooledhttp.config import HttpSettings
from pooledhttp.http.pool import TransportPool
from pooledhttp.service import HttpClientFactoryService

BASE_URL = "https://api.test/"
CLIENT_NAME = "TestApi"


class RecordingHandler:
    """httpx.MockTransport handler that records requests and replays canned responses."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def add(self, method, path, status_code=200, **kwargs):
        self.routes[(method.upper(), path)] = httpx.Response(status_code, **kwargs)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get((request.method, request.url.path))
        if response is None:
            return httpx.Response(500, text=f"no route for {request.method} {request.url.path}")
        return response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def settings():
    return HttpSettings(timeout=5.0, user_agent="pooledhttp-tests/1.0")


@pytest.fixture
def handler():
    return RecordingHandler()


@pytest.fixture
def pool(settings, handler):
    pool = TransportPool(settings, transport=httpx.MockTransport(handler))
    pool.register(CLIENT_NAME, BASE_URL, {"Accept": "application/json", "X-Api-Key": "profile-key"})
    return pool


@pytest.fixture
def service(pool):
    return HttpClientFactoryService(pool)
