# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
JSONPlaceholder posts demo.

Each operation calls one facade operation against the ``JsonPlaceholder`` transport and
maps the result onto an HTTP-style ``DemoResponse``: success to 200/201/204, not found
to 404, unauthorized to 401 and any other failure to 400 with the envelope message.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

from .errors import UnauthorizedAccessError
from .http.models import Failure, JsonPayload, NotFound, Ok, ResultEnvelope, Unauthorized
from .http.pool import TransportPool
from .service import HttpClientFactoryService

DEMO_CLIENT_NAME = "JsonPlaceholder"
DEMO_REQUEST_SOURCE = "DemoClient"


@dataclass
class Post:
    user_id: int = field(metadata={"json_name": "userId"})
    id: int
    title: str
    body: str


@dataclass
class NewPost:
    title: str
    body: str
    user_id: int = field(default=1, metadata={"json_name": "userId"})


@dataclass(frozen=True)
class DemoResponse:
    status: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status <= 299


def register_demo_transport(pool: TransportPool, base_url: str | None = None, **kwargs: Any) -> None:
    """Register the JSONPlaceholder profile on ``pool``."""
    pool.register(
        DEMO_CLIENT_NAME,
        base_url or pool.settings.demo_base_url,
        {"Accept": "application/json"},
        **kwargs,
    )


def _failure_response(envelope: ResultEnvelope[Any]) -> DemoResponse:
    if envelope.is_not_found:
        return DemoResponse(HTTPStatus.NOT_FOUND)
    return DemoResponse(HTTPStatus.BAD_REQUEST, envelope.message)


class PostsDemo:
    """Thin posts API over :class:`HttpClientFactoryService`."""

    def __init__(
        self,
        service: HttpClientFactoryService,
        *,
        client_name: str = DEMO_CLIENT_NAME,
        token: str | None = None,
        timeout_minutes: float | None = None,
    ):
        self.service = service
        self.client_name = client_name
        self.token = token
        self.timeout_minutes = timeout_minutes

    async def list_posts(self) -> DemoResponse:
        try:
            envelope = await self.service.get(
                "posts",
                list[Post],
                client_name=self.client_name,
                timeout_minutes=self.timeout_minutes,
            )
        except UnauthorizedAccessError:
            return DemoResponse(HTTPStatus.UNAUTHORIZED)
        if not envelope.is_success:
            return _failure_response(envelope)
        return DemoResponse(HTTPStatus.OK, envelope.data or [])

    async def get_post(self, post_id: int) -> DemoResponse:
        outcome = await self.service.get_outcome(
            f"posts/{post_id}",
            Post,
            client_name=self.client_name,
            timeout_minutes=self.timeout_minutes,
        )
        match outcome:
            case Ok(data=post):
                return DemoResponse(HTTPStatus.OK, post)
            case NotFound():
                return DemoResponse(HTTPStatus.NOT_FOUND)
            case Unauthorized():
                return DemoResponse(HTTPStatus.UNAUTHORIZED)
            case Failure(message=message):
                return DemoResponse(HTTPStatus.BAD_REQUEST, message)
        raise AssertionError(f"Unhandled outcome {outcome!r}")

    async def create_post(self, post: NewPost) -> DemoResponse:
        extra_headers = {
            "X-Correlation-ID": str(uuid.uuid4()),
            "X-Request-Source": DEMO_REQUEST_SOURCE,
        }
        try:
            envelope = await self.service.post(
                "posts",
                Post,
                JsonPayload(post),
                auth_header_name="Authorization" if self.token else None,
                token=self.token,
                headers=extra_headers,
                client_name=self.client_name,
                timeout_minutes=self.timeout_minutes,
            )
        except UnauthorizedAccessError:
            return DemoResponse(HTTPStatus.UNAUTHORIZED)
        if not envelope.is_success:
            return _failure_response(envelope)
        return DemoResponse(HTTPStatus.CREATED, envelope.data)

    async def delete_post(self, post_id: int) -> DemoResponse:
        try:
            envelope = await self.service.delete(
                f"posts/{post_id}",
                client_name=self.client_name,
                timeout_minutes=self.timeout_minutes,
            )
        except UnauthorizedAccessError:
            return DemoResponse(HTTPStatus.UNAUTHORIZED)
        if not envelope.is_success:
            return _failure_response(envelope)
        return DemoResponse(HTTPStatus.NO_CONTENT)


__all__ = [
    "DEMO_CLIENT_NAME",
    "DemoResponse",
    "NewPost",
    "Post",
    "PostsDemo",
    "register_demo_transport",
]
