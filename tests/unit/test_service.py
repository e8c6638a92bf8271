# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import asyncio
import json
from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus

import httpx
import pytest

from pooledhttp.errors import (
    ArgumentError,
    ConfigurationError,
    DeserializationError,
    ItemNotFoundError,
    UnauthorizedAccessError,
)
from pooledhttp.http.models import Failure, JsonPayload, MultipartPayload, NotFound, Ok, RawJson, Unauthorized

CLIENT_NAME = "TestApi"
BASE_URL = "https://api.test/"


class Status(Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


@dataclass
class Post:
    user_id: int
    id: int
    title: str
    body: str


@dataclass
class Article:
    id: int
    title: str
    status: Status


POST = {"userId": 1, "id": 1, "title": "foo", "body": "bar"}


@pytest.mark.asyncio
async def test_get_success_returns_typed_envelope(service, handler):
    handler.add("GET", "/posts/1", json=POST)
    envelope = await service.get("posts/1", Post, client_name=CLIENT_NAME)
    assert envelope.is_success is True
    assert envelope.message == "SUCCESS"
    assert envelope.status_code is HTTPStatus.OK
    assert envelope.data == Post(user_id=1, id=1, title="foo", body="bar")


@pytest.mark.asyncio
async def test_get_not_found_returns_failure_envelope(service, handler):
    handler.add("GET", "/posts/9999", status_code=404, json={})
    envelope = await service.get("posts/9999", Post, client_name=CLIENT_NAME)
    assert envelope.is_success is False
    assert envelope.message == "Item not found"
    assert envelope.data is None


@pytest.mark.asyncio
async def test_get_unauthorized_raises(service, handler):
    handler.add("GET", "/admin", status_code=401, text="denied")
    with pytest.raises(UnauthorizedAccessError):
        await service.get("admin", client_name=CLIENT_NAME)


@pytest.mark.asyncio
async def test_get_server_error_message_is_raw_body(service, handler):
    handler.add("GET", "/flaky", status_code=502, text="bad gateway")
    envelope = await service.get("flaky", client_name=CLIENT_NAME)
    assert envelope.is_success is False
    assert envelope.message == "bad gateway"
    assert envelope.status_code == 502
    assert len(handler.requests) == 1


@pytest.mark.asyncio
async def test_get_malformed_body_raises(service, handler):
    handler.add("GET", "/posts/1", text="<html>")
    with pytest.raises(DeserializationError):
        await service.get("posts/1", Post, client_name=CLIENT_NAME)


@pytest.mark.asyncio
async def test_get_sends_merged_headers(service, handler):
    handler.add("GET", "/posts", json=[])
    await service.get(
        "posts",
        list[Post],
        auth_header_name="Authorization",
        token="Bearer abc",
        headers={"X-Api-Key": "caller-key", "X-Correlation-ID": "c-1"},
        client_name=CLIENT_NAME,
    )
    sent = handler.last.headers
    assert sent["Authorization"] == "Bearer abc"
    assert sent["X-Api-Key"] == "profile-key"
    assert sent["X-Correlation-ID"] == "c-1"
    assert sent["Accept"] == "application/json"
    assert sent["User-Agent"] == "pooledhttp-tests/1.0"


@pytest.mark.asyncio
async def test_default_accept_header_added_when_profile_has_none(pool, service, handler):
    pool.register("Bare", "https://bare.test/")
    handler.add("GET", "/x", json={})
    await service.get("x", client_name="Bare")
    assert handler.last.headers["Accept"] == "application/json"
    assert handler.last.url == "https://bare.test/x"


@pytest.mark.asyncio
async def test_unknown_client_name_raises_before_sending(service, handler):
    with pytest.raises(ConfigurationError):
        await service.get("posts", client_name="Nope")
    assert handler.requests == []


@pytest.mark.asyncio
async def test_default_client_used_when_no_name(service, handler):
    handler.add("GET", "/abs", json={"a": 1})
    envelope = await service.get("https://elsewhere.test/abs")
    assert envelope.data == {"a": 1}
    assert handler.last.url.host == "elsewhere.test"


@pytest.mark.asyncio
async def test_per_call_timeout_override(service, handler):
    handler.add("GET", "/slow", json={})
    await service.get("slow", client_name=CLIENT_NAME, timeout_minutes=2)
    assert handler.last.extensions["timeout"]["read"] == 120.0
    await service.get("slow", client_name=CLIENT_NAME)
    assert handler.last.extensions["timeout"]["read"] == 5.0


@pytest.mark.asyncio
async def test_get_raw_and_bytes_do_not_classify(service, handler):
    handler.add("GET", "/file", status_code=401, content=b"\x00\x01")
    raw = await service.get_raw("file", client_name=CLIENT_NAME)
    assert raw.status_code == 401
    assert raw.ok is False
    assert await service.get_bytes("file", client_name=CLIENT_NAME) == b"\x00\x01"


@pytest.mark.asyncio
async def test_get_object_unwraps_payload(service, handler):
    handler.add("GET", "/posts/1", json=POST)
    handler.add("GET", "/posts/2", status_code=404)
    handler.add("GET", "/posts/3", status_code=401)
    handler.add("GET", "/posts/4", status_code=500, text="boom")

    assert await service.get_object("posts/1", Post, client_name=CLIENT_NAME) == Post(1, 1, "foo", "bar")
    with pytest.raises(ItemNotFoundError):
        await service.get_object("posts/2", Post, client_name=CLIENT_NAME)
    with pytest.raises(UnauthorizedAccessError):
        await service.get_object("posts/3", Post, client_name=CLIENT_NAME)
    assert await service.get_object("posts/4", Post, client_name=CLIENT_NAME) is None


@pytest.mark.asyncio
async def test_get_outcome_variants(service, handler):
    handler.add("GET", "/posts/1", json=POST)
    handler.add("GET", "/posts/2", status_code=404)
    handler.add("GET", "/posts/3", status_code=401)
    handler.add("GET", "/posts/4", status_code=500, text="boom")

    assert await service.get_outcome("posts/1", Post, client_name=CLIENT_NAME) == Ok(Post(1, 1, "foo", "bar"))
    assert isinstance(await service.get_outcome("posts/2", client_name=CLIENT_NAME), NotFound)
    assert isinstance(await service.get_outcome("posts/3", client_name=CLIENT_NAME), Unauthorized)
    assert await service.get_outcome("posts/4", client_name=CLIENT_NAME) == Failure("boom", HTTPStatus.INTERNAL_SERVER_ERROR)


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [200, 204])
async def test_delete_success(service, handler, status_code):
    handler.add("DELETE", "/posts/1", status_code=status_code)
    envelope = await service.delete("posts/1", client_name=CLIENT_NAME)
    assert envelope.is_success is True
    assert envelope.message == "SUCCESS"
    assert handler.last.method == "DELETE"


@pytest.mark.asyncio
async def test_delete_failure_and_raw(service, handler):
    handler.add("DELETE", "/posts/1", status_code=409, text="conflict")
    envelope = await service.delete("posts/1", client_name=CLIENT_NAME)
    assert envelope.is_success is False
    assert envelope.message == "conflict"
    raw = await service.delete_raw("posts/1", client_name=CLIENT_NAME)
    assert raw.status_code == 409


@pytest.mark.asyncio
async def test_post_sends_caller_payload(service, handler):
    handler.add("POST", "/posts", status_code=201, json={**POST, "id": 101})
    envelope = await service.post(
        "posts",
        Post,
        JsonPayload(Post(user_id=1, id=0, title="foo", body="bar")),
        client_name=CLIENT_NAME,
    )
    assert envelope.status_code is HTTPStatus.CREATED
    assert envelope.data.id == 101
    assert json.loads(handler.last.content) == {"user_id": 1, "id": 0, "title": "foo", "body": "bar"}
    assert handler.last.headers["Content-Type"] == "application/json; charset=utf-8"


@pytest.mark.asyncio
async def test_post_string_body_is_not_reserialized(service, handler):
    handler.add("POST", "/raw", json={})
    await service.post("raw", body='{"Already": "json"}', client_name=CLIENT_NAME)
    assert handler.last.content == b'{"Already": "json"}'


@pytest.mark.asyncio
async def test_post_serializes_enums_as_strings_and_round_trips(service, handler):
    article = Article(id=3, title="t", status=Status.PUBLISHED)

    def echo(request):
        handler.requests.append(request)
        upper = {k.upper(): v for k, v in json.loads(request.content).items()}
        return httpx.Response(200, json=upper)

    service.pool.register("Echo", "https://api.test/", transport=httpx.MockTransport(echo))
    envelope = await service.post("echo", Article, JsonPayload(article), client_name="Echo")
    assert json.loads(handler.last.content)["status"] == "PUBLISHED"
    assert envelope.data == article


@pytest.mark.asyncio
async def test_post_untyped(service, handler):
    handler.add("POST", "/events", status_code=202, text="queued")
    envelope = await service.post_untyped("events", RawJson("  "), client_name=CLIENT_NAME)
    assert envelope.is_success is True
    assert envelope.data is None
    assert handler.last.content == b""


@pytest.mark.asyncio
async def test_post_raw_and_put_raw_send_empty_json(service, handler):
    handler.add("POST", "/r", status_code=401)
    handler.add("PUT", "/r", status_code=200)
    raw = await service.post_raw("r", client_name=CLIENT_NAME)
    assert raw.status_code == 401
    assert handler.last.headers["Content-Type"].startswith("application/json")
    raw = await service.put_raw("r", {"a": 1}, client_name=CLIENT_NAME)
    assert raw.status_code == 200
    assert handler.last.content == b'{"a":1}'


@pytest.mark.asyncio
async def test_put_and_patch(service, handler):
    handler.add("PUT", "/posts/1", json=POST)
    handler.add("PATCH", "/posts/1", json={**POST, "title": "patched"})
    put = await service.put("posts/1", Post, POST, client_name=CLIENT_NAME)
    patch = await service.patch("posts/1", Post, '{"title":"patched"}', client_name=CLIENT_NAME)
    assert put.data.title == "foo"
    assert patch.data.title == "patched"
    assert handler.requests[-1].method == "PATCH"


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [None, {}])
async def test_post_form_rejects_empty_payload_before_sending(service, handler, payload):
    with pytest.raises(ArgumentError):
        await service.post_form("token", payload=payload, client_name=CLIENT_NAME)
    with pytest.raises(ArgumentError):
        await service.post_form_untyped("token", payload, client_name=CLIENT_NAME)
    assert handler.requests == []


@pytest.mark.asyncio
async def test_post_form_encodes_fields(service, handler):
    handler.add("POST", "/token", json={"access_token": "t"})
    envelope = await service.post_form("token", dict[str, str], {"user": "a", "pass": "b c"}, client_name=CLIENT_NAME)
    assert envelope.data == {"access_token": "t"}
    assert handler.last.content == b"user=a&pass=b+c"
    assert handler.last.headers["Content-Type"] == "application/x-www-form-urlencoded"

    untyped = await service.post_form_untyped("token", {"user": "a"}, client_name=CLIENT_NAME)
    assert untyped.is_success is True


@pytest.mark.asyncio
async def test_post_multipart(service, handler):
    handler.add("POST", "/upload", json={"stored": True})
    form = MultipartPayload(files={"file": ("a.txt", b"hello", "text/plain")}, data={"kind": "note"})
    envelope = await service.post_multipart("upload", dict[str, bool], form, client_name=CLIENT_NAME)
    assert envelope.data == {"stored": True}
    assert handler.last.headers["Content-Type"].startswith("multipart/form-data; boundary=")
    assert b"hello" in handler.last.content
    raw = await service.post_multipart_raw("upload", form, client_name=CLIENT_NAME)
    assert raw.status_code == 200


@pytest.mark.asyncio
async def test_concurrent_calls_are_independent(service, handler):
    for i in range(1, 6):
        handler.add("GET", f"/posts/{i}", json={**POST, "id": i})
    results = await asyncio.gather(*(service.get(f"posts/{i}", Post, client_name=CLIENT_NAME) for i in range(1, 6)))
    assert [r.data.id for r in results] == [1, 2, 3, 4, 5]


@pytest.mark.asyncio
async def test_transport_errors_propagate(service, pool):
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    pool.register("Down", "https://down.test/", transport=httpx.MockTransport(handler))
    with pytest.raises(httpx.ConnectTimeout):
        await service.get("x", client_name="Down")


@pytest.mark.asyncio
async def test_service_context_closes_pool(pool, handler):
    from pooledhttp.service import HttpClientFactoryService

    handler.add("GET", "/posts/1", json=POST)
    async with HttpClientFactoryService(pool) as service:
        handle = pool.acquire(CLIENT_NAME)
        await service.get("posts/1", client_name=CLIENT_NAME)
    assert handle.is_closed


@pytest.mark.asyncio
async def test_profile_content_type_does_not_override_multipart_or_bodiless_requests(service, pool, handler):
    pool.register("JsonApi", BASE_URL, {"Content-Type": "application/json"})
    handler.add("POST", "/upload", json={"stored": True})
    handler.add("GET", "/posts/1", json=POST)

    form = MultipartPayload(files={"file": ("a.txt", b"hello", "text/plain")})
    await service.post_multipart("upload", dict[str, bool], form, client_name="JsonApi")
    assert handler.last.headers["Content-Type"].startswith("multipart/form-data; boundary=")

    await service.get("posts/1", Post, client_name="JsonApi")
    assert "Content-Type" not in handler.last.headers


@pytest.mark.asyncio
async def test_get_null_body_is_success_without_data(service, handler):
    handler.add("GET", "/posts/n", text="null")
    envelope = await service.get("posts/n", Post, client_name=CLIENT_NAME)
    assert envelope.is_success is True
    assert envelope.data is None
