# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""pooledhttp demo CLI."""

import argparse
import asyncio
import json
import sys
from typing import Any

from .. import codec
from ..config import HttpSettings, load_http_settings
from ..demo import DemoResponse, NewPost, PostsDemo, register_demo_transport
from ..http.client import create_default_pool
from ..log import setup_logging
from ..service import HttpClientFactoryService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="pooledhttp JSONPlaceholder demo")
    parser.add_argument("--base-url", help="Override the demo service base URL")
    parser.add_argument("--timeout-minutes", type=float, help="Per-call timeout override in minutes")
    parser.add_argument("--token", help="Bearer token sent with create requests")
    parser.add_argument("--json", action="store_true", help="Output JSON instead of a human-friendly summary")
    parser.add_argument("--insecure", action="store_true", help="Skip TLS verification")
    parser.add_argument("--log-level", help="Logging level (default from POOLEDHTTP_LOG_LEVEL)")

    resources = parser.add_subparsers(dest="resource", required=True)
    posts = resources.add_parser("posts", help="Work with /posts")
    actions = posts.add_subparsers(dest="action", required=True)

    actions.add_parser("list", help="List posts")

    get = actions.add_parser("get", help="Fetch one post")
    get.add_argument("post_id", type=int)

    create = actions.add_parser("create", help="Create a post")
    create.add_argument("--title", required=True)
    create.add_argument("--body", required=True)
    create.add_argument("--user-id", type=int, default=1)

    delete = actions.add_parser("delete", help="Delete a post")
    delete.add_argument("post_id", type=int)
    return parser


async def _dispatch(demo: PostsDemo, args: argparse.Namespace) -> DemoResponse:
    if args.action == "list":
        return await demo.list_posts()
    if args.action == "get":
        return await demo.get_post(args.post_id)
    if args.action == "create":
        return await demo.create_post(NewPost(title=args.title, body=args.body, user_id=args.user_id))
    return await demo.delete_post(args.post_id)


async def run(args: argparse.Namespace, settings: HttpSettings) -> DemoResponse:
    pool = create_default_pool(settings)
    register_demo_transport(pool, args.base_url)
    async with HttpClientFactoryService(pool) as service:
        bearer = f"Bearer {args.token}" if args.token else None
        demo = PostsDemo(service, token=bearer, timeout_minutes=args.timeout_minutes)
        return await _dispatch(demo, args)


def _print_json(response: DemoResponse) -> None:
    payload: dict[str, Any] = {"status": int(response.status), "body": codec.to_jsonable(response.body)}
    json.dump(payload, sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _pretty_print(response: DemoResponse) -> None:
    print(f"Status: {int(response.status)}")
    body = response.body
    if body is None:
        return
    if isinstance(body, list):
        for item in body:
            print(f"- {codec.dumps(item)}")
        return
    print(body if isinstance(body, str) else codec.dumps(body))


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    settings = load_http_settings()
    if args.insecure:
        settings.verify_ssl = False

    response = asyncio.run(run(args, settings))

    if args.json:
        _print_json(response)
    else:
        _pretty_print(response)

    return 0 if response.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
