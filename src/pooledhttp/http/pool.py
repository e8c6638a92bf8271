# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Named transport pool.

Profiles are registered once at startup; ``acquire`` hands out the shared transport for
a profile, creating it on first use. The pool owns every transport it creates and is the
only party that closes them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from ..config import HttpSettings, load_http_settings
from ..errors import ConfigurationError
from .client import TransportHandle, TransportProfile
from .headers import has_header, iter_header_items
from .httpx_client import HttpxTransport

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_NAME = ""

TransportFactory = Callable[[TransportProfile, HttpSettings], TransportHandle]


class TransportPool:
    """Registry of named transport profiles and their lazily created transports."""

    def __init__(
        self,
        settings: HttpSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        factory: TransportFactory | None = None,
    ):
        self.settings = settings or load_http_settings()
        self._transport = transport
        self._factory = factory
        self._profiles: dict[str, TransportProfile] = {}
        self._transports: dict[str, TransportHandle] = {}
        self._overrides: dict[str, httpx.AsyncBaseTransport] = {}
        self._retired: list[TransportHandle] = []

    @staticmethod
    def _key(name: str | None) -> str:
        return (name or "").strip()

    def register(
        self,
        name: str,
        base_url: str = "",
        default_headers: Mapping[str, str] | Any = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> TransportProfile:
        """Register (or replace) the profile for ``name``. A blank name configures the default transport."""
        key = self._key(name)
        headers = iter_header_items(default_headers)
        if self.settings.user_agent and not has_header(headers, "User-Agent"):
            headers.append(("User-Agent", self.settings.user_agent))
        profile = TransportProfile(name=key, base_url=base_url or "", default_headers=tuple(headers), timeout=timeout)

        previous = self._transports.pop(key, None)
        self._retired = [handle for handle in self._retired if not handle.is_closed]
        if previous is not None:
            self._retired.append(previous)
        self._profiles[key] = profile
        if transport is not None:
            self._overrides[key] = transport
        else:
            self._overrides.pop(key, None)
        logger.debug("Registered transport profile %r -> %s", key, profile.base_url or "<no base url>")
        return profile

    def is_registered(self, name: str) -> bool:
        return self._key(name) in self._profiles

    @property
    def names(self) -> list[str]:
        return sorted(self._profiles)

    def acquire(self, client_name: str | None = DEFAULT_CLIENT_NAME) -> TransportHandle:
        """
        Return the shared transport for ``client_name``.

        Blank names resolve to the default unnamed transport, which is configured from
        HttpSettings on first use unless registered explicitly. Unknown non-blank names
        raise ConfigurationError.
        """
        key = self._key(client_name)
        handle = self._transports.get(key)
        if handle is not None:
            return handle

        profile = self._profiles.get(key)
        if profile is None:
            if key:
                raise ConfigurationError(key)
            profile = self.register(DEFAULT_CLIENT_NAME)

        handle = self._create(profile)
        self._transports[key] = handle
        return handle

    def _create(self, profile: TransportProfile) -> TransportHandle:
        if self._factory is not None:
            return self._factory(profile, self.settings)
        transport = self._overrides.get(profile.name, self._transport)
        return HttpxTransport(profile, self.settings, transport=transport)

    async def close_retired(self) -> None:
        """Close transports replaced by re-registration once no call is using them."""
        retired, self._retired = self._retired, []
        for handle in retired:
            await handle.aclose()

    async def aclose(self) -> None:
        handles = list(self._transports.values()) + self._retired
        self._transports.clear()
        self._retired.clear()
        for handle in handles:
            await handle.aclose()

    async def __aenter__(self) -> TransportPool:
        return self

    async def __aexit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        await self.aclose()


__all__ = ["DEFAULT_CLIENT_NAME", "TransportFactory", "TransportPool"]
