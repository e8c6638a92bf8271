# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport handle abstraction and pool factory."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from ..config import HttpSettings, load_http_settings
from .models import HttpRequest, HttpResponse

if TYPE_CHECKING:
    from .pool import TransportPool


@dataclass(frozen=True)
class TransportProfile:
    """Named connection profile: base address plus headers sent on every request."""

    name: str = ""
    base_url: str = ""
    default_headers: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    timeout: float | None = None


class TransportHandle(Protocol):
    """Pooled transport borrowed per call. Callers must not close it."""

    @property
    def profile(self) -> TransportProfile: ...

    @property
    def is_closed(self) -> bool: ...

    async def send(self, request: HttpRequest) -> HttpResponse: ...

    async def aclose(self) -> None:  # pragma: no cover - pool-owned
        ...


def create_default_pool(settings: HttpSettings | None = None) -> TransportPool:
    """Factory for the default httpx-backed transport pool."""
    from .pool import TransportPool

    return TransportPool(settings or load_http_settings())
