# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for pooledhttp."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"pooledhttp/{__version__}"
DEFAULT_DEMO_BASE_URL = "https://jsonplaceholder.typicode.com/"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class HttpSettings:
    """Transport pool defaults."""

    timeout: float = 100.0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True
    max_connections: int = 100
    max_keepalive_connections: int = 20
    demo_base_url: str = DEFAULT_DEMO_BASE_URL

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        timeout = _float_env("POOLEDHTTP_HTTP_TIMEOUT", cls.timeout)
        if timeout <= 0:
            timeout = cls.timeout
        max_connections = _int_env("POOLEDHTTP_MAX_CONNECTIONS", cls.max_connections)
        if max_connections <= 0:
            max_connections = cls.max_connections
        max_keepalive = _int_env("POOLEDHTTP_MAX_KEEPALIVE", cls.max_keepalive_connections)
        if max_keepalive < 0:
            max_keepalive = cls.max_keepalive_connections
        return cls(
            timeout=timeout,
            user_agent=os.getenv("POOLEDHTTP_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("POOLEDHTTP_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("POOLEDHTTP_HTTP_VERIFY_SSL", cls.verify_ssl),
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive,
            demo_base_url=os.getenv("POOLEDHTTP_DEMO_BASE_URL", cls.demo_base_url),
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()
