"""Client configuration: base URL, credentials and HTTP settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, Union
from urllib.parse import urlparse

from .constants import DEFAULT_USER_AGENT
from .errors import ConfigurationError
from .keymanager import get_api_key

DEFAULT_TIMEOUT = 30


def _env(*names: str) -> Optional[str]:
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return None


@dataclass(frozen=True)
class ProxyConfig:
    """Proxy settings, explicit or taken from the usual environment variables.

    Args:
        http_proxy: HTTP proxy URL (e.g., http://proxy:8080 or socks5://proxy:1080)
        https_proxy: HTTPS proxy URL
        no_proxy: Hosts that bypass the proxy; a leading "." matches subdomains
        enabled: Whether proxying is enabled at all
    """

    http_proxy: Optional[str] = None
    https_proxy: Optional[str] = None
    no_proxy: tuple[str, ...] = ()
    enabled: bool = True

    def resolved_http_proxy(self) -> Optional[str]:
        if not self.enabled:
            return None
        return self.http_proxy or _env("HTTP_PROXY", "http_proxy")

    def resolved_https_proxy(self) -> Optional[str]:
        if not self.enabled:
            return None
        return self.https_proxy or _env("HTTPS_PROXY", "https_proxy")

    def resolved_no_proxy(self) -> list[str]:
        if self.no_proxy:
            return list(self.no_proxy)
        env_no_proxy = _env("NO_PROXY", "no_proxy")
        if env_no_proxy:
            return [d.strip() for d in env_no_proxy.split(",") if d.strip()]
        return []

    def get_proxies(self) -> dict[str, str]:
        """Proxies mapping in the form ``requests`` expects."""
        proxies = {}
        http_proxy = self.resolved_http_proxy()
        https_proxy = self.resolved_https_proxy()
        if http_proxy:
            proxies["http"] = http_proxy
        if https_proxy:
            proxies["https"] = https_proxy
        return proxies

    def should_bypass(self, url: str) -> bool:
        hostname = urlparse(url).hostname or ""
        for pattern in self.resolved_no_proxy():
            if pattern.startswith("."):
                if hostname.endswith(pattern) or hostname == pattern[1:]:
                    return True
            elif hostname == pattern or hostname.endswith(f".{pattern}"):
                return True
        return False

    def proxies_for(self, url: str) -> dict[str, str]:
        if self.should_bypass(url):
            return {}
        return self.get_proxies()

    @classmethod
    def from_dict(cls, config: dict) -> "ProxyConfig":
        """Create ProxyConfig from dictionary."""
        return cls(
            http_proxy=config.get("http_proxy"),
            https_proxy=config.get("https_proxy"),
            no_proxy=tuple(config.get("no_proxy") or ()),
            enabled=config.get("enabled", True),
        )


@dataclass(frozen=True)
class ClientConfig:
    """Immutable connection settings for an IntelX instance.

    ``verify`` follows ``requests``: ``True`` checks certificates against the
    default CA bundle, ``False`` disables checking, and a string is a path to
    a CA bundle or the instance's self-signed certificate.
    """

    url: str
    token: Optional[str] = field(default=None, repr=False)
    timeout: float = DEFAULT_TIMEOUT
    verify: Union[bool, str] = True
    proxy: ProxyConfig = field(default_factory=ProxyConfig)
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if not self.url:
            raise ConfigurationError("IntelX URL is required")
        parsed = urlparse(self.url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(f"Invalid IntelX URL: {self.url!r}")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "url", self.url.rstrip("/"))

    @classmethod
    def from_env(
        cls,
        timeout: Optional[float] = None,
        proxy: Optional[ProxyConfig] = None,
    ) -> "ClientConfig":
        """Build a config from INTELX_URL, INTELX_TOKEN and INTELX_CERTIFICATE.

        Each value is read from the environment first, then the system keychain.
        """
        url = get_api_key("INTELX_URL")
        if not url:
            raise ConfigurationError(
                "INTELX_URL is not set (environment variable or `intelx keys set INTELX_URL`)"
            )
        certificate = get_api_key("INTELX_CERTIFICATE")
        return cls(
            url=url,
            token=get_api_key("INTELX_TOKEN"),
            timeout=timeout or DEFAULT_TIMEOUT,
            verify=certificate or True,
            proxy=proxy or ProxyConfig(),
        )
