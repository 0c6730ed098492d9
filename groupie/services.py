"""Client for the public Groupie Trackers artist API."""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from . import cache, config

logger = logging.getLogger(__name__)


class UnknownResource(ValueError):
    """Raised for proxy paths outside the upstream API's resources."""


class GroupieAPIClient:
    """Read-only access to the upstream artists, locations, dates and relations."""

    def __init__(
        self,
        base_url: str = config.UPSTREAM_BASE_URL,
        *,
        timeout: float = config.UPSTREAM_TIMEOUT_SECONDS,
        cache_ttl: Optional[float] = config.CACHE_DEFAULT_TTL_SECONDS,
        cache_size: Optional[int] = config.CACHE_MAX_ENTRIES,
        cache_client: Optional[cache.TTLCache] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.cache_client = cache_client if cache_client is not None else cache.TTLCache(cache_ttl, max_entries=cache_size)
        self.session = session or requests.Session()

    def fetch(self, resource: str) -> Any:
        """Return the decoded JSON for ``resource`` (e.g. ``"artists/3"``).

        Raises UnknownResource for unsupported paths, requests.HTTPError for
        upstream error statuses and requests.RequestException when the
        upstream cannot be reached.
        """

        path = normalize_resource(resource)
        key = cache.build_cache_key(self.base_url, path)
        return self.cache_client.get_or_set(key, lambda: self._request(path))

    def _request(self, path: str) -> Any:
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("Upstream request to %s failed: %s", url, exc)
            raise
        return response.json()


def normalize_resource(resource: str) -> str:
    """Validate a proxy path: a known resource optionally followed by an id."""

    parts = [part for part in resource.strip("/").split("/") if part]
    if not parts or len(parts) > 2 or parts[0] not in config.UPSTREAM_RESOURCES:
        raise UnknownResource(resource)
    if len(parts) == 2 and not (parts[1].isascii() and parts[1].isdigit()):
        raise UnknownResource(resource)
    return "/".join(parts)


def build_upstream_client(settings: config.Settings) -> GroupieAPIClient:
    return GroupieAPIClient(
        settings.upstream_url,
        timeout=settings.upstream_timeout,
        cache_ttl=settings.proxy_cache_ttl,
        cache_size=settings.proxy_cache_size,
    )
