from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional

import redis
import requests

logger = logging.getLogger(__name__)


class CollaboratorError(Exception):
    """An external data source failed, timed out or returned an unusable payload."""


class CachedJsonClient:
    """JSON API client shared by the trend and market-data collaborators.

    Responses are cached by a caller-supplied key, in Redis if ``redis_url`` is
    set and in a per-instance dict otherwise, and requests from one instance are
    spaced at least ``min_interval_secs`` apart. Any transport or decoding problem
    surfaces as :class:`CollaboratorError`.
    """

    cache_prefix = "pricing"

    def __init__(self, config: Any, session: Optional[requests.Session] = None) -> None:
        self.config = config
        self.session = session or requests.Session()
        self._last_call = 0.0
        self._memo: dict[str, str] = {}
        self._redis: Optional[redis.Redis] = (
            redis.Redis.from_url(config.redis_url) if config.redis_url else None
        )

    def _cache_get(self, key: str) -> Optional[str]:
        if self._redis is None:
            return self._memo.get(key)
        try:
            raw = self._redis.get(key)
        except redis.RedisError as e:
            logger.warning("Cache read failed for %s: %s", key, e)
            return None
        if isinstance(raw, (bytes, bytearray)):
            return raw.decode("utf-8")
        return raw

    def _cache_set(self, key: str, val: str) -> None:
        if self._redis is None:
            self._memo[key] = val
            return
        try:
            self._redis.setex(key, self.config.cache_ttl_secs, val)
        except redis.RedisError as e:
            logger.warning("Cache write failed for %s: %s", key, e)

    def _auth_headers(self) -> dict[str, str]:
        key = self.config.api_key
        auth = {"Authorization": f"Bearer {key}", "X-API-Key": key} if key else {}
        return {"User-Agent": self.config.user_agent, **auth}

    def _pace(self) -> None:
        now = time.time()
        if now - self._last_call < self.config.min_interval_secs:
            time.sleep(self.config.min_interval_secs - (now - self._last_call))

    def _url(self, path: str) -> str:
        if not self.config.base_url:
            raise CollaboratorError(f"{type(self).__name__} has no base URL configured")
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def request_json(self, method: str, path: str, cache_key: str, **kwargs: Any) -> Dict[str, Any]:
        """Perform a request and return the decoded JSON object, using the cache when warm."""
        key = f"{self.cache_prefix}:{cache_key}"
        cached = self._cache_get(key)
        if cached:
            try:
                return json.loads(cached)
            except ValueError:
                logger.debug("Ignoring corrupt cache entry %s", key)

        url = self._url(path)
        self._pace()
        try:
            resp = self.session.request(
                method,
                url,
                headers=self._auth_headers(),
                timeout=self.config.timeout_secs,
                **kwargs,
            )
            self._last_call = time.time()
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise CollaboratorError(f"{method} {url} failed: {e}") from e
        if not isinstance(payload, dict):
            raise CollaboratorError(f"{method} {url} returned {type(payload).__name__}, expected an object")

        self._cache_set(key, json.dumps(payload))
        return payload
