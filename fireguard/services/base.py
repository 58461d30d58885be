"""
Base service class for external API integrations.

Provides:
- Async HTTP client with connection pooling
- Exponential backoff retry logic
- Request pacing (rate limiting)
- Response caching
- Structured error logging
- Timeout handling
"""

from typing import Any, Dict, Optional, Union
import asyncio
from datetime import datetime, timedelta
import hashlib
import json

import aiohttp
from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from fireguard.utils.logger import get_logger
from fireguard.utils.exceptions import (
    ExternalAPIError,
    RateLimitExceededError,
    APITimeoutError,
)

logger = get_logger(__name__)


class BaseService:
    """
    Base class for external API services.

    Features:
    - Async HTTP with connection pooling
    - Exponential backoff on connection errors and timeouts
    - Minimum interval between requests (requests per second)
    - In-memory caching with TTL and a size cap for GET requests
    - Errors mapped onto the FireGuard exception hierarchy
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        max_retries: int = 3,
        rate_limit_per_second: float = 10.0,
        cache_ttl_seconds: int = 300,
        cache_max_entries: int = 1024,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.max_retries = max_retries
        self.rate_limit_per_second = rate_limit_per_second
        self.cache_ttl_seconds = cache_ttl_seconds
        self.cache_max_entries = cache_max_entries

        self._session: Optional[aiohttp.ClientSession] = None
        self._cache: Dict[str, tuple[Any, datetime]] = {}
        self._rate_lock = asyncio.Lock()
        self._last_request_time = 0.0

    @property
    def service_name(self) -> str:
        return self.__class__.__name__

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def connect(self):
        """Initialize HTTP session with connection pooling."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=100,
                limit_per_host=30,
                ttl_dns_cache=300,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=self.timeout,
                raise_for_status=False,
            )
            logger.info(
                f"HTTP session created for {self.service_name}",
                base_url=self.base_url,
            )

    async def close(self):
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            logger.info(f"HTTP session closed for {self.service_name}")

    def _get_cache_key(self, url: str, params: Optional[Dict] = None) -> str:
        """Generate cache key from URL and parameters."""
        cache_str = f"{url}:{json.dumps(params, sort_keys=True) if params else ''}"
        return hashlib.md5(cache_str.encode()).hexdigest()

    def _get_from_cache(self, cache_key: str) -> Optional[Any]:
        """Retrieve value from cache if not expired."""
        if cache_key in self._cache:
            value, expires_at = self._cache[cache_key]
            if datetime.utcnow() < expires_at:
                logger.debug(f"Cache hit: {cache_key[:8]}...")
                return value
            del self._cache[cache_key]
            logger.debug(f"Cache expired: {cache_key[:8]}...")
        return None

    def _purge_expired_cache(self, now: datetime):
        expired = [key for key, (_, expires_at) in self._cache.items() if expires_at <= now]
        for key in expired:
            del self._cache[key]

    def _set_cache(self, cache_key: str, value: Any):
        """
        Store value in cache with TTL.

        Expired entries are purged on every insert; when the cache is still
        full the oldest insertions are evicted first.
        """
        if self.cache_ttl_seconds <= 0 or self.cache_max_entries <= 0:
            return
        now = datetime.utcnow()
        self._purge_expired_cache(now)

        self._cache.pop(cache_key, None)
        while len(self._cache) >= self.cache_max_entries:
            del self._cache[next(iter(self._cache))]

        self._cache[cache_key] = (value, now + timedelta(seconds=self.cache_ttl_seconds))

    async def _wait_for_rate_limit(self):
        """Enforce a minimum interval between consecutive requests."""
        async with self._rate_lock:
            loop = asyncio.get_running_loop()
            min_interval = 1.0 / self.rate_limit_per_second
            time_since_last = loop.time() - self._last_request_time

            if time_since_last < min_interval:
                await asyncio.sleep(min_interval - time_since_last)

            self._last_request_time = loop.time()

    async def _send(
        self,
        method: str,
        url: str,
        params: Optional[Dict],
    ) -> Union[Dict, str, bytes]:
        """One HTTP round trip. Raises raw aiohttp/asyncio errors for the retry loop."""
        await self._wait_for_rate_limit()

        async with self._session.request(method=method, url=url, params=params) as response:
            if response.status == 429:
                logger.warning("Rate limit exceeded", url=url)
                raise RateLimitExceededError(
                    f"Rate limit exceeded for {self.service_name}",
                    service_name=self.service_name,
                )

            if response.status >= 400:
                error_text = await response.text()
                logger.error(
                    f"API error {response.status}",
                    url=url,
                    status=response.status,
                    response=error_text[:500],
                )
                raise ExternalAPIError(
                    f"API returned {response.status}: {error_text[:200]}",
                    service_name=self.service_name,
                    response_body=error_text,
                )

            content_type = response.headers.get("Content-Type", "")

            if "application/json" in content_type:
                data = await response.json()
            elif "text/" in content_type or "csv" in content_type:
                data = await response.text()
            else:
                data = await response.read()

            logger.debug(
                f"Request successful: {method} {url}",
                status=response.status,
                content_type=content_type,
            )
            return data

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict] = None,
        use_cache: bool = True,
    ) -> Union[Dict, str, bytes]:
        """
        Make HTTP request with retry logic and caching.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (appended to base_url)
            params: Query parameters
            use_cache: Whether to use caching (only for GET)

        Returns:
            Response data (dict for JSON, str for text, bytes for binary)

        Raises:
            ExternalAPIError: API returned error response or connection failed
            APITimeoutError: Request timed out on every attempt
            RateLimitExceededError: Rate limit exceeded
        """
        await self.connect()

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        cache_key = self._get_cache_key(url, params) if use_cache and method == "GET" else None

        if cache_key:
            cached = self._get_from_cache(cache_key)
            if cached is not None:
                return cached

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_retries),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception_type((aiohttp.ClientError, asyncio.TimeoutError)),
                reraise=True,
            ):
                with attempt:
                    data = await self._send(method, url, params)

        except asyncio.TimeoutError as e:
            logger.error(f"Request timeout: {url}", timeout=self.timeout.total)
            raise APITimeoutError(
                f"Request to {url} timed out after {self.timeout.total}s",
                service_name=self.service_name,
                timeout_seconds=self.timeout.total,
            ) from e

        except aiohttp.ClientError as e:
            logger.error(f"HTTP client error: {url}", error=str(e))
            raise ExternalAPIError(
                f"HTTP client error: {str(e)}",
                service_name=self.service_name,
            ) from e

        except ValueError as e:
            logger.error(f"Malformed response body: {url}", error=str(e))
            raise ExternalAPIError(
                f"Malformed response body: {str(e)}",
                service_name=self.service_name,
            ) from e

        if cache_key:
            self._set_cache(cache_key, data)

        return data

    async def get(
        self,
        endpoint: str,
        params: Optional[Dict] = None,
        use_cache: bool = True,
    ) -> Union[Dict, str, bytes]:
        """Make GET request."""
        return await self._make_request("GET", endpoint, params=params, use_cache=use_cache)
