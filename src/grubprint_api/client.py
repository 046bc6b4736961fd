"""HTTP client for the Grubprint API."""

import logging
import time
from functools import lru_cache
from typing import Any

import httpx

from grubprint_api.core.config import get_settings
from grubprint_api.models.food import FoodMatch, FoodRecord, Nutrient, Weight

logger = logging.getLogger(__name__)


class ResponseCache:
    """
    In-memory cache of decoded JSON bodies keyed by request path.

    The served data only changes when a new dataset is published, so
    entries live for a fixed time rather than being revalidated.
    """

    def __init__(self, ttl_seconds: float) -> None:
        self.ttl_seconds = ttl_seconds
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, body = entry
        if time.monotonic() >= expires_at:
            del self._entries[key]
            return None
        return body

    def store(self, key: str, body: Any) -> None:
        if self.ttl_seconds <= 0:
            return
        self._entries[key] = (time.monotonic() + self.ttl_seconds, body)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class GrubprintClient:
    """Client for the food, weight and nutrient endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        cache_ttl: float = 86400.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the API (e.g., "http://localhost:8000")
            timeout: Request timeout in seconds
            cache_ttl: Seconds a response is reused; 0 disables caching
            transport: Optional httpx transport, e.g. ASGITransport in tests
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.cache = ResponseCache(cache_ttl)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get(self, path: str, params: dict[str, str] | None = None) -> Any:
        """
        GET a path and decode its JSON body, serving repeats from the cache.

        Raises:
            httpx.HTTPError: If the request fails or returns an error status
        """
        client = await self._get_client()
        request = client.build_request("GET", path, params=params)
        key = request.url.raw_path.decode("ascii")

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {key}")
            return cached

        response = await client.send(request)
        response.raise_for_status()
        body = response.json()
        self.cache.store(key, body)
        return body

    async def search_foods(self, query: str) -> list[FoodMatch]:
        """
        Search foods by description.

        Args:
            query: Free text, e.g. "cheddar cheese"

        Returns:
            Matching foods, best match first
        """
        data = await self._get("/foods/search", params={"q": query})
        return [FoodMatch.model_validate(item) for item in data]

    async def get_food(self, food_id: str) -> FoodRecord:
        """
        Get a single food by id.

        Raises:
            httpx.HTTPStatusError: 404 if no food has this id
        """
        data = await self._get(f"/foods/id/{food_id}")
        return FoodRecord.model_validate(data)

    async def weights_by_food_id(self, food_id: str) -> list[Weight]:
        data = await self._get(f"/weights/{food_id}")
        return [Weight.model_validate(item) for item in data]

    async def nutrients_by_food_id(self, food_id: str) -> list[Nutrient]:
        data = await self._get(f"/nutrients/{food_id}")
        return [Nutrient.model_validate(item) for item in data]

    async def health_check(self) -> dict:
        """Get service health; never cached."""
        client = await self._get_client()
        response = await client.get("/health")
        response.raise_for_status()
        return response.json()


@lru_cache
def get_grubprint_client() -> GrubprintClient:
    """
    Get a cached API client instance.

    Returns:
        GrubprintClient configured from settings
    """
    settings = get_settings()
    return GrubprintClient(
        base_url=settings.api_base_url,
        timeout=settings.client_timeout_seconds,
        cache_ttl=settings.client_cache_ttl_seconds,
    )
