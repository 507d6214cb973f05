"""Base HTTP client with rate limiting and retry logic."""

import asyncio

import httpx
from loguru import logger
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from bgg_client.errors import (
    CatalogError,
    CatalogNotFoundError,
    CatalogPendingError,
    CatalogUnavailableError,
)
from bgg_client.limiter import RateLimiter, shared_limiter
from settings import BGG_API_TOKEN, BGG_API_URL, BGG_RATE_LIMIT_DELAY, BGG_TIMEOUT


def _is_retryable_error(exc: BaseException) -> bool:
    """Check if exception is retryable (network errors + 5xx server errors)."""
    if isinstance(exc, (httpx.ReadError, httpx.ConnectError, httpx.TimeoutException)):
        return True
    return isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code >= 500


class BaseClient:
    """Base async HTTP client.

    Calls go through a :class:`RateLimiter` shared by every client in the
    process (unless one is passed in, whose delay then wins), so they are
    strictly sequential and spaced by at least ``rate_limit_delay`` seconds.
    A 202 ("request queued, still processing") response is retried exactly
    once after the same delay.
    """

    def __init__(
        self,
        base_url: str = BGG_API_URL,
        timeout: float = BGG_TIMEOUT,
        rate_limit_delay: float = BGG_RATE_LIMIT_DELAY,
        token: str | None = BGG_API_TOKEN,
        transport: httpx.AsyncBaseTransport | None = None,
        limiter: RateLimiter | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._token = token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._limiter = limiter or shared_limiter(rate_limit_delay)
        self._delay = self._limiter.delay
        self._request_count = 0
        logger.debug("{}: rate_limit_delay={}s", self.__class__.__name__, self._delay)

    async def __aenter__(self):
        headers = {"Authorization": f"Bearer {self._token}"} if self._token else {}
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers=headers,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *_):
        logger.debug("Total catalog requests: {}", self._request_count)
        if self._client:
            await self._client.aclose()

    @property
    def request_count(self) -> int:
        return self._request_count

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=30),
        retry=retry_if_exception(_is_retryable_error),
        reraise=True,
    )
    async def _request(self, path: str, params: dict) -> httpx.Response:
        """Single throttled GET; raises on 5xx so tenacity can retry."""
        await self._limiter.wait()
        try:
            self._request_count += 1
            resp = await self._client.get(f"/{path}", params=params)
        finally:
            self._limiter.mark()
        if resp.status_code >= 500:
            resp.raise_for_status()
        return resp

    async def _get(self, path: str, params: dict) -> str:
        """GET request returning the body text, with one retry on 202."""
        async with self._limiter.lock:
            try:
                resp = await self._request(path, params)
                if resp.status_code == 202:
                    logger.info("Catalog still processing {}, retrying in {}s", path, self._delay)
                    await asyncio.sleep(self._delay)
                    resp = await self._request(path, params)
                    if resp.status_code == 202:
                        raise CatalogPendingError()
            except httpx.HTTPError as e:
                logger.warning("Catalog request {} failed: {}", path, e)
                raise CatalogUnavailableError(f"Catalog request failed: {e}") from e

        if resp.status_code == 404:
            raise CatalogNotFoundError()
        if resp.status_code == 429:
            raise CatalogUnavailableError("Catalog rate limit exceeded")
        if resp.status_code >= 400:
            raise CatalogError(f"Catalog returned HTTP {resp.status_code}")
        return resp.text
