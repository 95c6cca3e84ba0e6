"""CoinGecko REST client implementation via httpx async.

Issues unauthenticated GETs against a fixed base URL, applies a per-request
timeout plus an overall deadline, and classifies every outcome into the
HttpError taxonomy. No retries: the poller's timer is the retry policy.
"""

import asyncio
from collections.abc import Mapping

import httpx
from pydantic import ValidationError

from coinpoll.api.client import JsonFetcher, ModelT
from coinpoll.config import CoinGeckoSettings
from coinpoll.exceptions import (
    DecodeFailure,
    EmptyBody,
    HttpStatusError,
    InvalidRequest,
    RateLimited,
    TransportFailure,
)
from coinpoll.logging import get_logger

logger = get_logger(__name__)


class CoinGeckoClient(JsonFetcher):
    """Concrete JSON fetcher for the CoinGecko public API.

    Args:
        settings: Base URL, timeouts and user agent.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        settings: CoinGeckoSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=httpx.Timeout(settings.request_timeout),
            headers={"Accept": "application/json", "User-Agent": settings.user_agent},
            transport=transport,
        )

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()
        logger.debug("coingecko_client_closed")

    async def fetch_json(
        self,
        path: str,
        query: Mapping[str, str],
        model: type[ModelT],
    ) -> ModelT:
        try:
            request = self._client.build_request("GET", path, params=dict(query))
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            logger.error("coingecko_invalid_request", path=path, error=str(e))
            raise InvalidRequest(str(e)) from e

        try:
            response = await asyncio.wait_for(
                self._client.send(request),
                timeout=self._settings.resource_timeout,
            )
        except asyncio.TimeoutError as e:
            logger.warning(
                "coingecko_resource_timeout",
                path=path,
                timeout=self._settings.resource_timeout,
            )
            raise TransportFailure(
                f"request exceeded {self._settings.resource_timeout}s"
            ) from e
        except httpx.UnsupportedProtocol as e:
            raise InvalidRequest(str(e)) from e
        except httpx.TransportError as e:
            logger.warning(
                "coingecko_transport_error",
                path=path,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise TransportFailure(str(e) or type(e).__name__) from e

        return self._decode(path, response, model)

    def _decode(self, path: str, response: httpx.Response, model: type[ModelT]) -> ModelT:
        """Classify status, then validate the body against ``model``."""
        status = response.status_code
        if status == 429:
            logger.warning(
                "coingecko_rate_limited",
                path=path,
                retry_after=response.headers.get("Retry-After"),
            )
            raise RateLimited()
        if not 200 <= status <= 299:
            logger.warning("coingecko_http_status", path=path, status=status)
            raise HttpStatusError(status)

        if not response.content.strip():
            logger.warning("coingecko_empty_body", path=path)
            raise EmptyBody(f"empty body from {path}")

        try:
            return model.model_validate_json(response.content)
        except ValidationError as e:
            logger.warning(
                "coingecko_decode_failure",
                path=path,
                model=model.__name__,
                errors=e.error_count(),
            )
            raise DecodeFailure(str(e)) from e
