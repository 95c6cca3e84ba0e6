"""Abstract JSON fetcher interface.

The poller depends only on this interface, keeping httpx and the
upstream's URL layout isolated in the concrete implementation and letting
tests substitute a scripted fake.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TypeVar

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


class JsonFetcher(ABC):
    """Abstract base class for read-only JSON API clients."""

    @abstractmethod
    async def fetch_json(
        self,
        path: str,
        query: Mapping[str, str],
        model: type[ModelT],
    ) -> ModelT:
        """GET ``path`` with ``query`` and decode the body into ``model``.

        Raises:
            InvalidRequest: The URL could not be built.
            TransportFailure: Network, DNS or timeout failure.
            RateLimited: HTTP 429.
            HttpStatusError: Any other non-2xx status.
            EmptyBody: 2xx response without a payload.
            DecodeFailure: Payload does not validate against ``model``.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release connection resources."""
        ...
