"""API client layer -- CoinGecko REST integration via httpx."""

from coinpoll.api.client import JsonFetcher
from coinpoll.api.coingecko_client import CoinGeckoClient
from coinpoll.api.endpoints import Request, chart_request, detail_request

__all__ = ["CoinGeckoClient", "JsonFetcher", "Request", "chart_request", "detail_request"]
