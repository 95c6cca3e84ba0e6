"""Entry point for the coinpoll watcher.

Wires the CoinGecko client and the asset poller together, logs a summary
line for every published snapshot, and runs until SIGINT/SIGTERM.

Component wiring order:
1. AppSettings (configuration)
2. Logging setup
3. CoinGeckoClient (HTTP client)
4. AssetPoller (cadence policy + rate governor + timer)
"""

import asyncio
import signal
from functools import partial

from coinpoll.api.client import JsonFetcher
from coinpoll.api.coingecko_client import CoinGeckoClient
from coinpoll.config import AppSettings
from coinpoll.logging import asset_context, get_logger, setup_logging
from coinpoll.market_data.display import summary_line
from coinpoll.market_data.poller import AssetPoller
from coinpoll.models import PollSnapshot


def _log_snapshot(snapshot: PollSnapshot, currency: str = "usd") -> None:
    logger = get_logger("coinpoll.watch")
    if snapshot.busy:
        return
    logger.info("snapshot", summary=summary_line(snapshot, currency))


def build_poller(fetcher: JsonFetcher, settings: AppSettings) -> AssetPoller:
    """Create the poller and attach the logging consumer in the quote currency."""
    poller = AssetPoller.from_settings(fetcher, settings)
    poller.subscribe(partial(_log_snapshot, currency=settings.coingecko.vs_currency))
    return poller


def _setup_signal_handlers(stop_event: asyncio.Event) -> None:
    """Register SIGINT/SIGTERM to request a graceful stop."""
    loop = asyncio.get_running_loop()
    logger = get_logger("coinpoll.main")

    def _graceful_handler() -> None:
        logger.info("shutdown_signal_received")
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _graceful_handler)


async def run(settings: AppSettings | None = None) -> None:
    """Poll the configured asset until a shutdown signal arrives."""
    # 1. Load settings
    settings = settings or AppSettings()

    # 2. Setup logging
    setup_logging(settings.log_level)
    logger = get_logger("coinpoll.main")

    # 3-4. Build components
    client = CoinGeckoClient(settings.coingecko)
    poller = build_poller(client, settings)

    stop_event = asyncio.Event()
    _setup_signal_handlers(stop_event)

    logger.info(
        "coinpoll_starting",
        base_url=settings.coingecko.base_url,
        vs_currency=settings.coingecko.vs_currency,
        time_range=settings.watch.time_range.label,
        min_spacing=settings.poller.min_spacing_seconds,
    )
    with asset_context(settings.watch.asset_id):
        try:
            await poller.start(settings.watch.asset_id, settings.watch.time_range)
            await stop_event.wait()
        finally:
            await poller.stop()
            await client.close()
            logger.info("coinpoll_stopped")


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
