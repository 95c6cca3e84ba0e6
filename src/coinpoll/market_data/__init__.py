"""Market data layer -- polling, rate governing, and cadence selection."""

from coinpoll.market_data.cadence import CadencePolicy
from coinpoll.market_data.poller import AssetPoller, PollState
from coinpoll.market_data.rate_governor import RateGovernor

__all__ = ["AssetPoller", "CadencePolicy", "PollState", "RateGovernor"]
