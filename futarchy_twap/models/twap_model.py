# futarchy_twap/models/twap_model.py
"""
TWAP engine.

Reads the pool's cumulative-tick oracle at ``[window, 0]`` seconds ago and
turns the tick delta into a price with ``price = 1.0001 ** tick``. Works for
Algebra pools (``getTimepoints``) and Uniswap V3 pools (``observe``).
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum

from futarchy_twap.config import DEFAULT_TWAP_DAYS, SECONDS_PER_DAY
from futarchy_twap.config.abis import ALGEBRA_POOL_ABI, UNISWAP_V3_POOL_ABI
from futarchy_twap.config.chains import ALGEBRA
from futarchy_twap.exceptions import InvalidPriceError
from futarchy_twap.utils.decoding import decode_current_tick, decode_tick_cumulatives
from futarchy_twap.utils.time_utils import to_iso

logger = logging.getLogger(__name__)

TICK_BASE = 1.0001
# |spread| at or below this is a tie
WINNER_EPSILON = 1e-8


class TwapStatus(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    ACTIVE = "ACTIVE"
    ENDED = "ENDED"


@dataclass(frozen=True, slots=True)
class TwapWindow:
    start: int
    end: int
    days: float
    duration: int

    @classmethod
    def ending_at(cls, end_timestamp: int, days=DEFAULT_TWAP_DAYS) -> "TwapWindow":
        duration = int(days * SECONDS_PER_DAY)
        return cls(start=end_timestamp - duration, end=end_timestamp, days=days, duration=duration)

    def status_at(self, now: int) -> TwapStatus:
        """Window is ``[start, end)``: ENDED includes ``now == end``."""
        if now < self.start:
            return TwapStatus.NOT_STARTED
        if now >= self.end:
            return TwapStatus.ENDED
        return TwapStatus.ACTIVE

    def lookback_seconds(self, now: int) -> int:
        """Seconds of oracle history to average over at ``now``."""
        status = self.status_at(now)
        if status is TwapStatus.NOT_STARTED:
            return 0
        if status is TwapStatus.ENDED:
            return self.duration
        return min(now - self.start, self.duration)

    def as_dict(self) -> dict:
        return {
            "startTimestamp": self.start,
            "startDate": to_iso(self.start),
            "endTimestamp": self.end,
            "endDate": to_iso(self.end),
            "days": self.days,
            "durationSeconds": self.duration,
        }


@dataclass(frozen=True, slots=True)
class PoolTwap:
    raw_price: float
    normalized_price: float
    average_tick: float
    seconds_window: int
    inverted: bool

    def as_dict(self) -> dict:
        return {
            "price": self.normalized_price,
            "rawPrice": self.raw_price,
            "averageTick": self.average_tick,
            "inverted": self.inverted,
        }


@dataclass(frozen=True, slots=True)
class PriceComparison:
    spread: float
    percent_diff: float
    winner: str


# --- Pure math ---

def seconds_window(seconds_ago) -> int:
    """Whole seconds, never below one."""
    return max(1, math.floor(seconds_ago))


def average_tick(oldest_cumulative: int, latest_cumulative: int, window: int) -> float:
    # int subtraction is exact for any int56 accumulator; only the quotient is a float
    return (latest_cumulative - oldest_cumulative) / window


def tick_to_price(tick) -> float:
    try:
        price = TICK_BASE ** tick
    except OverflowError:
        raise InvalidPriceError(average_tick=tick)
    if not math.isfinite(price) or price <= 0:
        raise InvalidPriceError(average_tick=tick)
    return price


def normalize_price(raw_price: float, should_invert: bool) -> float:
    return 1 / raw_price if should_invert else raw_price


def winner_from_spread(spread: float) -> str:
    if spread > WINNER_EPSILON:
        return "YES"
    if spread < -WINNER_EPSILON:
        return "NO"
    return "TIE"


def compare_prices(yes_price: float, no_price: float) -> PriceComparison:
    """Spread, winner and percent difference relative to the lower price."""
    spread = yes_price - no_price
    lower = min(yes_price, no_price)
    percent_diff = abs(spread) / lower * 100 if lower > 0 else 0.0
    return PriceComparison(spread=spread, percent_diff=percent_diff, winner=winner_from_spread(spread))


class TwapModel:
    """Oracle reads for a single pool."""

    def __init__(self, ctx):
        self.ctx = ctx
        self.mode = ctx.mode

    def _pool(self, pool_address: str):
        abi = ALGEBRA_POOL_ABI if self.mode == ALGEBRA else UNISWAP_V3_POOL_ABI
        return self.ctx.contract(pool_address, abi)

    def read_tick_cumulatives(self, pool_address: str, window: int):
        pool = self._pool(pool_address)
        if self.mode == ALGEBRA:
            raw = pool.functions.getTimepoints([window, 0]).call()
        else:
            raw = pool.functions.observe([window, 0]).call()
        return decode_tick_cumulatives(raw, self.mode)

    def calculate_pool_twap(self, pool_address: str, seconds_ago, should_invert: bool) -> PoolTwap:
        """
        Time-weighted average price of a pool over the last ``seconds_ago`` seconds.

        Args:
            pool_address: Pool contract address.
            seconds_ago: Lookback length; floored to whole seconds, minimum 1.
            should_invert: Whether to flip the raw price (see PoolModel.detect_inversion).

        Returns:
            PoolTwap with raw and orientation-normalized prices.

        Raises:
            InvalidPriceError: the average tick does not map to a finite positive price.
        """
        window = seconds_window(seconds_ago)
        oldest, latest = self.read_tick_cumulatives(pool_address, window)

        avg_tick = average_tick(oldest, latest, window)
        raw_price = tick_to_price(avg_tick)

        logger.debug("   > %s: avgTick=%s over %ss -> raw %s", pool_address, avg_tick, window, raw_price)
        return PoolTwap(
            raw_price=raw_price,
            normalized_price=normalize_price(raw_price, should_invert),
            average_tick=avg_tick,
            seconds_window=window,
            inverted=should_invert,
        )

    def get_spot_price(self, pool_address: str, should_invert: bool) -> float:
        """Instantaneous price from the pool's current tick. Display only."""
        pool = self._pool(pool_address)
        if self.mode == ALGEBRA:
            raw = pool.functions.globalState().call()
        else:
            raw = pool.functions.slot0().call()
        tick = decode_current_tick(raw, self.mode)
        return normalize_price(tick_to_price(tick), should_invert)
