import logging
from typing import Any, Iterable, List, Optional

from sol_tracker.core.types import OHLCVCandle, PriceInfo, RawSwapEvent

logger = logging.getLogger(__name__)


class SwapSource:
    """Provider of a wallet's swap transactions (Helius enhanced transaction shape)"""

    def fetch_swaps(self, wallet: str, limit: int) -> List[dict]:
        raise NotImplementedError


class PriceSource:
    """Provider of current token market data"""

    def current_price(self, mint: str) -> Optional[PriceInfo]:
        raise NotImplementedError


class CandleSource:
    """Provider of hourly OHLCV candles for a trading pair, oldest first"""

    def ohlcv(self, pair_address: str, limit: int) -> List[OHLCVCandle]:
        raise NotImplementedError


def decode_swap_events(payload: Iterable[Any]) -> List[RawSwapEvent]:
    """Decode provider transactions, dropping those without a swap event"""
    events = []
    skipped = 0
    for tx in payload or []:
        event = RawSwapEvent.from_helius(tx)
        if event is None:
            skipped += 1
            continue
        events.append(event)
    if skipped:
        logger.debug(f"Dropped {skipped} transactions without a swap event")
    return events


def decode_candles(rows: Iterable[Any]) -> List[OHLCVCandle]:
    """Decode [ts, o, h, l, c, v] rows into candles sorted by timestamp"""
    candles = []
    for row in rows or []:
        try:
            candles.append(OHLCVCandle.from_row(row))
        except (TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed OHLCV row {row!r}: {str(e)}")
    candles.sort(key=lambda c: c.timestamp)
    return candles
