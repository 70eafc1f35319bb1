import logging
import time
from decimal import Decimal
from typing import List, Optional, Sequence

from sol_tracker.core.constants import DUST_THRESHOLD, ROUNDTRIP_MULTIPLIER
from sol_tracker.core.types import (
    ManualTrade,
    OHLCVCandle,
    Position,
    PositionAnalysis,
    PositionStatus,
    Trade,
    TradeAnalysis,
)
from sol_tracker.utils.numeric import HUNDRED, ZERO, pct_change, safe_div


def _sum(values) -> Decimal:
    return sum(values, ZERO)


class PriceReconciler:
    """
    Joins a position's trade timeline with an hourly OHLCV series.

    Every call is a pure function of its arguments: the reconciler keeps no
    state between positions, so callers may reconcile positions in any order.
    """

    def __init__(self,
                 roundtrip_multiplier: Decimal = ROUNDTRIP_MULTIPLIER,
                 dust_threshold: Decimal = DUST_THRESHOLD,
                 logger: Optional[logging.Logger] = None):
        self.roundtrip_multiplier = Decimal(str(roundtrip_multiplier))
        self.dust_threshold = Decimal(str(dust_threshold))
        self.logger = logger or logging.getLogger(__name__)

    # Position path

    def reconcile(self, position: Position, candles: Sequence[OHLCVCandle]) -> PositionAnalysis:
        """Cost basis, P&L, excursions and missed gains for one position"""
        total_buy_amount = _sum(b.stable_amount for b in position.buys)
        total_buy_tokens = _sum(b.token_amount for b in position.buys)
        avg_buy_price = safe_div(total_buy_amount, total_buy_tokens)

        total_sell_amount = _sum(s.stable_amount for s in position.sells)
        total_sell_tokens = _sum(s.token_amount for s in position.sells)
        avg_sell_price = safe_div(total_sell_amount, total_sell_tokens)

        realized_pnl = total_sell_amount - total_sell_tokens * avg_buy_price
        realized_pnl_percent = pct_change(avg_sell_price, avg_buy_price) if total_sell_tokens > 0 else ZERO

        current_price = position.current_price or ZERO
        tokens_held = total_buy_tokens - total_sell_tokens
        unrealized_value = tokens_held * current_price
        cost_basis = tokens_held * avg_buy_price
        unrealized_pnl = unrealized_value - cost_basis
        unrealized_pnl_percent = safe_div(unrealized_pnl, cost_basis) * HUNDRED if cost_basis > 0 else ZERO

        max_after_buy, min_after_buy, max_after_sell = self._scan_excursions(
            position.buys, position.sells, current_price, candles
        )

        max_gain_possible = pct_change(max_after_buy, avg_buy_price)
        # No low observed after entry: report neither a floor nor a drawdown
        max_drawdown = pct_change(min_after_buy, avg_buy_price) if min_after_buy is not None else ZERO

        missed_gains = ZERO
        missed_gains_percent = ZERO
        if position.sells and avg_sell_price > 0:
            missed_gains = (max_after_sell - avg_sell_price) * total_sell_tokens
            missed_gains_percent = pct_change(max_after_sell, avg_sell_price)

        is_roundtrip = (
            tokens_held > 0
            and max_after_buy > avg_buy_price * self.roundtrip_multiplier
            and current_price < avg_buy_price
        )
        status = PositionStatus.HOLDING if tokens_held > self.dust_threshold else PositionStatus.CLOSED

        self.logger.debug(
            f"Reconciled {position.mint}: {len(position.buys)} buys, {len(position.sells)} sells, "
            f"{len(candles)} candles, status {status.value}"
        )

        return PositionAnalysis(
            position=position,
            total_buy_amount=total_buy_amount,
            total_buy_tokens=total_buy_tokens,
            avg_buy_price=avg_buy_price,
            total_sell_amount=total_sell_amount,
            total_sell_tokens=total_sell_tokens,
            avg_sell_price=avg_sell_price,
            realized_pnl=realized_pnl,
            realized_pnl_percent=realized_pnl_percent,
            tokens_held=tokens_held,
            unrealized_value=unrealized_value,
            unrealized_pnl=unrealized_pnl,
            unrealized_pnl_percent=unrealized_pnl_percent,
            max_price_after_buy=max_after_buy,
            min_price_after_buy=min_after_buy if min_after_buy is not None else ZERO,
            max_price_after_sell=max_after_sell,
            max_gain_possible=max_gain_possible,
            max_drawdown=max_drawdown,
            missed_gains=missed_gains,
            missed_gains_percent=missed_gains_percent,
            is_roundtrip=is_roundtrip,
            status=status,
        )

    def _scan_excursions(self,
                         buys: List[Trade],
                         sells: List[Trade],
                         current_price: Decimal,
                         candles: Sequence[OHLCVCandle]):
        """
        Returns (max_after_buy, min_after_buy, max_after_sell).

        Scans are seeded with the current price. min_after_buy is None when
        there is no current price and no candle after the first buy.
        """
        max_after_buy = current_price
        min_after_buy: Optional[Decimal] = current_price if current_price > 0 else None
        max_after_sell = current_price

        if not candles:
            return max_after_buy, min_after_buy, max_after_sell

        first_buy_time = min(b.timestamp for b in buys) if buys else 0
        last_sell_time = max(s.timestamp for s in sells) if sells else 0

        for candle in candles:
            if candle.timestamp > first_buy_time:
                if candle.high > max_after_buy:
                    max_after_buy = candle.high
                if min_after_buy is None or candle.low < min_after_buy:
                    min_after_buy = candle.low
            if sells and candle.timestamp > last_sell_time:
                if candle.high > max_after_sell:
                    max_after_sell = candle.high

        return max_after_buy, min_after_buy, max_after_sell

    # Manual trade path

    def reconcile_manual(self,
                         trade: ManualTrade,
                         candles: Sequence[OHLCVCandle],
                         now: Optional[int] = None) -> Optional[TradeAnalysis]:
        """
        Price range over [buy time, sell time or now] for a hand-logged trade.

        Returns None when no candle falls inside the window or the buy price
        is not positive; that means "not yet analyzable", not an error.
        """
        if trade.buy_price <= 0:
            self.logger.warning(f"Manual trade {trade.id} has no usable buy price")
            return None

        window_end = trade.sell_timestamp if trade.sell_timestamp is not None else (
            now if now is not None else int(time.time())
        )
        window = [c for c in candles if trade.buy_timestamp <= c.timestamp <= window_end]
        if not window:
            self.logger.info(
                f"No candles for manual trade {trade.id} between {trade.buy_timestamp} and {window_end}"
            )
            return None

        min_price = min(c.low for c in window)
        max_price = max(c.high for c in window)

        pnl_percent = pct_change(trade.sell_price, trade.buy_price) if trade.sell_price is not None else None
        max_gain_percent = pct_change(max_price, trade.buy_price)
        max_drawdown_percent = pct_change(min_price, trade.buy_price)
        captured_percent = None
        if pnl_percent is not None and max_gain_percent > 0:
            captured_percent = pnl_percent / max_gain_percent * HUNDRED

        return TradeAnalysis(
            min_price=min_price,
            max_price=max_price,
            pnl_percent=pnl_percent,
            max_gain_percent=max_gain_percent,
            max_drawdown_percent=max_drawdown_percent,
            captured_percent=captured_percent,
            candle_count=len(window),
        )
