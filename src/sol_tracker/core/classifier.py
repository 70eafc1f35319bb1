import logging
from typing import Iterable, List, Optional

from sol_tracker.core.constants import SOL_MINT, STABLECOIN_MINTS
from sol_tracker.core.types import RawSwapEvent, SwapLeg, Trade, TradeDirection
from sol_tracker.utils.numeric import safe_div


class SwapClassifier:
    """Turns raw swap events into directional trades against a stable asset"""

    def __init__(self, stable_mints: Optional[Iterable[str]] = None, logger: Optional[logging.Logger] = None):
        self.stable_mints = frozenset(stable_mints) if stable_mints is not None else STABLECOIN_MINTS
        self.logger = logger or logging.getLogger(__name__)

    def is_stable(self, leg: SwapLeg) -> bool:
        return leg.mint == SOL_MINT or leg.mint in self.stable_mints

    def classify(self, event: RawSwapEvent, wallet: str) -> Optional[Trade]:
        """Returns a BUY or SELL trade, or None when the swap is not stable <-> token"""
        if event is None or event.input_leg is None or event.output_leg is None:
            return None

        token_in, token_out = event.input_leg, event.output_leg
        stable_in = self.is_stable(token_in)
        stable_out = self.is_stable(token_out)

        if stable_in and not stable_out:
            direction, token, stable = TradeDirection.BUY, token_out, token_in
        elif not stable_in and stable_out:
            direction, token, stable = TradeDirection.SELL, token_in, token_out
        else:
            self.logger.debug(
                f"Skipping swap {event.signature} for {wallet}: "
                f"{token_in.mint} -> {token_out.mint} is not a stable/token pair"
            )
            return None

        token_amount = token.amount
        stable_amount = stable.amount
        return Trade(
            signature=event.signature,
            timestamp=event.timestamp,
            direction=direction,
            token_mint=token.mint,
            token_amount=token_amount,
            stable_amount=stable_amount,
            price_per_token=safe_div(stable_amount, token_amount),
            stable_mint=stable.mint,
        )

    def classify_all(self, events: Iterable[RawSwapEvent], wallet: str) -> List[Trade]:
        trades = []
        for event in events:
            trade = self.classify(event, wallet)
            if trade is not None:
                trades.append(trade)
        return trades
