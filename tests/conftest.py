from decimal import Decimal

import pytest

from sol_tracker.core.constants import SOL_MINT
from sol_tracker.core.types import OHLCVCandle, Position, Trade, TradeDirection

TOKEN_MINT = "7GCihgDB8fe6KNjn2MYtkzZcRjQy3t9GHdC8uHYmW2hr"
OTHER_MINT = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"
WALLET = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"


def make_trade(direction, stable_amount, token_amount, timestamp=1_700_000_000,
               mint=TOKEN_MINT, signature=None):
    stable_amount = Decimal(str(stable_amount))
    token_amount = Decimal(str(token_amount))
    return Trade(
        signature=signature or f"sig-{direction}-{timestamp}",
        timestamp=timestamp,
        direction=TradeDirection(direction),
        token_mint=mint,
        token_amount=token_amount,
        stable_amount=stable_amount,
        price_per_token=stable_amount / token_amount if token_amount else Decimal(0),
        stable_mint=SOL_MINT,
    )


def make_candle(timestamp, high, low=None, open_=None, close=None):
    high = Decimal(str(high))
    low = Decimal(str(low)) if low is not None else high
    return OHLCVCandle(
        timestamp=timestamp,
        open=Decimal(str(open_)) if open_ is not None else low,
        high=high,
        low=low,
        close=Decimal(str(close)) if close is not None else low,
    )


@pytest.fixture
def closed_position():
    position = Position(mint=TOKEN_MINT)
    position.add_trade(make_trade("BUY", 100, 1000, timestamp=1_700_000_000))
    position.add_trade(make_trade("SELL", 150, 1000, timestamp=1_700_010_000))
    return position


@pytest.fixture
def holding_position():
    position = Position(mint=TOKEN_MINT, current_price=Decimal("0.2"), pair_address="pair1")
    position.add_trade(make_trade("BUY", 100, 1000, timestamp=1_700_000_000))
    return position
