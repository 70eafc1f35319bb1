from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from sol_tracker.core.constants import DEFAULT_TOKEN_DECIMALS, NATIVE_DECIMALS, SOL_MINT
from sol_tracker.utils.numeric import ZERO, pct_change, to_decimal


class TradeDirection(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class PositionStatus(str, Enum):
    HOLDING = "HOLDING"
    CLOSED = "CLOSED"


@dataclass(frozen=True)
class NativeLeg:
    """Native SOL moved in a swap, in lamports"""
    lamports: Decimal
    mint = SOL_MINT
    decimals = NATIVE_DECIMALS

    @property
    def amount(self) -> Decimal:
        return self.lamports / (Decimal(10) ** self.decimals)


@dataclass(frozen=True)
class TokenLeg:
    """SPL token moved in a swap, as the raw integer amount plus its decimals"""
    mint: str
    raw_amount: Decimal
    decimals: int = DEFAULT_TOKEN_DECIMALS

    @property
    def amount(self) -> Decimal:
        return self.raw_amount / (Decimal(10) ** self.decimals)


SwapLeg = Union[NativeLeg, TokenLeg]


def _decode_token_leg(entry: Any) -> Optional[TokenLeg]:
    if not isinstance(entry, dict) or not entry.get("mint"):
        return None
    raw = entry.get("rawTokenAmount") or {}
    if not isinstance(raw, dict):
        raw = {}
    decimals = raw.get("decimals")
    if not isinstance(decimals, int) or isinstance(decimals, bool) or decimals < 0:
        decimals = DEFAULT_TOKEN_DECIMALS
    return TokenLeg(
        mint=str(entry["mint"]),
        raw_amount=to_decimal(raw.get("tokenAmount")),
        decimals=decimals,
    )


def _decode_native_leg(entry: Any) -> Optional[NativeLeg]:
    if not isinstance(entry, dict):
        return None
    return NativeLeg(lamports=to_decimal(entry.get("amount")))


@dataclass(frozen=True)
class RawSwapEvent:
    signature: str
    timestamp: int
    input_leg: Optional[SwapLeg] = None
    output_leg: Optional[SwapLeg] = None

    @classmethod
    def from_helius(cls, tx: Any) -> Optional["RawSwapEvent"]:
        """Decode a Helius enhanced transaction. Returns None when it carries no swap event."""
        if not isinstance(tx, dict):
            return None
        events = tx.get("events")
        swap = events.get("swap") if isinstance(events, dict) else None
        if not isinstance(swap, dict) or not swap:
            return None

        input_leg = _decode_native_leg(swap.get("nativeInput")) if swap.get("nativeInput") else None
        output_leg = _decode_native_leg(swap.get("nativeOutput")) if swap.get("nativeOutput") else None

        # A token leg on the same side takes precedence over the native one
        token_inputs = swap.get("tokenInputs")
        if isinstance(token_inputs, list) and token_inputs:
            input_leg = _decode_token_leg(token_inputs[0])
        token_outputs = swap.get("tokenOutputs")
        if isinstance(token_outputs, list) and token_outputs:
            output_leg = _decode_token_leg(token_outputs[0])

        timestamp = tx.get("timestamp")
        return cls(
            signature=str(tx.get("signature") or ""),
            timestamp=int(timestamp) if isinstance(timestamp, (int, float)) else 0,
            input_leg=input_leg,
            output_leg=output_leg,
        )


@dataclass(frozen=True)
class Trade:
    signature: str
    timestamp: int
    direction: TradeDirection
    token_mint: str
    token_amount: Decimal
    stable_amount: Decimal
    price_per_token: Decimal
    stable_mint: str

    @property
    def is_buy(self) -> bool:
        return self.direction == TradeDirection.BUY


@dataclass(frozen=True)
class PriceInfo:
    """Current market data for a token as returned by a price source"""
    price: Decimal
    symbol: Optional[str] = None
    name: Optional[str] = None
    market_cap: Optional[Decimal] = None
    price_change_24h: Optional[Decimal] = None
    pair_address: Optional[str] = None


@dataclass
class Position:
    """All buys and sells for one token mint"""
    mint: str
    buys: List[Trade] = field(default_factory=list)
    sells: List[Trade] = field(default_factory=list)
    symbol: Optional[str] = None
    name: Optional[str] = None
    current_price: Optional[Decimal] = None
    pair_address: Optional[str] = None
    market_cap: Optional[Decimal] = None
    price_change_24h: Optional[Decimal] = None

    def add_trade(self, trade: Trade) -> None:
        if trade.is_buy:
            self.buys.append(trade)
        else:
            self.sells.append(trade)

    def apply_price_info(self, info: Optional[PriceInfo]) -> None:
        if info is None:
            return
        self.symbol = info.symbol
        self.name = info.name
        self.current_price = info.price
        self.market_cap = info.market_cap
        self.price_change_24h = info.price_change_24h
        self.pair_address = info.pair_address

    def recent_trades(self, limit: int = 5) -> List[Trade]:
        """Buys and sells merged, newest first"""
        merged = sorted(self.buys + self.sells, key=lambda t: t.timestamp, reverse=True)
        return merged[:limit]

    @property
    def trade_count(self) -> int:
        return len(self.buys) + len(self.sells)


@dataclass(frozen=True)
class OHLCVCandle:
    timestamp: int
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal = ZERO

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "OHLCVCandle":
        """Build from a provider list row: [timestamp, open, high, low, close, volume?]"""
        if len(row) < 5:
            raise ValueError(f"OHLCV row needs at least 5 values, got {len(row)}")
        values = [to_decimal(v, default=None) for v in row[1:5]]
        if any(v is None for v in values):
            raise ValueError(f"Non-numeric OHLCV row: {row}")
        open_, high, low, close = values
        volume = to_decimal(row[5]) if len(row) > 5 else ZERO
        return cls(timestamp=int(row[0]), open=open_, high=high, low=low, close=close, volume=volume)


@dataclass(frozen=True)
class PositionAnalysis:
    # Hash covers the derived values only; Position is a mutable accumulator
    position: Position = field(hash=False)
    total_buy_amount: Decimal
    total_buy_tokens: Decimal
    avg_buy_price: Decimal
    total_sell_amount: Decimal
    total_sell_tokens: Decimal
    avg_sell_price: Decimal
    realized_pnl: Decimal
    realized_pnl_percent: Decimal
    tokens_held: Decimal
    unrealized_value: Decimal
    unrealized_pnl: Decimal
    unrealized_pnl_percent: Decimal
    max_price_after_buy: Decimal
    min_price_after_buy: Decimal
    max_price_after_sell: Decimal
    max_gain_possible: Decimal
    max_drawdown: Decimal
    missed_gains: Decimal
    missed_gains_percent: Decimal
    is_roundtrip: bool
    status: PositionStatus

    @property
    def mint(self) -> str:
        return self.position.mint

    @property
    def symbol(self) -> Optional[str]:
        return self.position.symbol

    @property
    def combined_pnl(self) -> Decimal:
        return self.realized_pnl + self.unrealized_pnl

    def as_dict(self) -> Dict[str, Any]:
        """Flat row for tabular export"""
        return {
            "mint": self.position.mint,
            "symbol": self.position.symbol,
            "name": self.position.name,
            "current_price": float(self.position.current_price) if self.position.current_price is not None else None,
            "buy_count": len(self.position.buys),
            "sell_count": len(self.position.sells),
            "total_buy_amount": float(self.total_buy_amount),
            "total_buy_tokens": float(self.total_buy_tokens),
            "avg_buy_price": float(self.avg_buy_price),
            "total_sell_amount": float(self.total_sell_amount),
            "total_sell_tokens": float(self.total_sell_tokens),
            "avg_sell_price": float(self.avg_sell_price),
            "realized_pnl": float(self.realized_pnl),
            "realized_pnl_percent": float(self.realized_pnl_percent),
            "tokens_held": float(self.tokens_held),
            "unrealized_value": float(self.unrealized_value),
            "unrealized_pnl": float(self.unrealized_pnl),
            "unrealized_pnl_percent": float(self.unrealized_pnl_percent),
            "max_price_after_buy": float(self.max_price_after_buy),
            "min_price_after_buy": float(self.min_price_after_buy),
            "max_price_after_sell": float(self.max_price_after_sell),
            "max_gain_possible": float(self.max_gain_possible),
            "max_drawdown": float(self.max_drawdown),
            "missed_gains": float(self.missed_gains),
            "missed_gains_percent": float(self.missed_gains_percent),
            "is_roundtrip": self.is_roundtrip,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class TradeAnalysis:
    min_price: Decimal
    max_price: Decimal
    pnl_percent: Optional[Decimal]
    max_gain_percent: Decimal
    max_drawdown_percent: Decimal
    captured_percent: Optional[Decimal]
    candle_count: int


def _to_unix(value: Any) -> Optional[int]:
    """Unix seconds from an int, a datetime or an ISO string. Naive values are read as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp())
    raise ValueError(f"Unsupported timestamp: {value!r}")


@dataclass(frozen=True)
class ManualTrade:
    """A single buy, with an optional sell, logged by hand"""
    id: str
    token_address: str
    pool_address: str
    buy_price: Decimal
    buy_amount: Decimal
    buy_timestamp: int
    sell_price: Optional[Decimal] = None
    sell_timestamp: Optional[int] = None
    token_symbol: Optional[str] = None
    token_name: Optional[str] = None
    buy_market_cap: Optional[Decimal] = None
    notes: str = ""
    created_at: Optional[int] = None
    analysis: Optional[TradeAnalysis] = None

    @property
    def status(self) -> str:
        return "closed" if self.sell_price is not None else "open"

    @property
    def is_open(self) -> bool:
        return self.sell_price is None

    def live_pnl_percent(self, current_price: Optional[Decimal] = None) -> Optional[Decimal]:
        """Realized % when sold, otherwise mark-to-market against current_price"""
        if self.sell_price is not None:
            return pct_change(self.sell_price, self.buy_price)
        if current_price:
            return pct_change(current_price, self.buy_price)
        return None

    def with_analysis(self, analysis: Optional[TradeAnalysis]) -> "ManualTrade":
        return replace(self, analysis=analysis)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ManualTrade":
        """Build from a stored trade record (camelCase keys, ISO timestamps)"""
        sell_price = to_decimal(data.get("sellPrice"), default=None)
        return cls(
            id=str(data["id"]),
            token_address=str(data["tokenAddress"]),
            pool_address=str(data.get("poolAddress") or ""),
            buy_price=to_decimal(data.get("buyPrice")),
            buy_amount=to_decimal(data.get("buyAmount")),
            buy_timestamp=_to_unix(data["buyTimestamp"]),
            sell_price=sell_price,
            sell_timestamp=_to_unix(data.get("sellTimestamp")),
            token_symbol=data.get("tokenSymbol"),
            token_name=data.get("tokenName"),
            buy_market_cap=to_decimal(data.get("buyMarketCap"), default=None),
            notes=data.get("notes") or "",
            created_at=_to_unix(data.get("createdAt")),
        )
