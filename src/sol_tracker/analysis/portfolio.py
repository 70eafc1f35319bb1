from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, Iterable, List

import pandas as pd

from sol_tracker.core.types import ManualTrade, PositionAnalysis
from sol_tracker.utils.numeric import ZERO


@dataclass(frozen=True)
class PortfolioSummary:
    count: int = 0
    total_invested: Decimal = ZERO
    total_realized: Decimal = ZERO
    total_unrealized: Decimal = ZERO
    total_missed: Decimal = ZERO
    roundtrip_count: int = 0

    @property
    def total_pnl(self) -> Decimal:
        return self.total_realized + self.total_unrealized


@dataclass(frozen=True)
class ManualTradeSummary:
    count: int = 0
    open_count: int = 0
    total_invested: Decimal = ZERO


SORT_KEYS: Dict[str, Callable[[PositionAnalysis], Decimal]] = {
    'pnl': lambda a: a.combined_pnl,
    'missed': lambda a: a.missed_gains_percent,
    'invested': lambda a: a.total_buy_amount,
}


class PortfolioSummarizer:
    """Wallet-level totals over reconciled positions"""

    def summarize(self, analyses: Iterable[PositionAnalysis]) -> PortfolioSummary:
        analyses = list(analyses)
        if not analyses:
            return PortfolioSummary()

        return PortfolioSummary(
            count=len(analyses),
            total_invested=sum((a.total_buy_amount for a in analyses), ZERO),
            total_realized=sum((a.realized_pnl for a in analyses), ZERO),
            total_unrealized=sum((a.unrealized_pnl for a in analyses), ZERO),
            # Positions sold above the later high do not offset missed gains elsewhere
            total_missed=sum((max(ZERO, a.missed_gains) for a in analyses), ZERO),
            roundtrip_count=sum(1 for a in analyses if a.is_roundtrip),
        )

    def sort(self, analyses: Iterable[PositionAnalysis], key: str = 'pnl') -> List[PositionAnalysis]:
        """Sort descending by 'pnl' (realized + unrealized), 'missed' (missed gain %) or 'invested'"""
        if key not in SORT_KEYS:
            raise ValueError(f"Unknown sort key '{key}', expected one of {sorted(SORT_KEYS)}")
        return sorted(analyses, key=SORT_KEYS[key], reverse=True)

    def summarize_manual(self, trades: Iterable[ManualTrade]) -> ManualTradeSummary:
        trades = list(trades)
        return ManualTradeSummary(
            count=len(trades),
            open_count=sum(1 for t in trades if t.is_open),
            total_invested=sum((t.buy_amount or ZERO for t in trades), ZERO),
        )

    def to_dataframe(self, analyses: Iterable[PositionAnalysis]) -> pd.DataFrame:
        rows = [a.as_dict() for a in analyses]
        df = pd.DataFrame(rows)
        if not df.empty:
            df['combined_pnl'] = df['realized_pnl'] + df['unrealized_pnl']
        return df
