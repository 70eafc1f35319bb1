from collections import defaultdict
from typing import Dict, Iterable

from sol_tracker.core.types import Position, Trade


class PositionAggregator:
    """Partitions trades into per-mint positions, keeping each trade's input order"""

    def __init__(self):
        self._reset_stats()

    def _reset_stats(self):
        # Stats describe the most recent aggregate() call only
        self.trade_stats = {
            'total_trades_received': 0,
            'buys': 0,
            'sells': 0,
            'trades_by_token': defaultdict(int)
        }

    def aggregate(self, trades: Iterable[Trade]) -> Dict[str, Position]:
        self._reset_stats()
        positions: Dict[str, Position] = {}

        for trade in trades:
            self.trade_stats['total_trades_received'] += 1

            # Get or create position
            if trade.token_mint not in positions:
                positions[trade.token_mint] = Position(mint=trade.token_mint)

            positions[trade.token_mint].add_trade(trade)

            self.trade_stats['buys' if trade.is_buy else 'sells'] += 1
            self.trade_stats['trades_by_token'][trade.token_mint] += 1

        return positions

    def get_processing_stats(self) -> dict:
        return {
            'total_received': self.trade_stats['total_trades_received'],
            'buys': self.trade_stats['buys'],
            'sells': self.trade_stats['sells'],
            'tokens': dict(self.trade_stats['trades_by_token']),
            'positions': len(self.trade_stats['trades_by_token'])
        }
