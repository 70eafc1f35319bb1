from dataclasses import dataclass, field
from typing import Any, List, Optional

from solders.pubkey import Pubkey

from sol_tracker.analysis.portfolio import PortfolioSummarizer, PortfolioSummary
from sol_tracker.core.aggregator import PositionAggregator
from sol_tracker.core.classifier import SwapClassifier
from sol_tracker.core.reconciler import PriceReconciler
from sol_tracker.core.types import ManualTrade, OHLCVCandle, Position, PositionAnalysis
from sol_tracker.data.sources import CandleSource, PriceSource, SwapSource, decode_swap_events
from sol_tracker.utils.config import Config
from sol_tracker.utils.logger import AnalyzerLogger


@dataclass
class WalletReport:
    wallet: str
    analyses: List[PositionAnalysis] = field(default_factory=list)
    summary: PortfolioSummary = field(default_factory=PortfolioSummary)
    swaps_fetched: int = 0
    trades_classified: int = 0


def validate_wallet(wallet: str) -> str:
    """Returns the wallet address if it is a valid Solana public key"""
    try:
        return str(Pubkey.from_string(wallet.strip()))
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Invalid wallet address '{wallet}': {str(e)}") from e


class WalletAnalyzer:
    """
    Runs the full pipeline for a wallet: fetch swaps, classify, group by token,
    price each position and reconcile it with its candle history.

    Positions are processed one after another. Any pacing against the
    price/candle providers belongs inside those sources. A failed price or
    candle fetch only degrades that token; a failed swap fetch aborts.
    """

    def __init__(self,
                 swap_source: SwapSource,
                 price_source: PriceSource,
                 candle_source: CandleSource,
                 config: Optional[Config] = None,
                 logger: Any = None):
        self.swap_source = swap_source
        self.price_source = price_source
        self.candle_source = candle_source
        self.config = config or Config()
        self.logger = logger or AnalyzerLogger("sol_tracker.wallet_analyzer")

        params = self.config.analysis
        self.classifier = SwapClassifier(stable_mints=params.stable_mints)
        self.aggregator = PositionAggregator()
        self.reconciler = PriceReconciler(
            roundtrip_multiplier=params.roundtrip_multiplier,
            dust_threshold=params.dust_threshold,
        )
        self.summarizer = PortfolioSummarizer()

    def analyze_wallet(self, wallet: str, limit: Optional[int] = None) -> WalletReport:
        wallet = validate_wallet(wallet)
        limit = limit or self.config.sources.swap_limit

        self.logger.info(f"Fetching up to {limit} swaps for {wallet}")
        try:
            payload = self.swap_source.fetch_swaps(wallet, limit)
        except Exception as e:
            self.logger.error(f"Failed to fetch swaps for {wallet}: {str(e)}")
            raise

        events = decode_swap_events(payload)
        trades = self.classifier.classify_all(events, wallet)
        positions = self.aggregator.aggregate(trades)
        self.logger.info(
            f"Found {len(events)} swaps, {len(trades)} trades across {len(positions)} tokens"
        )

        analyses = []
        for i, position in enumerate(positions.values(), start=1):
            self.logger.info(f"Analyzing {i}/{len(positions)}: {position.mint}")
            analyses.append(self.analyze_position(position))

        return WalletReport(
            wallet=wallet,
            analyses=analyses,
            summary=self.summarizer.summarize(analyses),
            swaps_fetched=len(events),
            trades_classified=len(trades),
        )

    def analyze_position(self, position: Position) -> PositionAnalysis:
        """Attach current market data to the position and reconcile it"""
        try:
            info = self.price_source.current_price(position.mint)
        except Exception as e:
            self.logger.error(f"Failed to fetch price for {position.mint}: {str(e)}")
            info = None

        if info is None:
            self.logger.warning(f"No price data for {position.mint}")
        position.apply_price_info(info)

        candles: List[OHLCVCandle] = []
        if position.pair_address:
            candles = self._fetch_candles(position.pair_address, self.config.sources.ohlcv_limit)

        return self.reconciler.reconcile(position, candles)

    def analyze_manual_trade(self, trade: ManualTrade, now: Optional[int] = None) -> ManualTrade:
        """Returns the trade with a fresh analysis, or with None when there is not enough data"""
        candles = []
        if trade.pool_address:
            candles = self._fetch_candles(trade.pool_address, self.config.sources.manual_ohlcv_limit)
        if not candles:
            self.logger.info(f"No candle history for manual trade {trade.id}")
            return trade.with_analysis(None)

        return trade.with_analysis(self.reconciler.reconcile_manual(trade, candles, now=now))

    def _fetch_candles(self, pair_address: str, limit: int) -> List[OHLCVCandle]:
        try:
            candles = self.candle_source.ohlcv(pair_address, limit)
        except Exception as e:
            self.logger.error(f"Failed to fetch OHLCV for {pair_address}: {str(e)}")
            return []
        return sorted(candles or [], key=lambda c: c.timestamp)
