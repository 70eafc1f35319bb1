from decimal import Decimal

import pytest

from sol_tracker.core.reconciler import PriceReconciler
from sol_tracker.core.types import ManualTrade
from conftest import TOKEN_MINT, make_candle

T0 = 1_700_000_000
T1 = T0 + 10 * 3600


def manual_trade(**overrides):
    params = dict(
        id="1",
        token_address=TOKEN_MINT,
        pool_address="pool1",
        buy_price=Decimal("1.0"),
        buy_amount=Decimal("50"),
        buy_timestamp=T0,
    )
    params.update(overrides)
    return ManualTrade(**params)


@pytest.fixture
def reconciler():
    return PriceReconciler()


def test_captured_share_of_available_upside(reconciler):
    trade = manual_trade(sell_price=Decimal("1.2"), sell_timestamp=T1)
    candles = [
        make_candle(T0, high="1.1", low="0.9"),
        make_candle(T0 + 3600, high="2.0", low="1.0"),
        make_candle(T1, high="1.3", low="1.1"),
    ]
    analysis = reconciler.reconcile_manual(trade, candles)

    assert analysis.pnl_percent == Decimal("20")
    assert analysis.max_gain_percent == Decimal("100")
    assert analysis.captured_percent == Decimal("20")
    assert analysis.min_price == Decimal("0.9")
    assert analysis.max_price == Decimal("2.0")
    assert analysis.max_drawdown_percent == Decimal("-10")
    assert analysis.candle_count == 3


def test_window_excludes_candles_outside_trade(reconciler):
    trade = manual_trade(sell_price=Decimal("1.2"), sell_timestamp=T1)
    candles = [
        make_candle(T0 - 1, high="10", low="0.1"),
        make_candle(T0 + 3600, high="1.5", low="0.95"),
        make_candle(T1 + 1, high="10", low="0.1"),
    ]
    analysis = reconciler.reconcile_manual(trade, candles)

    assert analysis.candle_count == 1
    assert analysis.max_price == Decimal("1.5")
    assert analysis.min_price == Decimal("0.95")


def test_no_candles_in_window_is_insufficient_data(reconciler):
    trade = manual_trade(sell_price=Decimal("1.2"), sell_timestamp=T1)

    assert reconciler.reconcile_manual(trade, []) is None
    assert reconciler.reconcile_manual(trade, [make_candle(T1 + 3600, high="2")]) is None


def test_open_trade_windows_to_now(reconciler):
    trade = manual_trade()
    candles = [make_candle(T0 + 3600, high="1.5", low="0.5"), make_candle(T0 + 7200, high="3", low="1")]
    analysis = reconciler.reconcile_manual(trade, candles, now=T0 + 3600)

    assert analysis.candle_count == 1
    assert analysis.pnl_percent is None
    assert analysis.captured_percent is None
    assert analysis.max_gain_percent == Decimal("50")
    assert analysis.max_drawdown_percent == Decimal("-50")


def test_no_upside_leaves_captured_undefined(reconciler):
    trade = manual_trade(sell_price=Decimal("0.8"), sell_timestamp=T1)
    analysis = reconciler.reconcile_manual(trade, [make_candle(T0 + 3600, high="0.9", low="0.7")])

    assert analysis.pnl_percent == Decimal("-20")
    assert analysis.max_gain_percent < 0
    assert analysis.captured_percent is None


def test_selling_above_tracked_peak_captures_over_hundred(reconciler):
    trade = manual_trade(sell_price=Decimal("1.6"), sell_timestamp=T1)
    analysis = reconciler.reconcile_manual(trade, [make_candle(T0 + 3600, high="1.4", low="1.0")])

    assert analysis.captured_percent == Decimal("150")


def test_zero_buy_price_is_not_analyzable(reconciler):
    trade = manual_trade(buy_price=Decimal(0))
    assert reconciler.reconcile_manual(trade, [make_candle(T0 + 3600, high="1")], now=T1) is None


def test_status_and_live_pnl():
    open_trade = manual_trade()
    closed_trade = manual_trade(sell_price=Decimal("1.5"), sell_timestamp=T1)

    assert open_trade.status == "open"
    assert open_trade.live_pnl_percent() is None
    assert open_trade.live_pnl_percent(Decimal("0.75")) == Decimal("-25")
    assert closed_trade.status == "closed"
    assert closed_trade.live_pnl_percent(Decimal("3")) == Decimal("50")


def test_from_stored_record():
    trade = ManualTrade.from_dict({
        "id": 1718000000000,
        "tokenAddress": TOKEN_MINT,
        "tokenSymbol": "POPCAT",
        "poolAddress": "pool1",
        "buyPrice": 0.5,
        "buyAmount": 100,
        "buyMarketCap": None,
        "buyTimestamp": "2024-01-01T00:00",
        "sellPrice": None,
        "sellTimestamp": None,
        "notes": "first entry",
    })

    assert trade.id == "1718000000000"
    assert trade.buy_price == Decimal("0.5")
    assert trade.buy_timestamp == 1704067200
    assert trade.sell_price is None
    assert trade.sell_timestamp is None
    assert trade.buy_market_cap is None
    assert trade.is_open


def test_with_analysis_returns_copy(reconciler):
    trade = manual_trade(sell_price=Decimal("1.2"), sell_timestamp=T1)
    analysis = reconciler.reconcile_manual(trade, [make_candle(T0 + 3600, high="2", low="1")])
    analyzed = trade.with_analysis(analysis)

    assert analyzed.analysis is analysis
    assert trade.analysis is None
