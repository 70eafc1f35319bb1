from decimal import Decimal

import pytest

from sol_tracker.data.sources import CandleSource, PriceSource, SwapSource, decode_candles, decode_swap_events
from conftest import TOKEN_MINT, WALLET


def test_decode_candles_sorts_and_skips_malformed_rows():
    rows = [
        [1_700_007_200, "0.2", "0.25", "0.18", "0.22", "1000"],
        [1_700_003_600, 0.1, 0.15, 0.09, 0.12],
        ["bad", 1, 1, 1, 1],
        [1_700_010_800, 0.1, None, 0.1, 0.1],
        [1_700_000_000, 1, 2],
    ]
    candles = decode_candles(rows)

    assert [c.timestamp for c in candles] == [1_700_003_600, 1_700_007_200]
    assert candles[0].high == Decimal("0.15")
    assert candles[0].volume == 0
    assert candles[1].volume == Decimal("1000")


def test_decode_candles_empty():
    assert decode_candles([]) == []
    assert decode_candles(None) == []


def test_decode_swap_events_drops_non_swaps():
    payload = [
        {"signature": "a", "timestamp": 1, "events": {"swap": {
            "nativeInput": {"account": WALLET, "amount": "1000000000"},
            "tokenOutputs": [{"mint": TOKEN_MINT, "rawTokenAmount": {"tokenAmount": "5000", "decimals": 2}}],
        }}},
        {"signature": "b", "timestamp": 2, "events": {}},
        None,
    ]
    events = decode_swap_events(payload)

    assert [e.signature for e in events] == ["a"]
    assert events[0].output_leg.amount == Decimal("50")


@pytest.mark.parametrize("call", [
    lambda: SwapSource().fetch_swaps(WALLET, 10),
    lambda: PriceSource().current_price(TOKEN_MINT),
    lambda: CandleSource().ohlcv("pair", 10),
])
def test_sources_are_abstract(call):
    with pytest.raises(NotImplementedError):
        call()
