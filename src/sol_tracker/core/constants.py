from decimal import Decimal
from solders.pubkey import Pubkey

# Mints
WRAPPED_SOL_MINT = Pubkey.from_string("So11111111111111111111111111111111111111112")
USDC_MINT = Pubkey.from_string("EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v")
USDT_MINT = Pubkey.from_string("Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB")

SOL_MINT = str(WRAPPED_SOL_MINT)
STABLECOIN_MINTS = frozenset({str(USDC_MINT), str(USDT_MINT)})

NATIVE_DECIMALS = 9
DEFAULT_TOKEN_DECIMALS = 9

# Reconciliation thresholds
ROUNDTRIP_MULTIPLIER = Decimal("1.5")  # post-buy high vs avg buy price
DUST_THRESHOLD = Decimal("0.001")      # tokens held above this => HOLDING

# Provider request sizes
DEFAULT_SWAP_LIMIT = 100
DEFAULT_OHLCV_LIMIT = 168    # one week of hourly candles
MANUAL_OHLCV_LIMIT = 1000
