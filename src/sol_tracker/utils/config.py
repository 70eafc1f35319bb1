from dataclasses import dataclass, field
from decimal import Decimal
from typing import List
import os

import yaml
from dotenv import load_dotenv

from sol_tracker.core.constants import (
    DEFAULT_OHLCV_LIMIT,
    DEFAULT_SWAP_LIMIT,
    DUST_THRESHOLD,
    MANUAL_OHLCV_LIMIT,
    ROUNDTRIP_MULTIPLIER,
    STABLECOIN_MINTS,
)

# Load environment variables
load_dotenv()


@dataclass
class AnalysisParameters:
    """Reconciliation thresholds"""
    roundtrip_multiplier: Decimal = ROUNDTRIP_MULTIPLIER  # post-buy high vs avg buy price
    dust_threshold: Decimal = DUST_THRESHOLD              # tokens held above this => HOLDING
    stable_mints: List[str] = field(default_factory=lambda: sorted(STABLECOIN_MINTS))

    def __post_init__(self):
        self.roundtrip_multiplier = Decimal(str(self.roundtrip_multiplier))
        self.dust_threshold = Decimal(str(self.dust_threshold))
        if self.roundtrip_multiplier <= 0:
            raise ValueError(f"roundtrip_multiplier must be positive, got {self.roundtrip_multiplier}")
        if self.dust_threshold < 0:
            raise ValueError(f"dust_threshold must not be negative, got {self.dust_threshold}")


@dataclass
class SourceParameters:
    """How much history to request from collaborators"""
    swap_limit: int = DEFAULT_SWAP_LIMIT
    ohlcv_limit: int = DEFAULT_OHLCV_LIMIT
    manual_ohlcv_limit: int = MANUAL_OHLCV_LIMIT

    def __post_init__(self):
        for name in ('swap_limit', 'ohlcv_limit', 'manual_ohlcv_limit'):
            if int(getattr(self, name)) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")


class Config:
    def __init__(self, config_path: str = None):
        self.config_path = config_path or os.getenv('SOL_TRACKER_CONFIG', 'config.yaml')
        self.analysis = AnalysisParameters()
        self.sources = SourceParameters()

        if os.path.exists(self.config_path):
            self.load_config(self.config_path)

    def load_config(self, config_path: str):
        """Load configuration from YAML file"""
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}

        if 'analysis' in config_data:
            self.analysis = AnalysisParameters(**config_data['analysis'])
        if 'sources' in config_data:
            self.sources = SourceParameters(**config_data['sources'])
