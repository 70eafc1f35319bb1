from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pandas as pd

from sol_tracker.analysis.portfolio import PortfolioSummarizer, PortfolioSummary
from sol_tracker.core.types import PositionAnalysis


class AnalysisExporter:
    def __init__(self, results_dir: str = "results", summarizer: Optional[PortfolioSummarizer] = None):
        self.results_dir = Path(results_dir)
        self.results_dir.mkdir(parents=True, exist_ok=True)
        self.summarizer = summarizer or PortfolioSummarizer()

    def export_positions(self, analyses: List[PositionAnalysis], wallet: str, sort_by: str = 'pnl') -> Path:
        """Export one row per position, sorted the same way the report is"""
        ordered = self.summarizer.sort(analyses, sort_by)
        df = self.summarizer.to_dataframe(ordered)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = self.results_dir / f"positions_{wallet[:8]}_{timestamp}.csv"
        df.to_csv(path, index=False)
        return path

    def export_summary(self, summary: PortfolioSummary, wallet: str) -> Path:
        flat_data = {'wallet': wallet}
        for metric, value in asdict(summary).items():
            flat_data[metric] = float(value) if not isinstance(value, int) else value
        flat_data['total_pnl'] = float(summary.total_pnl)

        df = pd.DataFrame([flat_data])
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = self.results_dir / f"summary_{wallet[:8]}_{timestamp}.csv"
        df.to_csv(path, index=False)
        return path
