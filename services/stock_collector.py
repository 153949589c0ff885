"""Stock data collector.

There is no market data feed behind this collector: companies in the ticker
table get simulated quotes, every other company gets an empty ``StockData``.
"""

from typing import Dict, Optional

import structlog

from schemas.brief import StockData
from services.simulation import CollectorResult, SimulationMode

logger = structlog.get_logger()

STOCK_TICKERS: Dict[str, str] = {
    "shopify": "SHOP",
    "apple": "AAPL",
    "microsoft": "MSFT",
    "google": "GOOGL",
    "amazon": "AMZN",
    "meta": "META",
    "tesla": "TSLA",
    "netflix": "NFLX",
}


def lookup_ticker(company_name: str) -> Optional[str]:
    return STOCK_TICKERS.get(company_name.strip().lower())


class StockCollector:
    """Maps a company to a ticker and produces simulated market data for it."""

    @property
    def is_available(self) -> bool:
        """Always False: no live market data source is wired in."""
        return False

    async def collect(self, company_name: str, simulation: SimulationMode) -> CollectorResult[StockData]:
        ticker = lookup_ticker(company_name)
        if not ticker:
            logger.info("No ticker known for company", company=company_name)
            return CollectorResult(StockData(), is_simulated=False)

        logger.info("Simulating stock data", company=company_name, ticker=ticker)
        return CollectorResult(simulation.stock(ticker), is_simulated=True)


# Global collector instance
stock_collector = StockCollector()
