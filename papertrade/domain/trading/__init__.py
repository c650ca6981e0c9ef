"""
Trading bounded context: domain layer.

This module contains all domain logic for the trading context:
- Product catalog
- Buy/sell ledger and wallet debits
- Portfolio positions (weighted-average cost)
- Watchlist, pending orders and price alerts
"""
