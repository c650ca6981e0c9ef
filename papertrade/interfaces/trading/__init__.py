"""HTTP interface for the trading bounded context."""
