"""Infrastructure adapters for the trading bounded context."""
