"""Use cases for the trading bounded context."""
