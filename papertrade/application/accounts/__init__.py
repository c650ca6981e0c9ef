"""Use cases for the accounts bounded context."""
