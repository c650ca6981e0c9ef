"""Database engine, schema and unit of work."""
