"""
Infrastructure layer package.

Contains adapters that implement domain ports:
SQL repositories, the unit of work, caches and security services.
"""
