"""
Engine construction and schema management.

PostgreSQL is the production target. SQLite is supported for local
development and tests; every SQLite transaction is opened with
BEGIN IMMEDIATE so concurrent writers serialize the way row locks
serialize them on PostgreSQL.
"""

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url

from papertrade.core.config import Settings
from papertrade.infrastructure.database.tables import metadata

logger = logging.getLogger(__name__)


def _enable_sqlite_locking(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _connection_record) -> None:
        # Let SQLAlchemy emit BEGIN itself instead of pysqlite
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(settings: Settings) -> Engine:
    """Build the application's SQLAlchemy engine.

    Args:
        settings: Application settings carrying the database URL.

    Returns:
        A pooled Engine. Callers own it and must dispose it.
    """
    url = make_url(settings.get_database_url())

    if url.get_backend_name() == "sqlite":
        engine = create_engine(
            url,
            echo=settings.sql_echo,
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        _enable_sqlite_locking(engine)
    else:
        engine = create_engine(
            url,
            echo=settings.sql_echo,
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
        )

    logger.info("Database engine created: backend=%s", url.get_backend_name())
    return engine


def create_schema(engine: Engine) -> None:
    """Create every missing table. Existing tables are left untouched."""
    metadata.create_all(engine)
    logger.info("Database schema ensured (%d tables).", len(metadata.tables))


def drop_schema(engine: Engine) -> None:
    metadata.drop_all(engine)
    logger.warning("Database schema dropped.")
