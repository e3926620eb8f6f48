"""Database engine and session management."""

import logging

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from core.models import Base
from modules.planning import models as planning_models  # noqa: F401  registers tables on Base

logger = logging.getLogger(__name__)


def _configure_sqlite_connection(dbapi_connection, connection_record):
    # Hand transaction control to SQLAlchemy; pysqlite would otherwise skip BEGIN before SELECT
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    # SQLite only enforces REFERENCES / ON DELETE CASCADE when asked per connection
    cursor.execute("PRAGMA foreign_keys=ON")
    # WAL lets a writer commit while a reader keeps its own snapshot
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def _begin_sqlite_transaction(conn):
    conn.exec_driver_sql("BEGIN")


def create_db_engine(database_url: str) -> Engine:
    is_sqlite = database_url.startswith("sqlite")
    engine = create_engine(
        database_url,
        connect_args={"check_same_thread": False} if is_sqlite else {},
    )
    if is_sqlite:
        event.listen(engine, "connect", _configure_sqlite_connection)
        event.listen(engine, "begin", _begin_sqlite_transaction)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)
    logger.info("Storage schema ready: %s", ", ".join(sorted(Base.metadata.tables)))
