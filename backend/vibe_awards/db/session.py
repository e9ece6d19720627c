"""Async database session and engine configuration."""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from vibe_awards.config import settings


def _install_sqlite_listeners(engine: AsyncEngine, immediate: bool) -> None:
    """Enforce foreign keys and take over BEGIN emission on SQLite.

    pysqlite defers BEGIN until the first DML statement, which breaks
    SAVEPOINT and lets two readers deadlock when both upgrade to writers.
    Emitting our own BEGIN (IMMEDIATE by default) makes every transaction
    grab the write lock up front, so writers queue on the busy timeout.
    """
    begin_statement = "BEGIN IMMEDIATE" if immediate else "BEGIN"

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql(begin_statement)


def build_engine(url: str, **kwargs) -> AsyncEngine:
    """Create an async engine with the driver-specific setup applied.

    SQLite doesn't support pool_size / max_overflow / pool_pre_ping, and
    needs the listeners above for savepoints and foreign keys.
    """
    is_sqlite = url.startswith("sqlite")
    engine_kwargs: dict = {"echo": settings.DEBUG}
    if is_sqlite:
        engine_kwargs["connect_args"] = {"timeout": settings.SQLITE_BUSY_TIMEOUT_SECONDS}
    else:
        engine_kwargs.update(pool_size=20, max_overflow=10, pool_pre_ping=True)
    engine_kwargs.update(kwargs)

    engine = create_async_engine(url, **engine_kwargs)
    if is_sqlite:
        _install_sqlite_listeners(engine, immediate=settings.SQLITE_IMMEDIATE_TRANSACTIONS)
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


engine = build_engine(settings.DATABASE_URL)

async_session_factory = build_session_factory(engine)
