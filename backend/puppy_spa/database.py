import os
from pathlib import Path
from typing import Generator

from dotenv import load_dotenv
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./puppy_spa.db")

_echo = os.getenv("SQL_ECHO", "false").lower() in ("true", "1", "yes")


def _use_immediate_transactions(engine: Engine) -> None:
    """
    Make every SQLite transaction take the write lock up front.

    pysqlite only emits BEGIN before the first write, so a SELECT ... FOR UPDATE
    followed by reads would otherwise run outside any transaction. With
    BEGIN IMMEDIATE the lock-read-write sequence of a position change holds
    the database write lock from its first statement.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """Build an engine; file-backed SQLite gets its directory and write locking."""
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo)

    # In-memory SQLite is a single connection; nothing to serialize.
    if ":memory:" in url:
        return create_engine(url, echo=echo, connect_args={"check_same_thread": False})

    db_path = url.replace("sqlite:///", "", 1)
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(url, echo=echo, connect_args={"check_same_thread": False})
    _use_immediate_transactions(engine)
    return engine


engine: Engine = create_db_engine(DATABASE_URL, echo=_echo)


def get_session() -> Generator[Session, None, None]:
    """Get database session"""
    with Session(engine) as session:
        yield session


def init_db() -> None:
    """Initialize database - create all tables"""
    # Import all models to ensure they're registered with SQLModel metadata
    from puppy_spa.models.waiting_list import WaitingList  # noqa: F401
    from puppy_spa.models.waiting_list_entry import WaitingListEntry  # noqa: F401

    SQLModel.metadata.create_all(engine)
