"""Engine and session plumbing.

One engine per process, built from ``DATABASE_URL``. Request handlers get a
session through ``get_db`` and commit explicitly; every request is its own
unit of work. SQLite only enforces foreign keys when asked, so the pragma is
set on every new connection.
"""
from __future__ import annotations
from typing import Generator
from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker, declarative_base, Session

from .errors import Conflict
from .utils.settings import DATABASE_URL

engine_kwargs = dict(pool_pre_ping=True, future=True)
# the file store is shared by the worker threads uvicorn runs sync endpoints on
if DATABASE_URL.startswith("sqlite"):
    engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False}, **engine_kwargs)

    @event.listens_for(engine, "connect")
    def _sqlite_pragmas(dbapi_connection, _):
        cur = dbapi_connection.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()
else:
    engine = create_engine(DATABASE_URL, **engine_kwargs)

Base = declarative_base()
# objects stay readable after commit; handlers serialise them once the row is saved
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False, future=True)

def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def commit_or_conflict(db: Session, message: str) -> None:
    """Commit, turning a constraint violation into ``Conflict(message)``."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise Conflict(message) from e

__all__ = ["DATABASE_URL", "engine", "Base", "SessionLocal", "get_db", "commit_or_conflict"]
