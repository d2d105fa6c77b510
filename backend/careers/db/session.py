"""
Database engine and per-request sessions.

The app factory owns one ``Database``; each request borrows a ``Session``
from it through ``get_db`` and hands it back on every exit path.
"""

from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from careers.db.base import Base


class Database:
    def __init__(self, url: str, echo: bool = False):
        connect_args = {}
        if url.startswith("sqlite"):
            # Requests are served from a thread pool
            connect_args["check_same_thread"] = False

        self.engine: Engine = create_engine(url, echo=echo, connect_args=connect_args)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

        if url.startswith("sqlite"):
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

    def create_all(self) -> None:
        # Import all models so SQLAlchemy can discover them for table creation
        import careers.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_db(request: Request) -> Iterator[Session]:
    """FastAPI dependency yielding a session that is always closed."""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
