# modhall/db/database.py
from __future__ import annotations
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

logger = logging.getLogger(__name__)

__all__ = ["Database"]



class Database:
    """
    One engine + session factory per library. Not a module global, so tests can
    open as many isolated databases as they like.
    """
    def __init__(self, url: str, **engineKwargs):
        self.url = url
        connectArgs = {}
        if url.startswith("sqlite"):
            connectArgs = {"check_same_thread": False}
        self.engine = create_engine(url, connect_args=connectArgs, pool_pre_ping=True, echo=False, **engineKwargs)
        if url.startswith("sqlite"):
            event.listen(self.engine, "connect", _sqliteOnConnect)
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
            expire_on_commit=False,
        )
        Base.metadata.create_all(self.engine)
        logger.debug("Database ready at %s", url)

    @classmethod
    def forPath(cls, path: Path | str) -> Database:
        dbPath = Path(path)
        dbPath.parent.mkdir(parents=True, exist_ok=True)
        return cls(f"sqlite:///{dbPath.as_posix()}")

    @classmethod
    def inMemory(cls) -> Database:
        # One shared connection, otherwise every session sees a fresh empty database
        return cls("sqlite://", poolclass=StaticPool)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Commit on success, roll back on error, always close."""
        db = self.SessionLocal()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def healthCheck(self) -> bool:
        try:
            with self.session() as db:
                db.execute(text("SELECT 1"))
            return True
        except Exception as err:
            logger.error("Database health check failed: %s", err)
            return False

    def dispose(self) -> None:
        self.engine.dispose()



def _sqliteOnConnect(dbapiConnection, _connectionRecord) -> None:
    cursor = dbapiConnection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL")
    finally:
        cursor.close()
