# app/core/database.py

import logging

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Owns the engine (connection pool) and the session factory.

    One instance is created per application (``app.state.database``);
    tables are ensured at startup and the pool is disposed on shutdown.
    """

    def __init__(self, url: str, *, echo: bool = False) -> None:
        # SQLite needs check_same_thread=False when sessions cross threads
        if url.startswith("sqlite"):
            self.engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                echo=echo,
                future=True,
            )
        else:
            self.engine = create_engine(
                url,
                echo=echo,
                future=True,
                pool_pre_ping=True,
            )

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self._tables_ready = False

    def create_all(self) -> None:
        # Models must be imported before this runs so they are on Base.metadata
        import app.models.category  # noqa: F401
        import app.models.product  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        self._tables_ready = True
        logger.info("Database tables ensured (%s)", self.engine.url.render_as_string(hide_password=True))

    def session(self):
        if not self._tables_ready:
            self.create_all()
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database pool disposed")


def get_db(request: Request):
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
