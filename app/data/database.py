# app/data/database.py
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.domain.errors import StoreUnavailable
from app.utils.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    pass


def make_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # in-memory sqlite lives only as long as its single connection
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    # models have to be imported before create_all so Base.metadata knows them
    from app.data import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def ping(engine: Engine) -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def get_db(request: Request) -> Iterator[Session]:
    """Per-request session built from the factory the entry point put on app.state."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def store_errors(db: Session, operation: str) -> Iterator[None]:
    """Roll back and re-raise any SQLAlchemy failure as StoreUnavailable."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Store failure during {operation}: {e}")
        raise StoreUnavailable(f"Store failure during {operation}") from e
