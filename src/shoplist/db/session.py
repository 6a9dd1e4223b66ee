"""Database session management for the shoplist document store."""
from contextlib import contextmanager
from typing import Generator, Optional
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from shoplist.config.settings import get_settings


def make_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Create an engine for the document store.

    Args:
        url: Database URL (default: settings.SYNC_DB_URL)
        echo: Log SQL statements (default: settings.SYNC_DB_ECHO)

    Returns:
        A configured SQLAlchemy engine. SQLite connections may be shared
        across threads; in-memory databases use a single static connection.
    """
    settings = get_settings()
    url = url or settings.SYNC_DB_URL
    echo = settings.SYNC_DB_ECHO if echo is None else echo

    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url == "sqlite://":
            kwargs["poolclass"] = StaticPool

    return create_engine(url, echo=echo, **kwargs)


def make_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to an engine."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


@contextmanager
def session_scope(factory: sessionmaker) -> Generator[Session, None, None]:
    """Provide a transactional scope around a series of operations."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
