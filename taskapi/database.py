import logging
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base

logger = logging.getLogger(__name__)

Base = declarative_base()


def _ensure_sqlite_dir(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return
    db = url.database
    if not db or db == ":memory:" or db.startswith("file:"):
        return
    Path(db).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)


def build_engine(database_url: str, echo: bool = False) -> Engine:
    _ensure_sqlite_dir(database_url)
    # Only apply sqlite-specific connect_args when using sqlite
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    # pool_pre_ping avoids handing out stale connections for server databases
    return create_engine(
        database_url,
        connect_args=connect_args,
        pool_pre_ping=True,
        echo=echo,
    )


def init_database(engine: Engine) -> sessionmaker:
    """Create the tasks table if absent and return a session factory bound to ``engine``.

    A database that cannot be opened is fatal: the error is logged and re-raised.
    """
    # models must be imported so the table is registered on Base.metadata
    from taskapi.models import task  # noqa: F401

    safe_url = engine.url.render_as_string(hide_password=True)
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError:
        logger.critical("Database connection error url=%s", safe_url)
        raise
    logger.info("Database ready url=%s", safe_url)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
