"""
Engine and session management for the task store.

DATABASE_URL selects the backend (SQLite file by default). The in-memory
SQLite URL gets a single shared connection so every session sees the same
tables, which is what the test suite and throwaway demos rely on.
"""

import os
import logging
from pathlib import Path
from typing import Generator, Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

project_root = Path(__file__).parent.parent.parent
load_dotenv(project_root / ".env")

DEFAULT_DATABASE_URL = f"sqlite:///{project_root / 'taskflow.db'}"
IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """
    Build an engine for the given URL.

    SQLite connections are shared across FastAPI's worker threads, and an
    in-memory database is pinned to one connection via StaticPool.
    """
    kwargs = {"echo": echo}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in IN_MEMORY_URLS:
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


DATABASE_URL = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
engine = create_db_engine(DATABASE_URL, echo=os.getenv("DB_ECHO", "false").lower() == "true")
SessionLocal = make_session_factory(engine)


def init_db(bind: Optional[Engine] = None):
    """Create all task store tables on the given engine (module engine by default)."""
    from taskflow.db.models import Base
    target = bind or engine
    Base.metadata.create_all(bind=target)
    logger.info(f"Task store ready at {target.url.render_as_string(hide_password=True)}")


def get_session() -> Session:
    return SessionLocal()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a request-scoped session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
