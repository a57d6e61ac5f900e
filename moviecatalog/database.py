# moviecatalog/database.py
from typing import Iterator

from fastapi import Request
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from moviecatalog.core.config import Settings

# registers the tables on SQLModel.metadata
import moviecatalog.models.user   # noqa: F401
import moviecatalog.models.movie  # noqa: F401

def build_engine(settings: Settings) -> Engine:
    """
    Build the connection pool shared by every request of one app instance.
    """
    url = make_url(settings.DATABASE_URL)
    kwargs = {"echo": settings.DB_ECHO, "pool_pre_ping": True}

    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": settings.DB_POOL_TIMEOUT,
        }
        if url.database in (None, "", ":memory:"):
            # a single shared connection, otherwise every checkout sees an empty db
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_size"] = settings.DB_POOL_SIZE
        kwargs["pool_timeout"] = settings.DB_POOL_TIMEOUT

    return create_engine(settings.DATABASE_URL, **kwargs)

def init_db(engine: Engine) -> None:
    """
    Create all tables that are defined via SQLModel subclasses.
    """
    SQLModel.metadata.create_all(engine)

def get_db(request: Request) -> Iterator[Session]:
    with Session(request.app.state.engine) as session:
        yield session
