"""User record store engine and session factory.

The engine is built on first use from the process settings, so importing this
module never reads configuration.
"""

from collections.abc import Generator
from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from fitback.core.settings import get_settings


def build_engine(database_url: str) -> Engine:
    connect_args: dict[str, object] = {}
    if database_url.startswith("sqlite"):
        # Required for SQLite when used with FastAPI across threads.
        connect_args = {"check_same_thread": False}
    return create_engine(database_url, echo=False, connect_args=connect_args)


@lru_cache
def get_engine() -> Engine:
    return build_engine(get_settings().database_url)


def init_db(engine: Engine | None = None) -> None:
    """Create tables that don't exist yet."""
    # Import table models so SQLModel registers them in metadata.
    from fitback.user.models import User  # noqa: F401

    SQLModel.metadata.create_all(engine or get_engine())


def get_session() -> Generator[Session, None, None]:
    with Session(get_engine()) as session:
        yield session
