"""Tests for fitback/db/engine.py - engine and session management."""

import contextlib
from unittest.mock import patch

from sqlalchemy import inspect
from sqlmodel import Session

from fitback.db.engine import build_engine, get_session, init_db


def test_build_engine_sqlite_in_memory():
    engine = build_engine("sqlite://")

    assert engine.dialect.name == "sqlite"
    assert engine.url.database in (None, "")


def test_init_db_creates_users_table():
    engine = build_engine("sqlite://")

    init_db(engine)

    assert "users" in inspect(engine).get_table_names()


def test_init_db_is_idempotent():
    engine = build_engine("sqlite://")

    init_db(engine)
    init_db(engine)

    assert "users" in inspect(engine).get_table_names()


def test_get_session_uses_cached_engine():
    engine = build_engine("sqlite://")

    with patch("fitback.db.engine.get_engine", return_value=engine):
        gen = get_session()
        session = next(gen)
        assert isinstance(session, Session)
        assert session.get_bind() is engine
        with contextlib.suppress(StopIteration):
            next(gen)
