"""
Tests for session handling in the database module.
"""

import pytest

from bar_archive.models import Bar
from bar_archive.services.database import create_database_engine, session_scope


class TestSessionScope:
    def test_commits_on_success(self, test_db):
        with session_scope() as session:
            session.add(Bar(name="Dante", slug="dante"))

        assert test_db().query(Bar).filter_by(slug="dante").count() == 1

    def test_rolls_back_on_error(self, test_db):
        with pytest.raises(RuntimeError):
            with session_scope() as session:
                session.add(Bar(name="Dante", slug="dante"))
                session.flush()
                raise RuntimeError("boom")

        assert test_db().query(Bar).count() == 0


class TestEngine:
    def test_foreign_keys_enabled(self):
        engine = create_database_engine("sqlite:///:memory:")
        try:
            with engine.connect() as conn:
                assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1
        finally:
            engine.dispose()
