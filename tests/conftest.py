"""Pytest configuration and fixtures for Bar Archive tests."""

import pytest
from sqlalchemy.orm import sessionmaker, scoped_session

from bar_archive.models.base import Base
from bar_archive.services.database import create_database_engine
from bar_archive.services.media_storage import MediaStorage
from bar_archive.utils.config import Config, reset_config, set_config


@pytest.fixture(scope="function")
def test_db(monkeypatch):
    """In-memory SQLite schema, fresh for every test.

    Services that open their own session_scope() get sessions from the
    scoped_session yielded here, so tests and services see the same data.
    """
    import bar_archive.models  # noqa: F401
    import bar_archive.services.database as db_module

    engine = create_database_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    Session = scoped_session(sessionmaker(bind=engine, expire_on_commit=False))
    monkeypatch.setattr(db_module, "get_session_factory", lambda: Session)

    yield Session

    Session.remove()
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(test_db):
    """Provide a database session for tests."""
    return test_db()


@pytest.fixture
def app_config(tmp_path):
    """Install a Config rooted in a temporary directory."""
    config = Config(base_dir=tmp_path / "home")
    config.ensure_directories()
    set_config(config)
    yield config
    reset_config()


@pytest.fixture
def uploads_dir(tmp_path):
    """Empty uploads root for image files."""
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def media_storage(uploads_dir):
    """MediaStorage reading from the temporary uploads root."""
    return MediaStorage(uploads_dir)
