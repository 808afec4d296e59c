"""
Tests for slug, datetime and configuration utilities.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from bar_archive.models import Bar, Cocktail
from bar_archive.utils import config as config_module
from bar_archive.utils.config import Config, get_config, reset_config
from bar_archive.utils.datetime_utils import to_iso8601, utc_now
from bar_archive.utils.slug_utils import create_slug


class TestCreateSlug:
    """Tests for create_slug()."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Negroni", "negroni"),
            ("Negroni Sbagliato", "negroni-sbagliato"),
            ("Crème de Cassis", "creme-de-cassis"),
            ("  Gin & Tonic  ", "gin-tonic"),
            ("Mai_Tai--Royal", "mai-tai-royal"),
            ("No. 3 Gin", "no-3-gin"),
        ],
    )
    def test_slug_from_name(self, name, expected):
        assert create_slug(name) == expected

    def test_empty_slug_raises(self):
        with pytest.raises(ValueError):
            create_slug("!!!")

    def test_unique_within_bar(self, db_session):
        bar = Bar(name="Bar", slug="bar")
        db_session.add(bar)
        db_session.flush()
        db_session.add(Cocktail(bar_id=bar.id, name="Negroni", slug="negroni"))
        db_session.add(Cocktail(bar_id=bar.id, name="Negroni 2", slug="negroni-1"))
        db_session.flush()

        assert create_slug("Negroni", db_session, Cocktail, bar.id) == "negroni-2"


class TestDatetimeUtils:
    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo is not None

    def test_iso8601_utc(self):
        value = datetime(2024, 5, 1, 12, 30, 5, 123456, tzinfo=timezone.utc)
        assert to_iso8601(value) == "2024-05-01T12:30:05.123Z"

    def test_iso8601_converts_offsets(self):
        value = datetime(2024, 5, 1, 14, 30, tzinfo=timezone(timedelta(hours=2)))
        assert to_iso8601(value) == "2024-05-01T12:30:00.000Z"

    def test_iso8601_naive_is_utc(self):
        assert to_iso8601(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05.000Z"


class TestConfig:
    """Tests for Config paths and the singleton."""

    def test_explicit_base_dir(self, tmp_path):
        config = Config(base_dir=tmp_path)
        assert config.uploads_dir == tmp_path / "uploads"
        assert config.backups_dir == tmp_path / "backups"
        assert config.database_url.startswith("sqlite:///")
        assert config.database_url.endswith("bar_archive.db")

    def test_home_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BAR_ARCHIVE_HOME", str(tmp_path))
        assert Config().base_dir == tmp_path

    def test_default_home(self, monkeypatch):
        monkeypatch.delenv("BAR_ARCHIVE_HOME", raising=False)
        assert Config().base_dir == Path.home() / ".bar_archive"

    def test_backup_path(self, tmp_path):
        config = Config(base_dir=tmp_path)
        path = config.get_backup_path(datetime(2024, 5, 1, 12, 30))
        assert path == tmp_path / "backups" / "202405011230_recipes.zip"

    def test_ensure_directories(self, tmp_path):
        config = Config(base_dir=tmp_path / "home")
        config.ensure_directories()
        assert config.uploads_dir.is_dir()
        assert config.backups_dir.is_dir()

    def test_singleton(self, monkeypatch):
        reset_config()
        monkeypatch.setenv("BAR_ARCHIVE_ENV", "development")
        try:
            first = get_config()
            assert first.is_development
            assert get_config() is first
            assert get_config("production") is first
        finally:
            reset_config()
        assert config_module._config is None
