"""
Tests for settings, logging setup and wiring.
"""

from unittest.mock import MagicMock, patch

import pytest
import structlog
from pydantic import ValidationError

import database
from config import Settings
from facade import LibraryFacade
from main import configure_logging, create_library
from notifications import LoggingNotificationSink, NullNotificationSink
from repositories import MongoBookStore


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("DATABASE_NAME", raising=False)
        settings = Settings(_env_file=None)
        assert settings.DATABASE_URL == "mongodb://localhost:27017"
        assert settings.DATABASE_NAME == "library"
        assert settings.NOTIFICATIONS_ENABLED is True

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_NAME", "branch_42")
        monkeypatch.setenv("NOTIFICATIONS_ENABLED", "false")
        settings = Settings(_env_file=None)
        assert settings.DATABASE_NAME == "branch_42"
        assert settings.NOTIFICATIONS_ENABLED is False

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    def test_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, LOG_LEVEL="LOUD")


class TestConfigureLogging:
    def test_json_renderer(self):
        with patch("main.structlog.configure") as configure, patch("main.logging.basicConfig"):
            configure_logging(Settings(_env_file=None, LOG_JSON=True))
        processors = configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer_and_level(self):
        with patch("main.structlog.configure") as configure, patch("main.logging.basicConfig") as basic:
            configure_logging(Settings(_env_file=None, LOG_LEVEL="WARNING"))
        assert isinstance(configure.call_args.kwargs["processors"][-1], structlog.dev.ConsoleRenderer)
        assert basic.call_args.kwargs["level"] == "WARNING"


class TestDatabaseClient:
    def test_client_is_created_once_and_closed(self):
        settings = Settings(_env_file=None, DATABASE_NAME="branch_7")
        with patch("database.MongoClient") as client_cls:
            try:
                db = database.get_db(settings)
                database.get_db(settings)
            finally:
                database.close_client()

        client_cls.assert_called_once_with(
            "mongodb://localhost:27017", serverSelectionTimeoutMS=5000, tz_aware=True
        )
        client_cls.return_value.__getitem__.assert_called_with("branch_7")
        assert db is client_cls.return_value.__getitem__.return_value
        client_cls.return_value.close.assert_called_once()
        assert database._client is None


class TestCreateLibrary:
    def test_wires_mongo_stores(self):
        db = MagicMock()
        library = create_library(Settings(_env_file=None), db=db)

        assert isinstance(library, LibraryFacade)
        assert isinstance(library.books.store, MongoBookStore)
        assert isinstance(library.notifier, LoggingNotificationSink)
        db.__getitem__.assert_any_call("book")
        db.__getitem__.assert_any_call("member")
        db.__getitem__.return_value.create_index.assert_any_call("isbn", unique=True)
        db.__getitem__.return_value.create_index.assert_any_call("email", unique=True)

    def test_notifications_disabled(self):
        library = create_library(Settings(_env_file=None, NOTIFICATIONS_ENABLED=False), db=MagicMock())
        assert isinstance(library.notifier, NullNotificationSink)
        assert library.checkout.notifier is library.notifier
