"""
Tests for application wiring: log handlers and the shared database.
"""
import logging
import threading
from logging.handlers import TimedRotatingFileHandler

from app.config import Settings
from app.infrastructure import database as database_module
from app.main import build_log_handlers


class TestLogHandlers:
    """Tests for console and file logging setup."""

    def test_console_only_when_file_logging_off(self, tmp_path):
        handlers = build_log_handlers(Settings(log_to_file=False, log_dir=str(tmp_path / "logs")))

        assert [type(h) for h in handlers] == [logging.StreamHandler]
        assert not (tmp_path / "logs").exists()

    def test_file_handler_rotates_at_midnight(self, tmp_path):
        handlers = build_log_handlers(Settings(log_to_file=True, log_dir=str(tmp_path / "logs")))
        file_handler = handlers[-1]
        try:
            assert isinstance(file_handler, TimedRotatingFileHandler)
            assert file_handler.when == "MIDNIGHT"
            assert file_handler.baseFilename == str(tmp_path / "logs" / "app.log")
        finally:
            file_handler.close()


class TestDatabaseSingleton:
    """Tests for the lazily created shared database."""

    def test_concurrent_callers_share_one_instance(self, monkeypatch):
        monkeypatch.setattr(database_module, "_database", None)
        results = []
        start = threading.Barrier(8)

        def worker():
            start.wait()
            results.append(database_module.get_database())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        try:
            assert len(results) == 8
            assert all(db is results[0] for db in results)
        finally:
            results[0].dispose()
