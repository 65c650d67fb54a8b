import logging

from account_server.core.config import Settings
from account_server.core.logging import setup_logging


def test_nested_sections_read_from_environment(monkeypatch):
    monkeypatch.setenv("DATABASE__URL", "sqlite+aiosqlite:///./other.db")
    monkeypatch.setenv("SERVER__PORT", "9100")
    monkeypatch.setenv("SECURITY__BCRYPT_ROUNDS", "5")
    monkeypatch.setenv("LOGGING__LEVEL", "DEBUG")

    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite+aiosqlite:///./other.db"
    assert settings.port == 9100
    assert settings.security.bcrypt_rounds == 5
    assert settings.log_level == "DEBUG"


def test_setup_logging_writes_daily_and_error_files(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    settings = Settings(_env_file=None, logging={"level": "INFO", "directory": tmp_path})

    try:
        setup_logging(settings, app_name="accounts_test")
        logging.getLogger("account_server.tests").error("boom")
        for handler in root.handlers:
            handler.flush()

        names = sorted(path.name for path in tmp_path.iterdir())
        assert len(names) == 2
        assert names[0].startswith("accounts_test_")
        assert any(name.startswith("accounts_test_error_") for name in names)
        error_file = next(tmp_path.glob("accounts_test_error_*.log"))
        assert "boom" in error_file.read_text(encoding="utf-8")
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    finally:
        for handler in root.handlers:
            if handler not in saved_handlers:
                handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
