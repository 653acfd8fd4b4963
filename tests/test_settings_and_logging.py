#!/usr/bin/env python3
"""
Tests for runtime settings and logging setup.
"""

import json
import logging

import pytest

from behaviorkit.config import Settings, get_settings, reset_settings
from behaviorkit.errors import MisconfigurationError
from behaviorkit.logging_setup import ensure_logger, setup_logging


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.auto_init is True
        assert settings.collision_policy == "reject"
        assert settings.search_paths == ()

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("BEHAVIORKIT_AUTO_INIT", "false")
        monkeypatch.setenv("BEHAVIORKIT_COLLISION_POLICY", "LAST_WINS")
        monkeypatch.setenv("BEHAVIORKIT_SEARCH_PATHS", "a.{name}, b.behaviors.{name}")

        settings = Settings()
        assert settings.auto_init is False
        assert settings.collision_policy == "last_wins"
        assert settings.search_paths == ("a.{name}", "b.behaviors.{name}")

    def test_cached_until_reset(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("BEHAVIORKIT_COLLISION_POLICY", "last_wins")
        assert get_settings() is first

        reset_settings()
        assert get_settings().collision_policy == "last_wins"

    def test_invalid_policy(self, monkeypatch):
        monkeypatch.setenv("BEHAVIORKIT_COLLISION_POLICY", "merge")
        reset_settings()
        with pytest.raises(MisconfigurationError):
            get_settings()

    def test_search_path_needs_placeholder(self):
        with pytest.raises(MisconfigurationError):
            Settings(search_paths=("app.behaviors",)).validate()


class TestLogging:
    @pytest.fixture(autouse=True)
    def _restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_stdout_config(self, monkeypatch):
        monkeypatch.delenv("BEHAVIORKIT_LOGCFG", raising=False)
        setup_logging("DEBUG")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert any(isinstance(h, logging.StreamHandler) for h in root.handlers)

    def test_json_config_file(self, tmp_path, monkeypatch):
        cfg = {
            "version": 1,
            "disable_existing_loggers": False,
            "root": {"level": "WARNING", "handlers": []},
        }
        path = tmp_path / "logging.json"
        path.write_text(json.dumps(cfg))
        monkeypatch.setenv("BEHAVIORKIT_LOGCFG", str(path))

        setup_logging()
        assert logging.getLogger().level == logging.WARNING

    def test_yaml_config_file(self, tmp_path, monkeypatch):
        path = tmp_path / "logging.yaml"
        path.write_text(
            "version: 1\n"
            "disable_existing_loggers: false\n"
            "root:\n"
            "  level: ERROR\n"
            "  handlers: []\n"
        )
        monkeypatch.setenv("BEHAVIORKIT_LOGCFG", str(path))

        setup_logging()
        assert logging.getLogger().level == logging.ERROR

    def test_ensure_logger(self):
        logger = ensure_logger("behaviorkit.test", "warning")
        assert logger.level == logging.WARNING
        assert logger.propagate is True

    def test_bind_is_logged(self, posts, caplog):
        with caplog.at_level(logging.DEBUG, logger="behaviorkit"):
            posts.bind_behavior("MockFly")
        assert any("Bound behavior MockFly" in r.getMessage() for r in caplog.records)
